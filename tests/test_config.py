from ciphertrace.config import Settings, load_settings


def test_settings_defaults():
    s = Settings()
    assert s.strict_hex is False
    assert s.decrypt_fallback is False
    assert s.global_seed == 1337


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("STRICT_HEX", "yes")
    monkeypatch.setenv("DECRYPT_FALLBACK", "0")
    monkeypatch.setenv("GLOBAL_SEED", "42")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    load_settings.cache_clear()
    try:
        s = load_settings()
        assert s.strict_hex is True
        assert s.decrypt_fallback is False
        assert s.global_seed == 42
        assert s.log_level == "DEBUG"
    finally:
        load_settings.cache_clear()
