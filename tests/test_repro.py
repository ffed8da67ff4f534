from ciphertrace import run_cipher
from ciphertrace.config import Settings
from ciphertrace.utils.repro import make_run_dir, read_json, write_json


def test_trace_json_export_reads_back(tmp_path):
    trace = run_cipher("DES", "encrypt", "HELLO123", "SECRETKY", settings=Settings())
    paths = make_run_dir(tmp_path, "des encrypt")
    assert paths.run_dir.parent == tmp_path
    assert paths.run_dir.name.endswith("_des_encrypt")

    write_json(paths.trace_json, trace.to_dict())
    loaded = read_json(paths.trace_json)
    assert loaded == trace.to_dict()
    assert len(loaded["steps"]) == 20
