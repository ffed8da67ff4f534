from ciphertrace.cipher import aes_trace, des_trace
from ciphertrace.cipher.codec import block_to_text, state_to_block
from ciphertrace.cipher.trace import Transform, fold


# ---------------------------------------------------------------------------
# AES
# ---------------------------------------------------------------------------

AES_PT = b"HELLO AES WORLD!"
AES_KEY = b"MYSECRETKEY12345"


def test_aes_encrypt_trace_shape():
    trace = aes_trace.encrypt_with_trace(AES_PT, AES_KEY)
    assert len(trace) == 43
    ops = [s.operation for s in trace]
    assert ops[:4] == ["input", "block_to_state", "key_expansion", "add_round_key"]
    assert ops[4:8] == ["sub_bytes", "shift_rows", "mix_columns", "add_round_key"]
    assert ops[-3:] == ["sub_bytes", "shift_rows", "add_round_key"]
    assert ops.count("mix_columns") == 9
    assert trace[-1].round_index == 10


def test_aes_decrypt_trace_shape():
    ct = aes_trace.encrypt_with_trace(AES_PT, AES_KEY).output
    trace = aes_trace.decrypt_with_trace(ct, AES_KEY)
    assert len(trace) == 43
    ops = [s.operation for s in trace]
    assert ops[4:8] == ["inv_shift_rows", "inv_sub_bytes", "add_round_key", "inv_mix_columns"]
    assert ops[-3:] == ["inv_shift_rows", "inv_sub_bytes", "add_round_key"]
    assert ops.count("inv_mix_columns") == 9


def test_aes_decrypt_consumes_round_keys_in_reverse():
    enc = aes_trace.encrypt_with_trace(AES_PT, AES_KEY)
    dec = aes_trace.decrypt_with_trace(enc.output, AES_KEY)
    enc_keys = [s.round_key for s in enc if s.operation == "add_round_key"]
    dec_keys = [s.round_key for s in dec if s.operation == "add_round_key"]
    assert dec_keys == list(reversed(enc_keys))
    assert enc[2].round_keys == dec[2].round_keys
    assert len(enc[2].round_keys) == 11


def test_aes_informational_steps_do_not_move_state():
    trace = aes_trace.encrypt_with_trace(AES_PT, AES_KEY)
    for step in trace[:3]:
        assert not step.changes_state
    assert trace[3].changes_state


def test_aes_known_text_vector_roundtrips():
    enc = aes_trace.encrypt_with_trace(AES_PT, AES_KEY)
    assert enc.output != AES_PT
    assert block_to_text(enc.output) != "HELLO AES WORLD!"
    dec = aes_trace.decrypt_with_trace(enc.output, AES_KEY)
    assert dec.output == AES_PT
    assert dec.output_text == "HELLO AES WORLD!"


def test_aes_fips197_appendix_c1():
    pt = bytes.fromhex("00112233445566778899aabbccddeeff")
    key = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
    enc = aes_trace.encrypt_with_trace(pt, key)
    assert enc.output.hex() == "69c4e0d86a7b0430d8cdb78070b4c55a"

    # Round 1 intermediates
    assert state_to_block(enc[3].state_after).hex() == "00102030405060708090a0b0c0d0e0f0"
    assert state_to_block(enc[4].state_after).hex() == "63cab7040953d051cd60e0e7ba70e18c"
    assert state_to_block(enc[5].state_after).hex() == "6353e08c0960e104cd70b751bacad0e7"
    assert state_to_block(enc[6].state_after).hex() == "5f72641557f5bc92f7be3b291db9f91a"

    dec = aes_trace.decrypt_with_trace(enc.output, key)
    assert dec.output == pt


def test_aes_fips197_appendix_b():
    pt = bytes.fromhex("3243f6a8885a308d313198a2e0370734")
    key = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
    enc = aes_trace.encrypt_with_trace(pt, key)
    assert enc.output_hex == "3925841D02DC09FBDC118597196A0B32"


def test_aes_chain_consistency():
    enc = aes_trace.encrypt_with_trace(AES_PT, AES_KEY)
    dec = aes_trace.decrypt_with_trace(enc.output, AES_KEY)
    for trace in (enc, dec):
        assert trace.is_chain_consistent()
        for a, b in zip(trace.steps, trace.steps[1:]):
            assert a.state_after == b.state_before


def test_aes_trace_is_deterministic_and_random_access():
    a = aes_trace.encrypt_with_trace(AES_PT, AES_KEY)
    b = aes_trace.encrypt_with_trace(AES_PT, AES_KEY)
    assert a == b
    # Reading backwards gives the same steps as reading forwards
    assert [a[i] for i in reversed(range(len(a)))] == list(reversed(a.steps))
    assert a[-1] is a.steps[42]


# ---------------------------------------------------------------------------
# DES
# ---------------------------------------------------------------------------

DES_PT = b"HELLO123"
DES_KEY = b"SECRETKY"


def test_des_trace_shape():
    trace = des_trace.encrypt_with_trace(DES_PT, DES_KEY)
    assert len(trace) == 20
    ops = [s.operation for s in trace]
    assert ops[0] == "initial_input"
    assert ops[1] == "initial_permutation"
    assert ops[2:18] == ["round"] * 16
    assert ops[18:] == ["swap", "final_permutation"]
    assert [s.round_index for s in trace[2:18]] == list(range(1, 17))


def test_des_round_steps_carry_feistel_details():
    trace = des_trace.encrypt_with_trace(DES_PT, DES_KEY)
    for step in trace[2:18]:
        f = step.feistel
        assert f is not None
        assert f.subkey == step.round_key
        assert len(f.expanded) == 48
        assert len(f.xored) == 48
        assert len(f.sbox_outputs) == 8
        assert all(len(o) == 4 for o in f.sbox_outputs)
        assert len(f.output) == 32
        # R_i = L_{i-1} xor f(R_{i-1}, K_i)
        left = step.state_before[:32]
        assert step.state_after[32:] == tuple(l ^ o for l, o in zip(left, f.output))
    assert trace[0].feistel is None


def test_des_known_text_vector_roundtrips():
    enc = des_trace.encrypt_with_trace(DES_PT, DES_KEY)
    assert enc.output != DES_PT
    dec = des_trace.decrypt_with_trace(enc.output, DES_KEY)
    assert len(dec) == 20
    assert dec.output == DES_PT


def test_des_standard_vector():
    key = bytes.fromhex("133457799BBCDFF1")
    pt = bytes.fromhex("0123456789ABCDEF")
    enc = des_trace.encrypt_with_trace(pt, key)
    assert enc.output_hex == "85E813540F0AB405"
    assert des_trace.decrypt_with_trace(enc.output, key).output == pt


def test_des_decrypt_uses_subkeys_in_reverse():
    enc = des_trace.encrypt_with_trace(DES_PT, DES_KEY)
    dec = des_trace.decrypt_with_trace(enc.output, DES_KEY)
    assert [s.round_key for s in dec[2:18]] == [s.round_key for s in reversed(enc[2:18])]
    assert "K16" in dec[2].description
    assert dec[-1].description.endswith("plaintext")


def test_des_chain_consistency_and_swap():
    trace = des_trace.encrypt_with_trace(DES_PT, DES_KEY)
    assert trace.is_chain_consistent()
    swap = trace[18]
    assert swap.state_after == swap.state_before[32:] + swap.state_before[:32]


# ---------------------------------------------------------------------------
# fold / serialisation
# ---------------------------------------------------------------------------

def test_fold_threads_state_through_transforms():
    steps = fold(1, [
        Transform(name="double", description="", operation="round", round_index=1, apply=lambda x: x * 2),
        Transform(name="noop", description="", operation="swap", round_index=1),
        Transform(name="inc", description="", operation="round", round_index=2,
                  apply_with_detail=lambda x: (x + 1, {"round_key": x})),
    ])
    assert [(s.state_before, s.state_after) for s in steps] == [(1, 2), (2, 2), (2, 3)]
    assert steps[2].round_key == 2
    assert isinstance(steps, tuple)


def test_trace_to_dict_renders_hex():
    d = des_trace.encrypt_with_trace(DES_PT, DES_KEY).to_dict()
    assert d["algorithm"] == "DES"
    assert d["input_hex"] == DES_PT.hex().upper()
    assert len(d["steps"]) == 20
    assert "feistel" in d["steps"][2]
    assert len(d["steps"][2]["feistel"]["sbox_outputs"]) == 8

    a = aes_trace.encrypt_with_trace(AES_PT, AES_KEY).to_dict()
    assert len(a["steps"][2]["round_keys"]) == 11
    assert a["steps"][3]["round_key"] == AES_KEY.hex().upper()
