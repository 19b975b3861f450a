import hashlib

from utils.password import hash_password, verify_password


def test_hash_is_deterministic_sha256_hex() -> None:
    digest = hash_password("putnew")
    assert digest == hashlib.sha256(b"putnew").hexdigest()
    assert digest == hash_password("putnew")
    assert digest != hash_password("putnew ")


def test_verify_uses_digest_when_present() -> None:
    record = {"id": 1, "passwordHash": hash_password("secret1"), "password": "other"}
    assert verify_password(record, "secret1") == (True, False)
    assert verify_password(record, "other") == (False, False)


def test_legacy_password_is_upgraded_in_place() -> None:
    record = {"id": 7, "password": "legacy1"}

    matched, upgraded = verify_password(record, "legacy1")

    assert (matched, upgraded) == (True, True)
    assert record == {"id": 7, "passwordHash": hash_password("legacy1")}


def test_legacy_mismatch_leaves_record_alone() -> None:
    record = {"id": 7, "password": "legacy1"}
    assert verify_password(record, "wrong") == (False, False)
    assert record == {"id": 7, "password": "legacy1"}


def test_record_without_any_password_never_matches() -> None:
    assert verify_password({"id": 1}, "") == (False, False)
