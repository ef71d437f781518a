import base64
import hashlib
import logging

import pytest
from passlib.hash import des_crypt, md5_crypt, sha256_crypt, sha512_crypt

from mypwgen.hashing import (
    SALT_ALPHABET,
    HashScheme,
    crypt,
    hash_password,
    make_salt,
    ssha,
    supported_ids,
)
from mypwgen.sampler import Sampler

from conftest import FakeSource

SALT = "abcdefghijklmnop"


def test_salt_alphabet_is_power_of_two():
    assert len(SALT_ALPHABET) == 64
    assert len(set(SALT_ALPHABET)) == 64


def test_parse_schemes():
    assert HashScheme.parse("S") == HashScheme(HashScheme.SSHA)
    assert HashScheme.parse("0") == HashScheme(HashScheme.DES)
    assert HashScheme.parse("6") == HashScheme(HashScheme.MODULAR, "6")
    assert HashScheme.parse() == HashScheme(HashScheme.MODULAR, "5")
    assert HashScheme.parse(1) == HashScheme(HashScheme.MODULAR, "1")


def test_make_salt_from_fake_bytes():
    src = FakeSource(range(16))
    assert make_salt(Sampler(src)) == "./0123456789ABCD"
    assert src.bytes_read == 16


def test_ssha_known_salt():
    expected_digest = hashlib.sha1(b"hunter2" + SALT.encode()).digest()
    expected = "{SSHA}" + base64.b64encode(expected_digest + SALT.encode()).decode()
    assert ssha("hunter2", SALT) == expected
    src = FakeSource()
    assert hash_password("hunter2", HashScheme.parse("S"), Sampler(src), salt=SALT) == expected
    assert src.bytes_read == 0


def test_ssha_layout(seeded_sampler):
    result = hash_password("hunter2", HashScheme.parse("S"), seeded_sampler)
    assert result.startswith("{SSHA}")
    assert "\n" not in result
    raw = base64.b64decode(result[len("{SSHA}"):])
    digest, salt = raw[:20], raw[20:]
    assert len(salt) == 16
    assert all(chr(b) in SALT_ALPHABET for b in salt)
    assert hashlib.sha1(b"hunter2" + salt).digest() == digest


def test_sha256_crypt(seeded_sampler):
    result = hash_password("hunter2", HashScheme.parse("5"), seeded_sampler, salt=SALT)
    assert result.startswith(f"$5${SALT}$")
    assert "rounds=" not in result
    assert sha256_crypt.verify("hunter2", result)


def test_sha512_crypt(seeded_sampler):
    result = hash_password("hunter2", HashScheme.parse("6"), seeded_sampler, salt=SALT)
    assert result.startswith(f"$6${SALT}$")
    assert sha512_crypt.verify("hunter2", result)


def test_md5_crypt_truncates_salt(seeded_sampler):
    result = hash_password("hunter2", HashScheme.parse("1"), seeded_sampler, salt=SALT)
    assert result.startswith("$1$abcdefgh$")
    assert md5_crypt.verify("hunter2", result)


def test_des_crypt_uses_two_salt_chars(seeded_sampler):
    result = hash_password("hunter2", HashScheme.parse("0"), seeded_sampler, salt=SALT)
    assert len(result) == 13
    assert result.startswith("ab")
    assert des_crypt.verify("hunter2", result)


def test_generated_salt_is_used(seeded_sampler):
    result = hash_password("hunter2", HashScheme.parse("5"), seeded_sampler)
    salt = result.split("$")[2]
    assert len(salt) == 16
    assert all(c in SALT_ALPHABET for c in salt)


def test_unknown_id_warns_and_returns_empty(seeded_sampler, caplog):
    with caplog.at_level(logging.WARNING, logger="mypwgen"):
        result = hash_password("hunter2", HashScheme.parse("42"), seeded_sampler)
    assert result == ""
    assert any("$42$" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize("setting", ["", "$", "$5", "!x", "a"])
def test_crypt_rejects_bad_settings(setting):
    assert crypt("pw", setting) is None


def test_crypt_matches_direct_handler():
    assert crypt("pw", "$5$saltsalt$") == sha256_crypt.using(salt="saltsalt", rounds=5000).hash("pw")


def test_supported_ids():
    assert supported_ids() == ["1", "5", "6"]


def test_bytes_password_matches_str(seeded_sampler):
    scheme = HashScheme.parse("5")
    assert hash_password(b"hunter2", scheme, seeded_sampler, salt=SALT) == \
        hash_password("hunter2", scheme, seeded_sampler, salt=SALT)
    assert ssha(b"hunter2", SALT) == ssha("hunter2", SALT)


def test_non_utf8_bytes_hash(seeded_sampler):
    result = hash_password(b"\xff\xfe", HashScheme.parse("S"), seeded_sampler, salt=SALT)
    raw = base64.b64decode(result[len("{SSHA}"):])
    assert raw[:20] == hashlib.sha1(b"\xff\xfe" + SALT.encode()).digest()


def test_rejected_password_names_the_handler(seeded_sampler, caplog):
    with caplog.at_level(logging.WARNING, logger="mypwgen"):
        result = hash_password("pw\x00x", HashScheme.parse("0"), seeded_sampler, salt=SALT)
    assert result == ""
    messages = [r.getMessage() for r in caplog.records]
    assert any("des_crypt rejected the password" in m for m in messages)
    assert not any("does not support" in m for m in messages)
