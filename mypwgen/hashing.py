"""
hashing.py

Purpose/Aim:
1) Resolves a hash-scheme identifier once ("S", "0", or a modular-crypt id)
   into a HashScheme value.
2) Generates a 16-character salt from the crypt alphabet using the sampler.
3) Produces the hash string: {SSHA} Base64, traditional DES crypt, or a
   `$id$salt$hash` modular-crypt string.

Notes

- `crypt()` follows the POSIX crypt(3) contract: it takes a setting string
  (`$id$salt` or a two-character DES salt) and returns None when it does
  not understand it. It is backed by passlib's handlers, since the
  standard library no longer ships a crypt module.
- Salt truncation is left to each handler (its `max_salt_size`).
- An unrecognized id is not fatal: hash_password logs a warning and
  returns "".

Quick start

>>> from mypwgen.hashing import HashScheme, hash_password
>>> hash_password("hunter2", HashScheme.parse("S"), sampler)
'{SSHA}...'
>>> hash_password("hunter2", HashScheme.parse("6"), sampler)
'$6$...'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Union
import base64
import hashlib
import logging

from passlib.exc import PasswordValueError
from passlib.hash import des_crypt, md5_crypt, sha256_crypt, sha512_crypt

from .composer import draw_chars
from .errors import UnsupportedHashFormat
from .sampler import Sampler

logger = logging.getLogger(__name__)

# 64 symbols: a power of two, so the sampler never rejects a byte.
SALT_ALPHABET = "./0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
SALT_LENGTH = 16

DEFAULT_SCHEME_ID = "5"

Secret = Union[str, bytes]


#Scheme selection
@dataclass(frozen=True)
class HashScheme:
    """
    Tagged hash-scheme selector.

    kind is one of "des", "modular", "ssha"; `ident` is only set for
    modular crypt and is passed through to the crypt primitive verbatim.
    """

    kind: str
    ident: Optional[str] = None

    DES = "des"
    MODULAR = "modular"
    SSHA = "ssha"

    @classmethod
    def parse(cls, identifier: str = DEFAULT_SCHEME_ID) -> "HashScheme":
        identifier = str(identifier)
        if identifier == "S":
            return cls(cls.SSHA)
        if identifier == "0":
            return cls(cls.DES)
        return cls(cls.MODULAR, identifier)

    def __str__(self) -> str:
        if self.kind == self.MODULAR:
            return f"modular crypt ${self.ident}$"
        return self.kind


#Crypt primitive
_SHA_CRYPT_ROUNDS = 5000  # glibc default; hashes omit the rounds= field

_MODULAR_HANDLERS = {
    "1": (md5_crypt, {}),
    "5": (sha256_crypt, {"rounds": _SHA_CRYPT_ROUNDS}),
    "6": (sha512_crypt, {"rounds": _SHA_CRYPT_ROUNDS}),
}


def _run_handler(handler, password: Secret, salt: str, extra: Dict) -> Optional[str]:
    salt = salt[: handler.max_salt_size]
    try:
        return handler.using(salt=salt, **extra).hash(password)
    except (PasswordValueError, UnicodeError) as exc:
        raise UnsupportedHashFormat(f"{handler.name} rejected the password: {exc}") from exc
    except ValueError as exc:
        logger.debug("%s rejected setting: %s", handler.name, exc)
        return None


def crypt(password: Secret, setting: str) -> Optional[str]:
    """
    crypt(3)-style hashing.

    `setting` is either `$id$salt` (optionally with a trailing `$`) or a
    raw two-character DES salt. Returns None if the format is not
    recognized; raises UnsupportedHashFormat if the handler refuses the
    password itself (NUL bytes, oversized input).
    """
    if setting.startswith("$"):
        parts = setting.split("$")
        if len(parts) < 3:
            return None
        entry = _MODULAR_HANDLERS.get(parts[1])
        if entry is None:
            return None
        handler, extra = entry
        return _run_handler(handler, password, parts[2], extra)

    if len(setting) < 2 or any(c not in SALT_ALPHABET for c in setting[:2]):
        return None
    return _run_handler(des_crypt, password, setting[:2], {})


def supported_ids():
    """Modular-crypt ids the crypt primitive understands."""
    return sorted(_MODULAR_HANDLERS)


#Salts and hashes
def _to_bytes(password: Secret) -> bytes:
    # surrogateescape restores raw bytes decoded under a C locale
    if isinstance(password, str):
        return password.encode("utf-8", "surrogateescape")
    return password


def make_salt(sampler: Sampler, length: int = SALT_LENGTH) -> str:
    return "".join(draw_chars(sampler, SALT_ALPHABET, length))


def ssha(password: Secret, salt: str) -> str:
    """{SSHA} + Base64(SHA1(password || salt) || salt)."""
    raw_salt = salt.encode("utf-8")
    digest = hashlib.sha1(_to_bytes(password) + raw_salt).digest()
    return "{SSHA}" + base64.b64encode(digest + raw_salt).decode("ascii")


def _crypt_or_raise(password: Secret, setting: str, scheme: HashScheme) -> str:
    result = crypt(password, setting)
    if result is None:
        raise UnsupportedHashFormat(f"crypt does not support {scheme}")
    return result


def hash_password(
    password: Secret,
    scheme: HashScheme,
    sampler: Sampler,
    salt: Optional[str] = None,
) -> str:
    """
    Hash `password` with a fresh salt (or the one given).

    `password` may be bytes (pipe mode hashes raw stdin lines). Returns ""
    and logs a warning when the crypt primitive does not recognize the
    scheme or refuses the password.
    """
    if salt is None:
        salt = make_salt(sampler)
    password = _to_bytes(password)

    if scheme.kind == HashScheme.SSHA:
        return ssha(password, salt)

    if scheme.kind == HashScheme.DES:
        setting = salt[:2]
    else:
        setting = f"${scheme.ident}${salt}"

    try:
        return _crypt_or_raise(password, setting, scheme)
    except UnsupportedHashFormat as exc:
        logger.warning("%s", exc)
        return ""


__all__ = [
    "DEFAULT_SCHEME_ID",
    "SALT_ALPHABET",
    "SALT_LENGTH",
    "HashScheme",
    "crypt",
    "hash_password",
    "make_salt",
    "ssha",
    "supported_ids",
]
