"""
errors.py

Exception types shared by the generator, the sampler and the hash engine.

- ConfigurationError and EntropyError are fatal: the CLI aborts on them.
- UnsupportedHashFormat is recoverable: the hash engine logs it and
  returns an empty hash.
"""

from __future__ import annotations


class MypwgenError(Exception):
    """Base class for every error raised by mypwgen."""


class ConfigurationError(MypwgenError, ValueError):
    """Requested class minimums cannot fit in the requested length."""


class InvalidArgument(MypwgenError, ValueError):
    """A sampler was asked for an impossible range or count."""


class EntropyError(MypwgenError, OSError):
    """The random device could not be opened or returned a short read."""


class UnsupportedHashFormat(MypwgenError):
    """The crypt primitive does not recognize the requested id or salt."""


__all__ = [
    "MypwgenError",
    "ConfigurationError",
    "InvalidArgument",
    "EntropyError",
    "UnsupportedHashFormat",
]
