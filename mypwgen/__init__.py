"""
mypwgen - random password generator with salted hash output.

>>> from mypwgen import GenerationPolicy, Sampler, compose, open_source
>>> with open_source() as src:
...     compose(GenerationPolicy(length=12), Sampler(src))
"""

__version__ = "1.0.0"

from .composer import Composer, GenerationPolicy, compose
from .entropy import DeviceSource, open_source
from .errors import (
    ConfigurationError,
    EntropyError,
    InvalidArgument,
    MypwgenError,
    UnsupportedHashFormat,
)
from .hashing import HashScheme, hash_password
from .sampler import Sampler

__all__ = [
    "__version__",
    "Composer",
    "ConfigurationError",
    "DeviceSource",
    "EntropyError",
    "GenerationPolicy",
    "HashScheme",
    "InvalidArgument",
    "MypwgenError",
    "Sampler",
    "UnsupportedHashFormat",
    "compose",
    "hash_password",
    "open_source",
]
