"""
sampler.py

Purpose/Aim:
1) Turns raw bytes from an entropy source into unbiased integers in [0, mod).
2) Uses one byte per attempt and rejection sampling to remove modulo bias.

How it works (short version)

- A byte is uniform over [0, 256). Mapping it with `byte % mod` is only
  fair when mod divides 256.
- So we accept a byte only when it is <= rand_limit = 255 - (256 % mod),
  i.e. when it falls inside the largest multiple of mod below 256.
- On accept, emit byte % mod; otherwise draw another byte.

Quick start

>>> from mypwgen.entropy import open_source
>>> from mypwgen.sampler import Sampler
>>> s = Sampler(open_source())
>>> s.sample(10, 5)        # five unbiased digits
>>> s.sample_one(52)       # one index into a 52-letter alphabet
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .entropy import EntropySource
from .errors import InvalidArgument

MAX_MOD = 256


def rand_limit(mod: int) -> int:
    """Largest byte value that keeps `byte % mod` unbiased."""
    if not 1 <= mod <= MAX_MOD:
        raise InvalidArgument(f"mod must be in [1, {MAX_MOD}], got {mod}")
    return 255 - (256 % mod)


@dataclass
class Sampler:
    """
    Unbiased small-integer sampler backed by an entropy source.

    Parameters
    ----------
    source : EntropySource
        Where raw bytes come from. Every byte is read directly from it;
        errors raised by the source propagate unchanged.
    """

    source: EntropySource

    def _byte(self) -> int:
        return self.source.read_bytes(1)[0]

    def sample(self, mod: int, count: int) -> List[int]:
        """
        `count` unbiased integers in [0, mod).

        Raises InvalidArgument for mod outside [1, 256] or a negative count,
        before touching the entropy source.
        """
        limit = rand_limit(mod)
        if count < 0:
            raise InvalidArgument(f"count must be non-negative, got {count}")

        out: List[int] = []
        for _ in range(count):
            while True:
                b = self._byte()
                if b <= limit:
                    out.append(b % mod)
                    break
        return out

    def sample_one(self, mod: int) -> int:
        """Single unbiased integer in [0, mod)."""
        return self.sample(mod, 1)[0]


__all__ = [
    "MAX_MOD",
    "Sampler",
    "rand_limit",
]
