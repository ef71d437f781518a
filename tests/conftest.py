"""Shared fixtures: scripted and seeded entropy sources."""

from typing import Iterable

import numpy as np
import pytest

from mypwgen.errors import EntropyError
from mypwgen.sampler import Sampler


class FakeSource:
    """Replays a fixed byte sequence and counts what was read."""

    def __init__(self, data: Iterable[int] = b""):
        self.data = bytes(data)
        self.pos = 0
        self.bytes_read = 0
        self.closed = False

    def read_bytes(self, n: int) -> bytes:
        if self.pos + n > len(self.data):
            raise EntropyError("fake source exhausted")
        out = self.data[self.pos:self.pos + n]
        self.pos += n
        self.bytes_read += n
        return out

    def close(self) -> None:
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class SeededSource(FakeSource):
    """Endless pseudo-random bytes from a seeded numpy generator."""

    def __init__(self, seed: int = 1234):
        super().__init__()
        self.rng = np.random.default_rng(seed)

    def read_bytes(self, n: int) -> bytes:
        self.bytes_read += n
        return self.rng.bytes(n)


@pytest.fixture
def seeded_source():
    return SeededSource()


@pytest.fixture
def seeded_sampler(seeded_source):
    return Sampler(seeded_source)


@pytest.fixture
def fake_sampler():
    def _make(data):
        return Sampler(FakeSource(data))
    return _make
