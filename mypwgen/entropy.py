"""
entropy.py

Purpose/Aim:
1) Opens the OS random device once per process (/dev/urandom by default,
   /dev/random when the caller asks for the blocking device).
2) Exposes a single primitive: read exactly N raw bytes.
3) Fails loudly with EntropyError on open failure or short read. Nothing
   is retried: a broken random source is not something to paper over.

Why this shape?

- Callers receive the source as a value, so tests can hand the sampler
  any object with a `read_bytes(n)` method instead of a real device.
- The file is opened unbuffered; every read goes straight to the OS.

Quick start

>>> from mypwgen.entropy import open_source
>>> with open_source() as src:
...     src.read_bytes(16)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, Optional, Protocol
import logging

from .errors import EntropyError

logger = logging.getLogger(__name__)

URANDOM_PATH = "/dev/urandom"
RANDOM_PATH = "/dev/random"


class EntropySource(Protocol):
    """Anything that can hand out raw random bytes."""

    def read_bytes(self, n: int) -> bytes:
        ...


#Device-backed source
@dataclass
class DeviceSource:
    """
    Unbuffered reader over an OS random device.

    Parameters
    ----------
    path : str
        Device to read from. Use `open_source` rather than picking one by hand.
    """

    path: str = URANDOM_PATH
    bytes_read: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self._fh: Optional[BinaryIO] = None
        try:
            self._fh = open(self.path, "rb", buffering=0)
        except OSError as exc:
            raise EntropyError(f"cannot open random device {self.path}: {exc}") from exc
        logger.debug("opened random device %s", self.path)

    def read_bytes(self, n: int) -> bytes:
        """
        Return exactly `n` bytes from the device.

        A blocking device may stall here until the kernel has enough entropy.
        """
        if n < 0:
            raise ValueError("n must be non-negative")
        if self._fh is None:
            raise EntropyError(f"random device {self.path} is closed")
        if n == 0:
            return b""
        try:
            data = self._fh.read(n)
        except OSError as exc:
            raise EntropyError(f"read from {self.path} failed: {exc}") from exc
        if data is None or len(data) < n:
            got = 0 if data is None else len(data)
            raise EntropyError(
                f"short read from {self.path}: wanted {n} bytes, got {got}"
            )
        self.bytes_read += n
        return data

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> "DeviceSource":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_source(blocking: bool = False) -> DeviceSource:
    """Open the blocking (/dev/random) or non-blocking (/dev/urandom) device."""
    return DeviceSource(RANDOM_PATH if blocking else URANDOM_PATH)


__all__ = [
    "EntropySource",
    "DeviceSource",
    "open_source",
    "URANDOM_PATH",
    "RANDOM_PATH",
]
