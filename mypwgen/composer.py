"""
composer.py

Aim:
1) Defines the four character classes (digits, lowercase, uppercase, special).
2) Validates a GenerationPolicy (length + per-class minimums + friendly flag)
   before any randomness is consumed.
3) Builds passwords: mandatory characters per class, filler for the
   remaining slots, then an unbiased Fisher-Yates shuffle.

Note:
- Every index comes from `Sampler.sample`, which rejects biased bytes.
- The construction order (digits, lower, upper, special, filler) is fixed
  so that a fake entropy source gives reproducible output. The shuffle
  makes the final order uniform regardless.

Quick start
>>> from mypwgen.entropy import open_source
>>> from mypwgen.sampler import Sampler
>>> from mypwgen.composer import GenerationPolicy, compose
>>> compose(GenerationPolicy(length=12, special=1), Sampler(open_source()))
'4bQ...'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, MutableSequence
import logging
import string

from .errors import ConfigurationError
from .sampler import MAX_MOD, Sampler

logger = logging.getLogger(__name__)


#Character classes
DIGITS = string.digits
LOWER = string.ascii_lowercase
UPPER = string.ascii_uppercase
SPECIAL = string.punctuation

ALNUM = DIGITS + LOWER + UPPER
ALL_CHARS = ALNUM + SPECIAL

CLASSES = {
    "digits": DIGITS,
    "lower": LOWER,
    "upper": UPPER,
    "special": SPECIAL,
}


#Policy
@dataclass(frozen=True)
class GenerationPolicy:
    """
    Validated generation settings.

    Parameters
    ----------
    length : int, default=8
        Total password length, at most 256 (shuffle indices are single bytes).
    digits, lower, upper, special : int
        Minimum number of characters from each class.
    friendly : bool, default=False
        Draw filler from alphanumerics only, so the password holds exactly
        `special` symbols.

    Raises
    ------
    ConfigurationError
        If any count is negative, the length is out of range, or the
        minimums add up to more than `length`.
    """

    length: int = 8
    digits: int = 2
    lower: int = 2
    upper: int = 2
    special: int = 0
    friendly: bool = False

    def __post_init__(self) -> None:
        for name in ("length", "digits", "lower", "upper", "special"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be non-negative")
        if self.length > MAX_MOD:
            raise ConfigurationError(
                f"length must be at most {MAX_MOD}, got {self.length}"
            )
        if self.required > self.length:
            raise ConfigurationError(
                f"minimum character counts ({self.digits} digits + {self.lower} lower"
                f" + {self.upper} upper + {self.special} special = {self.required})"
                f" exceed password length {self.length}"
            )

    @property
    def required(self) -> int:
        return self.digits + self.lower + self.upper + self.special

    @property
    def filler(self) -> int:
        """Slots left after every class minimum is met."""
        return self.length - self.required

    @property
    def filler_alphabet(self) -> str:
        return ALNUM if self.friendly else ALL_CHARS


#Building blocks
def draw_chars(sampler: Sampler, alphabet: str, count: int) -> List[str]:
    """`count` characters drawn uniformly from `alphabet`."""
    if count == 0:
        return []
    return [alphabet[i] for i in sampler.sample(len(alphabet), count)]


def shuffle(chars: MutableSequence[str], sampler: Sampler) -> None:
    """In-place Fisher-Yates shuffle driven by the sampler."""
    for i in range(len(chars) - 1, 0, -1):
        j = sampler.sample_one(i + 1)
        chars[i], chars[j] = chars[j], chars[i]


def compose(policy: GenerationPolicy, sampler: Sampler) -> str:
    """
    Create one password satisfying `policy`.

    How it works

    1) Draw the minimum count from each class, in class order.
    2) Draw `policy.filler` characters from the filler alphabet.
    3) Shuffle the whole sequence and join it.
    """
    chars: List[str] = []
    chars += draw_chars(sampler, DIGITS, policy.digits)
    chars += draw_chars(sampler, LOWER, policy.lower)
    chars += draw_chars(sampler, UPPER, policy.upper)
    chars += draw_chars(sampler, SPECIAL, policy.special)
    chars += draw_chars(sampler, policy.filler_alphabet, policy.filler)
    shuffle(chars, sampler)
    return "".join(chars)


def class_counts(password: str) -> Dict[str, int]:
    """How many characters of each class `password` contains."""
    return {name: sum(1 for c in password if c in chars) for name, chars in CLASSES.items()}


#Generator
@dataclass
class Composer:
    """
    Bundles a policy with a sampler for repeated generation.

    >>> gen = Composer(GenerationPolicy(length=16), sampler)
    >>> gen.passwords(3)
    ['...', '...', '...']
    """

    policy: GenerationPolicy
    sampler: Sampler

    def password(self) -> str:
        return compose(self.policy, self.sampler)

    def passwords(self, count: int) -> List[str]:
        if count < 0:
            raise ValueError("count must be non-negative")
        logger.debug(
            "generating %d password(s) of length %d (filler %d, friendly=%s)",
            count, self.policy.length, self.policy.filler, self.policy.friendly,
        )
        return [self.password() for _ in range(count)]


__all__ = [
    "DIGITS",
    "LOWER",
    "UPPER",
    "SPECIAL",
    "ALNUM",
    "ALL_CHARS",
    "CLASSES",
    "GenerationPolicy",
    "Composer",
    "class_counts",
    "compose",
    "draw_chars",
    "shuffle",
]
