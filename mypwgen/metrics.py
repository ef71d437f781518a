"""
metrics.py

Statistical checks for sampler output.

What this module does

- Builds histograms over integer outcomes in [0, mod).
- Runs a Chi-square test against the uniform distribution.
- Computes KL divergence against uniform (with safe smoothing).
- Bundles both into a per-modulus report used by `mypwgen --self-test`.

Quick start

>>> from mypwgen.metrics import chi_square_uniform, outcome_histogram
>>> counts = outcome_histogram([0, 1, 1, 0], support_size=2)
>>> chi_square_uniform(counts)
ChiSquareResult(stat=0.0, df=1, pvalue=1.0, expected=[2.0, 2.0])

Dependencies

- numpy
- scipy (for chi-square p-values)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence
import logging

import numpy as np
from scipy.stats import chisquare

from .sampler import Sampler

logger = logging.getLogger(__name__)

SELF_TEST_MODS = (2, 3, 7, 37, 256)


#Histograms
def outcome_histogram(outcomes: Iterable[int], support_size: int) -> np.ndarray:
    """
    Count vector over integer outcomes in [0, support_size).

    Any outcome outside this range is ignored.
    """
    if support_size <= 0:
        raise ValueError("support_size must be positive")
    xs = np.fromiter(outcomes, dtype=np.int64)
    xs = xs[(xs >= 0) & (xs < support_size)]
    return np.bincount(xs, minlength=support_size)


#Chi-square uniformity test
@dataclass
class ChiSquareResult:
    stat: float
    df: int
    pvalue: float
    expected: List[float]


def chi_square_uniform(counts: Sequence[int]) -> ChiSquareResult:
    """
    Chi-square goodness-of-fit of a count vector against uniform.

    Parameters
    ----------
    counts : sequence of int
        counts[k] is how often outcome k was seen; len(counts) is the
        support size.

    Returns

    ChiSquareResult(stat, df, pvalue, expected), with df = len(counts) - 1.
    """
    observed = np.asarray(counts, dtype=float)
    if observed.ndim != 1 or observed.size == 0:
        raise ValueError("counts must be a non-empty 1-D sequence.")
    total = observed.sum()
    if total <= 0:
        raise ValueError("Empty counts supplied.")

    expected = np.full(observed.size, total / observed.size)
    res = chisquare(f_obs=observed, f_exp=expected)
    return ChiSquareResult(
        stat=float(res.statistic),
        df=observed.size - 1,
        pvalue=float(res.pvalue),
        expected=expected.tolist(),
    )


#KL divergence
def kl_divergence(
    p: Sequence[float],
    q: Sequence[float],
    eps: float = 1e-12,
) -> float:
    """
    Compute D_KL(p || q) in bits, with additive smoothing.

    p and q do not need to be normalized. Both are normalized, shifted by
    `eps`, and renormalized before taking sum p' * log2(p'/q').
    """
    p = np.asarray(p, dtype=float)
    q = np.asarray(q, dtype=float)
    if p.shape != q.shape:
        raise ValueError("p and q must have the same shape.")

    def _norm(x: np.ndarray) -> np.ndarray:
        s = x.sum()
        if s <= 0:
            raise ValueError("Distribution has zero or negative sum.")
        return x / s

    p = _norm(p) + eps
    q = _norm(q) + eps
    p = p / p.sum()
    q = q / q.sum()
    return float(np.sum(p * np.log2(p / q)))


#Sampler report
@dataclass
class UniformityReport:
    mod: int
    samples: int
    chi_square: ChiSquareResult
    kl_bits: float

    def passed(self, alpha: float) -> bool:
        return self.chi_square.pvalue >= alpha


def uniformity_report(sampler: Sampler, mod: int, samples: int) -> UniformityReport:
    """Draw `samples` values in [0, mod) and test them against uniform."""
    if samples <= 0:
        raise ValueError("samples must be positive")
    counts = outcome_histogram(sampler.sample(mod, samples), mod)
    report = UniformityReport(
        mod=mod,
        samples=samples,
        chi_square=chi_square_uniform(counts),
        kl_bits=kl_divergence(counts, np.ones(mod)),
    )
    logger.debug(
        "mod=%d chi2=%.3f p=%.4f", mod, report.chi_square.stat, report.chi_square.pvalue
    )
    return report


__all__ = [
    "SELF_TEST_MODS",
    "ChiSquareResult",
    "UniformityReport",
    "chi_square_uniform",
    "kl_divergence",
    "outcome_histogram",
    "uniformity_report",
]
