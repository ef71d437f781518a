import math

import numpy as np
import pytest

from mypwgen.metrics import (
    SELF_TEST_MODS,
    chi_square_uniform,
    kl_divergence,
    outcome_histogram,
    uniformity_report,
)


def test_histogram_ignores_out_of_range():
    counts = outcome_histogram([0, 1, 1, 2, 5, -1], support_size=3)
    assert counts.tolist() == [1, 2, 1]


def test_histogram_keeps_empty_bins():
    assert outcome_histogram([], support_size=4).tolist() == [0, 0, 0, 0]


def test_histogram_rejects_bad_support():
    with pytest.raises(ValueError):
        outcome_histogram([0], support_size=0)


def test_chi_square_perfectly_uniform():
    res = chi_square_uniform([25, 25, 25, 25])
    assert res.stat == 0.0
    assert res.df == 3
    assert math.isclose(res.pvalue, 1.0)
    assert res.expected == [25.0, 25.0, 25.0, 25.0]


def test_chi_square_detects_skew():
    res = chi_square_uniform([900, 100])
    assert res.stat == pytest.approx(640.0)
    assert res.pvalue < 1e-6


def test_chi_square_empty():
    with pytest.raises(ValueError):
        chi_square_uniform([0, 0])


def test_kl_divergence():
    assert kl_divergence([1, 1, 1], [2, 2, 2]) == pytest.approx(0.0, abs=1e-9)
    assert kl_divergence([1, 0], [1, 1]) == pytest.approx(1.0, abs=1e-6)
    with pytest.raises(ValueError):
        kl_divergence([1, 2], [1, 2, 3])


@pytest.mark.parametrize("mod", SELF_TEST_MODS)
def test_uniformity_report(seeded_sampler, mod):
    report = uniformity_report(seeded_sampler, mod, 100 * mod)
    assert report.mod == mod
    assert report.samples == 100 * mod
    assert sum(report.chi_square.expected) == pytest.approx(100 * mod)
    assert report.passed(1e-4)
    assert report.kl_bits >= -1e-12


def test_uniformity_report_flags_constant_source():
    from mypwgen.sampler import Sampler
    from conftest import FakeSource

    report = uniformity_report(Sampler(FakeSource(b"\x00" * 100)), 2, 100)
    assert not report.passed(1e-4)
    assert np.isclose(report.kl_bits, 1.0, atol=1e-6)
