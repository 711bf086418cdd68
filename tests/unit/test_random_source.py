"""Unit tests for shared.random_source."""

import itertools
from collections import Counter

import pytest
from structlog.testing import capture_logs

from errors import InvalidRangeError, SecureSourceUnavailable
from shared.random_source import (
    RandomSource,
    SecureRandomSource,
    TieredRandomSource,
    WeakRandomSource,
    default_source,
    weak_source,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _cycling_bytes():
    """Byte source yielding 0, 1, ..., 255, 0, 1, ... in order."""
    it = itertools.cycle(range(256))
    return lambda n: bytes(next(it) for _ in range(n))


def _chi_squared(counts: Counter, n: int, draws: int) -> float:
    expected = draws / n
    return sum((counts[i] - expected) ** 2 / expected for i in range(n))


# ---------------------------------------------------------------------------
# SecureRandomSource
# ---------------------------------------------------------------------------


class TestSecureRandomSource:
    @pytest.mark.parametrize("n", [1, 2, 7, 62, 200, 256, 257, 10**9])
    def test_in_range(self, n):
        source = SecureRandomSource()
        assert all(0 <= source.uniform(n) < n for _ in range(200))

    def test_single_outcome_needs_no_entropy(self, broken_bytes):
        assert SecureRandomSource(broken_bytes).uniform(1) == 0

    @pytest.mark.parametrize("n", [0, -1])
    def test_non_positive_range_raises(self, n):
        with pytest.raises(InvalidRangeError):
            SecureRandomSource().uniform(n)

    def test_negative_byte_count_raises(self):
        with pytest.raises(InvalidRangeError):
            SecureRandomSource().token_bytes(-1)

    def test_token_bytes_length(self):
        assert len(SecureRandomSource().token_bytes(16)) == 16

    def test_rejection_sampling_is_exactly_uniform_over_a_byte_cycle(self):
        # 256 is not a multiple of 200: a modulo mapping would hit 0..55 twice.
        source = SecureRandomSource(_cycling_bytes())
        counts = Counter(source.uniform(200) for _ in range(200))
        assert counts == Counter(range(200))

    def test_rejects_out_of_range_draws(self):
        source = SecureRandomSource(_cycling_bytes())
        # Masked to 3 bits: 0..5 accepted, 6 and 7 rejected.
        assert [source.uniform(6) for _ in range(8)] == [0, 1, 2, 3, 4, 5, 0, 1]

    def test_unavailable_source_raises_signal(self, broken_bytes):
        with pytest.raises(SecureSourceUnavailable):
            SecureRandomSource(broken_bytes).uniform(10)

    def test_unavailable_signal_keeps_cause(self, broken_bytes):
        with pytest.raises(SecureSourceUnavailable) as exc_info:
            SecureRandomSource(broken_bytes).token_bytes(4)
        assert isinstance(exc_info.value.__cause__, OSError)

    @pytest.mark.parametrize("n", [10, 200])
    def test_statistical_uniformity(self, n):
        draws = 100_000
        source = SecureRandomSource()
        counts = Counter(source.uniform(n) for _ in range(draws))
        # Chi-squared critical values at p = 0.001 for n - 1 degrees of freedom.
        critical = {10: 27.88, 200: 270.0}[n]
        assert _chi_squared(counts, n, draws) < critical


# ---------------------------------------------------------------------------
# WeakRandomSource
# ---------------------------------------------------------------------------


class TestWeakRandomSource:
    def test_seeded_is_reproducible(self):
        a = WeakRandomSource(seed=42)
        b = WeakRandomSource(seed=42)
        assert [a.uniform(100) for _ in range(20)] == [b.uniform(100) for _ in range(20)]

    def test_in_range(self):
        source = WeakRandomSource()
        assert all(0 <= source.uniform(7) < 7 for _ in range(500))

    def test_token_bytes_length(self):
        assert len(WeakRandomSource(seed=1).token_bytes(32)) == 32

    def test_non_positive_range_raises(self):
        with pytest.raises(InvalidRangeError):
            WeakRandomSource().uniform(0)

    def test_covers_whole_range(self):
        source = WeakRandomSource(seed=7)
        assert {source.uniform(5) for _ in range(500)} == set(range(5))


# ---------------------------------------------------------------------------
# TieredRandomSource
# ---------------------------------------------------------------------------


class TestTieredRandomSource:
    def test_uses_primary_when_available(self, mocker):
        fallback = mocker.Mock(spec=WeakRandomSource)
        source = TieredRandomSource(SecureRandomSource(), fallback)
        source.uniform(10)
        source.token_bytes(8)
        fallback.uniform.assert_not_called()
        fallback.token_bytes.assert_not_called()

    def test_falls_back_on_unavailable(self, broken_bytes):
        source = TieredRandomSource(
            SecureRandomSource(broken_bytes), WeakRandomSource(seed=3)
        )
        assert 0 <= source.uniform(10) < 10
        assert len(source.token_bytes(12)) == 12

    def test_fallback_is_logged(self, broken_bytes):
        source = TieredRandomSource(
            SecureRandomSource(broken_bytes), WeakRandomSource(seed=3)
        )
        with capture_logs() as logs:
            source.uniform(10)
        assert logs[0]["event"] == "secure_random_unavailable"
        assert logs[0]["log_level"] == "warning"

    def test_range_errors_are_not_recovered(self, mocker):
        fallback = mocker.Mock(spec=WeakRandomSource)
        source = TieredRandomSource(SecureRandomSource(), fallback)
        with pytest.raises(InvalidRangeError):
            source.uniform(0)
        fallback.uniform.assert_not_called()

    def test_fallback_failure_propagates(self, broken_bytes, mocker):
        fallback = mocker.Mock(spec=WeakRandomSource)
        fallback.uniform.side_effect = RuntimeError("fallback down")
        source = TieredRandomSource(SecureRandomSource(broken_bytes), fallback)
        with pytest.raises(RuntimeError, match="fallback down"):
            source.uniform(10)


def test_process_wide_sources():
    assert isinstance(default_source(), TieredRandomSource)
    assert isinstance(weak_source(), WeakRandomSource)
    assert isinstance(default_source(), RandomSource)
