"""
Tests for reservoir_sample_and_count.

Tests cover:
1. Short inputs (fewer items than the reservoir)
2. Counting and single-pass behavior
3. Uniform inclusion probability k/n across seeds
"""

from __future__ import annotations

from collections import Counter
from typing import Iterator

import pytest

from querysketch.sampling.reservoir import reservoir_sample_and_count


def numbers(n: int) -> Iterator[int]:
    """One-shot generator, so any second pass would see nothing."""
    yield from range(n)


class TestShortInput:
    """Inputs that never fill the reservoir."""

    def test_fewer_items_than_k(self) -> None:
        sample, count = reservoir_sample_and_count(numbers(3), 10, seed=1)
        assert sample == [0, 1, 2]
        assert count == 3

    def test_empty_input(self) -> None:
        sample, count = reservoir_sample_and_count([], 5, seed=1)
        assert sample == []
        assert count == 0

    def test_exactly_k_items(self) -> None:
        sample, count = reservoir_sample_and_count(numbers(4), 4, seed=1)
        assert sample == [0, 1, 2, 3]
        assert count == 4


class TestSampling:
    """Inputs larger than the reservoir."""

    def test_sample_size_and_count(self) -> None:
        sample, count = reservoir_sample_and_count(numbers(1000), 25, seed=3)
        assert len(sample) == 25
        assert count == 1000
        assert len(set(sample)) == 25
        assert all(0 <= x < 1000 for x in sample)

    def test_zero_reservoir_still_counts(self) -> None:
        sample, count = reservoir_sample_and_count(numbers(50), 0, seed=3)
        assert sample == []
        assert count == 50

    def test_negative_k_rejected(self) -> None:
        with pytest.raises(ValueError):
            reservoir_sample_and_count(numbers(5), -1)

    def test_same_seed_same_sample(self) -> None:
        a = reservoir_sample_and_count(numbers(500), 10, seed=77)
        b = reservoir_sample_and_count(numbers(500), 10, seed=77)
        assert a == b

    def test_unseeded_call_works(self) -> None:
        sample, count = reservoir_sample_and_count(numbers(100), 10)
        assert len(sample) == 10
        assert count == 100

    def test_later_items_can_replace(self) -> None:
        # With a large stream some of the sample must come from past the prefix
        sample, _ = reservoir_sample_and_count(numbers(10000), 10, seed=5)
        assert any(x >= 10 for x in sample)


class TestUniformity:
    """Every item survives with probability k/n."""

    def test_inclusion_frequency_close_to_k_over_n(self) -> None:
        n, k, trials = 20, 5, 4000
        hits: Counter[int] = Counter()
        for seed in range(trials):
            sample, count = reservoir_sample_and_count(range(n), k, seed=seed)
            assert count == n
            hits.update(sample)

        expected = trials * k / n  # 1000
        for item in range(n):
            # ~5.5 standard deviations
            assert abs(hits[item] - expected) < 150, (item, hits[item])

    def test_first_and_last_items_equally_likely(self) -> None:
        n, k, trials = 50, 1, 5000
        hits: Counter[int] = Counter()
        for seed in range(trials):
            sample, _ = reservoir_sample_and_count(range(n), k, seed=seed)
            hits.update(sample)

        expected = trials / n  # 100
        assert abs(hits[0] - expected) < 50
        assert abs(hits[n - 1] - expected) < 50
