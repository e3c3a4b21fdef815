"""Single-pass reservoir sampling (Algorithm R) that also counts its input."""

from __future__ import annotations

import random
from typing import Iterable, TypeVar

from querysketch.sampling.rng import XorShiftRandom

T = TypeVar("T")


def reservoir_sample_and_count(
    items: Iterable[T],
    k: int,
    seed: int | None = None,
) -> tuple[list[T], int]:
    """
    Draw a uniform sample of at most ``k`` items and count the input.

    The input is consumed once and never materialized; memory is O(k).
    When the input holds n >= k items, every item ends up in the sample
    with probability k/n. When it holds fewer, all of them are returned.

    Args:
        items: Items to sample, of unknown length.
        k: Reservoir size.
        seed: Generator seed. A random seed is drawn when omitted.

    Returns:
        (sample, count of items seen)

    Raises:
        ValueError: If k is negative.
    """
    if k < 0:
        raise ValueError(f"reservoir size must be non-negative, got {k}")

    iterator = iter(items)
    reservoir: list[T] = []

    if k == 0:
        # Nothing to keep; drain for the count
        return reservoir, sum(1 for _ in iterator)

    for item in iterator:
        reservoir.append(item)
        if len(reservoir) >= k:
            break

    seen = len(reservoir)
    if seen < k:
        return reservoir, seen

    rng = XorShiftRandom(seed if seed is not None else random.getrandbits(64))
    for item in iterator:
        seen += 1
        slot = rng.next_int(seen)
        if slot < k:
            reservoir[slot] = item

    return reservoir, seen
