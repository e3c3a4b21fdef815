"""
Seeded fast random number generator for reservoir sampling.

XorShiftRandom implements Marsaglia's 64-bit xorshift recurrence
(Marsaglia, G. (2003). Xorshift RNGs. Journal of Statistical Software 8(14)).
It only provides bounded integers, which is all reservoir sampling needs.

Seeds derived from partition indices are small and share low bits, so the
raw seed is never used as state directly. It is first spread over all 64
bits with two rounds of xxHash32.

Instances are not thread safe. Each sampling task owns its own generator.
"""

from __future__ import annotations

import xxhash

MASK_32 = 0xFFFFFFFF
MASK_64 = 0xFFFFFFFFFFFFFFFF
MAX_BOUND = 1 << 31

# Seed of the first hashing round
HASH_SEED = 0x3C074A61
# Stand-in state when hashing lands on zero (xorshift fixed point)
ZERO_STATE_REPLACEMENT = 0x9E3779B97F4A7C15

_GOLDEN_GAMMA_32 = 0x9E3775CD


def hash_seed(seed: int) -> int:
    """
    Mix a 64-bit seed into a well-distributed 64-bit generator state.

    The seed's 8 big-endian bytes are hashed twice: the first round gives
    the low 32 bits, the second round, seeded with the first result, gives
    the high 32 bits.
    """
    data = (seed & MASK_64).to_bytes(8, "big")
    low = xxhash.xxh32(data, seed=HASH_SEED).intdigest()
    high = xxhash.xxh32(data, seed=low).intdigest()
    return (high << 32) | low


def byteswap32(value: int) -> int:
    """
    Scramble a 32-bit integer: multiply, reverse bytes, multiply again.

    Returns a signed 32-bit result.
    """
    hc = (value * _GOLDEN_GAMMA_32) & MASK_32
    hc = int.from_bytes(hc.to_bytes(4, "big"), "little")
    hc = (hc * _GOLDEN_GAMMA_32) & MASK_32
    return hc - (1 << 32) if hc >= (1 << 31) else hc


class XorShiftRandom:
    """
    Deterministic xorshift generator producing bounded integers.

    Example:
        rng = XorShiftRandom(42)
        slot = rng.next_int(1000)   # uniform in [0, 1000)
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        self._state = 0
        self.reseed(seed)

    def reseed(self, seed: int) -> None:
        """Reset the generator as if freshly constructed from ``seed``."""
        state = hash_seed(seed)
        self._state = state if state != 0 else ZERO_STATE_REPLACEMENT

    def next_bits(self, bits: int) -> int:
        """Advance the state and return its low ``bits`` bits."""
        x = self._state
        x ^= (x << 21) & MASK_64
        x ^= x >> 35
        x ^= (x << 4) & MASK_64
        self._state = x
        return x & ((1 << bits) - 1)

    def next_int(self, bound: int) -> int:
        """
        Return a uniform integer in ``[0, bound)``.

        Raises:
            ValueError: If bound is not in ``(0, 2**31]``.
        """
        if bound <= 0 or bound > MAX_BOUND:
            raise ValueError(f"bound must be in (0, {MAX_BOUND}], got {bound}")

        r = self.next_bits(31)
        m = bound - 1
        if bound & m == 0:
            # Power of two: take the high bits
            return (bound * r) >> 31

        # Reject draws from the incomplete last block so every residue is equally likely
        u = r
        r = u % bound
        while u - r + m >= MAX_BOUND:
            u = self.next_bits(31)
            r = u % bound
        return r
