"""Deterministic pseudo-random source (Mulberry32).

Same seed → same sequence on every platform and run.  Not cryptographic.
Each replicate owns its own 32-bit stream.  All arithmetic is
masked to 32 bits to mirror unsigned integer overflow.
"""

from __future__ import annotations

import math

MASK32 = 0xFFFFFFFF
TWO_POW_32 = 4294967296.0


class RNG:
    """Seeded generator with uniform, normal, exponential and Poisson draws."""

    __slots__ = ("_state",)

    def __init__(self, seed: int):
        self._state = seed & MASK32

    @property
    def state(self) -> int:
        return self._state

    def next_u32(self) -> int:
        self._state = (self._state + 0x6D2B79F5) & MASK32
        t = self._state
        t = ((t ^ (t >> 15)) * (t | 1)) & MASK32
        t ^= (t + (((t ^ (t >> 7)) * (t | 61)) & MASK32)) & MASK32
        return (t ^ (t >> 14)) & MASK32

    def uniform(self) -> float:
        """Uniform on [0, 1)."""
        return self.next_u32() / TWO_POW_32

    def uniform_range(self, a: float, b: float) -> float:
        """Uniform on [a, b)."""
        return a + (b - a) * self.uniform()

    def _uniform_nonzero(self) -> float:
        u = 0.0
        while u == 0.0:
            u = self.uniform()
        return u

    def normal01(self) -> float:
        """Standard normal via Box–Muller (cosine branch only)."""
        u = self._uniform_nonzero()
        v = self._uniform_nonzero()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)

    def normal(self, mean: float, std: float) -> float:
        return mean + std * self.normal01()

    def exponential(self, rate: float) -> float:
        """Exponential inter-event time; ``inf`` when ``rate <= 0``."""
        if rate <= 0:
            return math.inf
        return -math.log(self._uniform_nonzero()) / rate

    def poisson(self, rate: float) -> int:
        """Poisson count via Knuth's multiplication method.

        Cost grows linearly with ``rate``; intended for per-hour arrival
        counts, not large means.
        """
        if rate <= 0:
            return 0
        limit = math.exp(-rate)
        k = 0
        prod = 1.0
        while True:
            k += 1
            prod *= self.uniform()
            if prod <= limit:
                return k - 1
