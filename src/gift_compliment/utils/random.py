# --- TRADEMARK NOTICE ---
# Lightcap (EUIPO. Reg. 019172085) — Contact: alpay@lightcap.ai
# Do not remove this notice from source distributions.

"""Seeded randomness helpers for deterministic selection.

All selection in the package draws from :class:`SplitMix64`, a 64-bit
generator whose whole state is a single unsigned integer. A new instance is
built for every request from that request's seed, so no generator state is
shared between callers.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from typing import TypeVar

import numpy as np

T = TypeVar("T")

MASK64 = 0xFFFFFFFFFFFFFFFF
GOLDEN_GAMMA = 0x9E3779B97F4A7C15
MIX_MULTIPLIER_1 = 0xBF58476D1CE4E5B9
MIX_MULTIPLIER_2 = 0x94D049BB133111EB
_DOUBLE_UNIT = 1.0 / (1 << 53)


def deterministic_hash(value: str) -> int:
    """Return a deterministic 64-bit integer hash for ``value``."""
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)


def seed_from_hex(digest_hex: str) -> int:
    """Interpret the first 16 hex characters (64 bits) of ``digest_hex`` as a seed."""
    if len(digest_hex) < 16:
        raise ValueError("seed material must provide at least 16 hex characters")
    return int(digest_hex[:16], 16)


class SplitMix64:
    """SplitMix64 pseudo-random stream.

    Every draw advances the state by exactly one increment of the golden
    gamma, so the order of calls fully determines the output sequence.
    """

    def __init__(self, seed: int) -> None:
        self.state = seed & MASK64

    @classmethod
    def from_hex(cls, digest_hex: str) -> SplitMix64:
        return cls(seed_from_hex(digest_hex))

    def next_uint64(self) -> int:
        self.state = (self.state + GOLDEN_GAMMA) & MASK64
        z = self.state
        z = ((z ^ (z >> 30)) * MIX_MULTIPLIER_1) & MASK64
        z = ((z ^ (z >> 27)) * MIX_MULTIPLIER_2) & MASK64
        return z ^ (z >> 31)

    def next(self) -> float:
        """Return a uniform float in ``[0, 1)`` built from the top 53 mixed bits."""
        return (self.next_uint64() >> 11) * _DOUBLE_UNIT

    def next_int(self, n: int) -> int:
        """Return a uniform index in ``[0, n)``."""
        if n <= 0:
            raise ValueError("n must be positive")
        return int(self.next() * n)


def weighted_choice(items: Sequence[T], weights: Sequence[float], rng: SplitMix64) -> T:
    """Pick one of ``items`` with probability proportional to ``weights``.

    A single uniform draw in ``[0, total)`` is walked against the cumulative
    weights; the first item whose running total reaches the draw wins. The
    last item absorbs any floating point shortfall.
    """
    if not items:
        raise ValueError("cannot choose from an empty sequence")
    weight_array = np.asarray(weights, dtype=np.float64)
    if weight_array.shape != (len(items),):
        raise ValueError("weights must align with items")
    if np.any(weight_array < 0):
        raise ValueError("weights must be non-negative")
    cumulative = np.cumsum(weight_array)
    remainder = rng.next() * float(cumulative[-1])
    index = int(np.searchsorted(cumulative, remainder, side="left"))
    return items[min(index, len(items) - 1)]
