"""One-line captions describing how the gift was unwrapped."""

from __future__ import annotations

from typing import Optional

from .config import NormalizationConfig
from .generator import BALANCED, CALM, DECISIVE, EXPLORATORY, StyleVector, ThemedBank
from .utils.random import SplitMix64

DEFAULT_REFLECTION = "Opened just now."

REFLECTIONS = ThemedBank.from_groups(
    {
        CALM: (
            "Opened slowly.",
            "Unwrapped with patience.",
            "Opened with stillness.",
            "Unwrapped carefully.",
            "Opened with presence.",
            "Unwrapped gently.",
        ),
        EXPLORATORY: (
            "Unwrapped with curiosity.",
            "Opened while exploring.",
            "Unwrapped with wonder.",
            "Opened while moving.",
            "Unwrapped with restlessness.",
            "Opened while searching.",
        ),
        DECISIVE: (
            "Opened all at once.",
            "Unwrapped decisively.",
            "Opened with anticipation.",
            "Unwrapped quickly.",
            "Opened with eagerness.",
            "Unwrapped directly.",
        ),
        BALANCED: (
            DEFAULT_REFLECTION,
            "Unwrapped with intention.",
            "Opened with care.",
            "Unwrapped thoughtfully.",
            "Opened with presence.",
            "Unwrapped with attention.",
        ),
    }
)


def generate_reflection(
    entropy_hash_hex: str,
    pixels_moved: float,
    clicks: float,
    idle_ms: float,
    normalization: Optional[NormalizationConfig] = None,
) -> str:
    """Pick a caption weighted towards the dominant axis of the style vector.

    Uses its own generator seeded from ``entropy_hash_hex``; the caption is
    independent of any compliment drawn from the same hash.
    """
    rng = SplitMix64.from_hex(entropy_hash_hex)
    style = StyleVector.from_signals(pixels_moved, clicks, idle_ms, normalization)
    return REFLECTIONS.pick(style, rng)
