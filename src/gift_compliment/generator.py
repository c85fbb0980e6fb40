# --- TRADEMARK NOTICE ---
# Lightcap (EUIPO. Reg. 019172085) — Contact: alpay@lightcap.ai
# Do not remove this notice from source distributions.

"""Template composition of behaviour-tinted compliments."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from .config import NormalizationConfig
from .entropy import smooth01
from .logging import get_logger
from .utils.random import SplitMix64, weighted_choice
from .utils.text import content_hash, normalise_text

LOGGER = get_logger(__name__)

CALM = "calm"
EXPLORATORY = "exploratory"
DECISIVE = "decisive"
BALANCED = "balanced"
THEMES = (CALM, EXPLORATORY, DECISIVE, BALANCED)

BASE_WEIGHT = 0.5
AXIS_MULTIPLIER = 1.5
BALANCE_MULTIPLIER = 1.0
CLOSER_BASE_WEIGHT = 0.8
CLOSER_SOFTNESS_MULTIPLIER = 0.4


@dataclass(frozen=True)
class StyleVector:
    """Continuous summary of how the gift was opened.

    ``tempo`` tracks decisiveness, ``softness`` patience and ``spark``
    exploration. Each lies in ``[0, 1]``.
    """

    tempo: float
    softness: float
    spark: float

    @classmethod
    def from_signals(
        cls,
        pixels_moved: float,
        clicks: float,
        idle_ms: float,
        normalization: Optional[NormalizationConfig] = None,
    ) -> StyleVector:
        normalization = normalization or NormalizationConfig()
        pixels_moved, clicks, idle_ms = (max(0.0, value) for value in (pixels_moved, clicks, idle_ms))
        movement = smooth01(pixels_moved, normalization.movement_k)
        clicked = smooth01(clicks, normalization.clicks_k)
        idle = smooth01(idle_ms, normalization.style_idle_k)
        return cls(
            tempo=0.6 * clicked + 0.4 * (1 - idle),
            softness=0.7 * idle + 0.3 * (1 - clicked),
            spark=0.7 * movement + 0.3 * clicked,
        )

    def theme_weights(self) -> dict[str, float]:
        """Return the sampling weight of each behavioural theme."""
        return {
            CALM: BASE_WEIGHT + self.softness * AXIS_MULTIPLIER,
            EXPLORATORY: BASE_WEIGHT + self.spark * AXIS_MULTIPLIER,
            DECISIVE: BASE_WEIGHT + self.tempo * AXIS_MULTIPLIER,
            BALANCED: BASE_WEIGHT + (1 - abs(self.tempo - self.softness)) * BALANCE_MULTIPLIER,
        }


@dataclass(frozen=True)
class ThemedBank:
    """Ordered phrases tagged with the theme each one belongs to."""

    phrases: tuple[str, ...]
    themes: tuple[str, ...]

    @classmethod
    def from_groups(cls, groups: Mapping[str, Sequence[str]]) -> ThemedBank:
        phrases: list[str] = []
        themes: list[str] = []
        for theme in THEMES:
            for phrase in groups.get(theme, ()):
                phrases.append(phrase)
                themes.append(theme)
        return cls(tuple(phrases), tuple(themes))

    def weights(self, style: StyleVector) -> NDArray[np.float64]:
        by_theme = style.theme_weights()
        return np.array([by_theme[theme] for theme in self.themes], dtype=np.float64)

    def pick(self, style: StyleVector, rng: SplitMix64) -> str:
        return weighted_choice(self.phrases, self.weights(style), rng)


OPENERS: tuple[str, ...] = (
    "You have",
    "There's something",
    "I notice",
    "You bring",
    "You hold",
    "You carry",
    "You show",
    "You offer",
    "You create",
    "You find",
    "You make",
    "You keep",
    "You know",
    "You see",
    "You feel",
    "You move",
    "You stay",
    "You choose",
    "You let",
    "You give",
)

TRAITS = ThemedBank.from_groups(
    {
        CALM: (
            "a quiet kind of confidence",
            "a steady presence",
            "a patient way of seeing",
            "a calm kind of precision",
            "a gentle kind of strength",
            "a thoughtful approach",
            "a measured way of moving",
            "a quiet kind of wisdom",
            "a still kind of power",
            "a patient kind of curiosity",
            "a calm kind of focus",
            "a steady kind of grace",
            "a quiet kind of courage",
            "a measured kind of energy",
            "a gentle kind of persistence",
        ),
        EXPLORATORY: (
            "a restless curiosity",
            "an exploratory mind",
            "a wandering kind of attention",
            "a searching kind of energy",
            "a curious kind of movement",
            "an adventurous spirit",
            "a wide kind of seeing",
            "a roaming kind of focus",
            "a restless kind of intelligence",
            "an exploratory kind of presence",
            "a wandering kind of wisdom",
            "a searching kind of grace",
            "a curious kind of strength",
            "an adventurous kind of patience",
            "a wide kind of understanding",
        ),
        DECISIVE: (
            "a decisively playful way",
            "a direct kind of curiosity",
            "a quick kind of learning",
            "a decisive kind of exploration",
            "a sharp kind of attention",
            "a focused kind of energy",
            "a precise kind of movement",
            "a direct kind of presence",
            "a quick kind of understanding",
            "a sharp kind of wisdom",
            "a focused kind of curiosity",
            "a precise kind of exploration",
            "a decisive kind of patience",
            "a direct kind of strength",
            "a quick kind of grace",
        ),
        BALANCED: (
            "a thoughtful kind of energy",
            "a measured kind of curiosity",
            "a steady kind of exploration",
            "a calm kind of playfulness",
            "a patient kind of decisiveness",
            "a gentle kind of directness",
            "a quiet kind of action",
            "a still kind of movement",
            "a thoughtful kind of restlessness",
            "a measured kind of adventure",
            "a steady kind of searching",
            "a calm kind of testing",
            "a patient kind of exploring",
            "a gentle kind of wandering",
            "a quiet kind of learning",
            "a still kind of curiosity",
            "a thoughtful kind of play",
            "a measured kind of energy",
            "a steady kind of presence",
            "a calm kind of intelligence",
        ),
    }
)

EVIDENCE = ThemedBank.from_groups(
    {
        CALM: (
            "You don't rush the moment",
            "You let things settle",
            "You give things room",
            "You wait for the right shape",
            "You let time do its work",
            "You don't force the answer",
            "You trust the process",
            "You let things land",
            "You give space to what matters",
            "You don't hurry the understanding",
            "You let clarity find you",
            "You wait for things to speak",
            "You give moments their weight",
            "You don't rush to conclusions",
            "You let patterns emerge",
        ),
        EXPLORATORY: (
            "You explore until you find the shape",
            "You touch the edges to learn",
            "You wander until something clicks",
            "You search until it makes sense",
            "You move until you see the pattern",
            "You explore until the world opens",
            "You test boundaries to understand",
            "You roam until you find your way",
            "You wander until clarity arrives",
            "You explore until things connect",
            "You move until the picture forms",
            "You search until meaning appears",
            "You test until systems speak back",
            "You explore until patterns reveal",
            "You wander until understanding comes",
        ),
        DECISIVE: (
            "You test things until they speak back",
            "You don't just watch, you engage",
            "You negotiate with systems",
            "You interact until you understand",
            "You probe until things respond",
            "You engage until clarity comes",
            "You test until patterns emerge",
            "You interact until meaning forms",
            "You probe until systems reveal",
            "You engage until things connect",
            "You test until understanding arrives",
            "You interact until the picture forms",
            "You probe until clarity appears",
            "You engage until patterns speak",
            "You test until meaning emerges",
        ),
        BALANCED: (
            "You find the balance between action and stillness",
            "You know when to move and when to wait",
            "You blend curiosity with patience",
            "You combine exploration with presence",
            "You mix playfulness with thoughtfulness",
            "You balance energy with calm",
            "You weave movement with stillness",
            "You combine testing with waiting",
            "You blend directness with gentleness",
            "You mix decisiveness with patience",
            "You balance exploration with focus",
            "You combine wandering with presence",
            "You blend restlessness with calm",
            "You mix searching with settling",
            "You balance action with observation",
        ),
    }
)

CLOSERS: tuple[str, ...] = (
    "That's rare.",
    "That's a gift.",
    "That's how builders think.",
    "That's how artists see.",
    "That's a rare skill.",
    "That matters.",
    "That's valuable.",
    "That's how wisdom works.",
    "That's how understanding grows.",
    "That's how presence feels.",
    "That's how learning happens.",
    "That's how curiosity moves.",
    "That's how patience pays.",
    "That's how exploration rewards.",
    "That's how presence builds.",
)


@dataclass(frozen=True)
class GeneratedCompliment:
    text: str
    hash: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.hash, "text": self.text}


class ComplimentGenerator:
    """Compose ``"{opener} {trait}. {evidence}. {closer}"`` from the phrase banks.

    Draws happen in a fixed order (opener, trait, evidence, closer) from a
    generator seeded by the entropy hash, so the output is a pure function of
    the hash and the three signals.
    """

    def __init__(self, normalization: Optional[NormalizationConfig] = None) -> None:
        self.normalization = normalization or NormalizationConfig()

    def generate(self, entropy_hash_hex: str, pixels_moved: float, clicks: float, idle_ms: float) -> str:
        rng = SplitMix64.from_hex(entropy_hash_hex)
        style = StyleVector.from_signals(pixels_moved, clicks, idle_ms, self.normalization)
        LOGGER.debug("Composing compliment for style %s", style)

        opener = weighted_choice(OPENERS, np.ones(len(OPENERS)), rng)
        trait = TRAITS.pick(style, rng)
        evidence = EVIDENCE.pick(style, rng)
        closer_weight = CLOSER_BASE_WEIGHT + style.softness * CLOSER_SOFTNESS_MULTIPLIER
        closer = weighted_choice(CLOSERS, np.full(len(CLOSERS), closer_weight), rng)

        return normalise_text(f"{opener} {trait}. {evidence}. {closer}")

    def generate_compliment(
        self, entropy_hash_hex: str, pixels_moved: float, clicks: float, idle_ms: float
    ) -> GeneratedCompliment:
        """Generate text and attach its content hash as the identifier."""
        text = self.generate(entropy_hash_hex, pixels_moved, clicks, idle_ms)
        return GeneratedCompliment(text=text, hash=content_hash(text))


def generate_compliment(entropy_hash_hex: str, pixels_moved: float, clicks: float, idle_ms: float) -> str:
    return ComplimentGenerator().generate(entropy_hash_hex, pixels_moved, clicks, idle_ms)
