"""Utility helpers shared across the gift compliment package."""

from .io import load_yaml_or_json, save_json
from .random import SplitMix64, deterministic_hash, weighted_choice
from .text import content_hash, normalise_text

__all__ = [
    "SplitMix64",
    "content_hash",
    "deterministic_hash",
    "load_yaml_or_json",
    "normalise_text",
    "save_json",
    "weighted_choice",
]
