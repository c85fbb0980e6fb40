"""Expansion of the base compliment templates into a larger candidate pool."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .data import load_compliment_templates
from .logging import get_logger
from .utils.io import load_yaml_or_json, save_json
from .utils.random import SplitMix64, deterministic_hash

LOGGER = get_logger(__name__)

DEFAULT_POOL_SIZE = 350
DEFAULT_SEED_MATERIAL = "gift-compliment"
MIN_VARIATION_LENGTH = 20
MAX_VARIATION_LENGTH = 200


@dataclass
class PoolBuilder:
    """Combine templates with optional starters and connectors.

    The pool opens with the base templates in order. Variations
    ``starter + template.lower() + connector`` follow, skipping any that
    repeat or fall outside the length bounds. Draws come from a seeded
    :class:`SplitMix64`, so a given seed always yields the same pool.
    """

    templates: Sequence[str]
    starters: Sequence[str] = ("",)
    connectors: Sequence[str] = ("",)
    seed: Optional[int] = None
    used: set[str] = field(default_factory=set)

    @classmethod
    def from_bundled(cls, seed: Optional[int] = None) -> PoolBuilder:
        data = load_compliment_templates()
        return cls(data["templates"], data["starters"], data["connectors"], seed=seed)

    def build(self, count: int = DEFAULT_POOL_SIZE) -> List[str]:
        if not self.templates:
            raise ValueError("at least one template is required")
        seed = self.seed if self.seed is not None else deterministic_hash(DEFAULT_SEED_MATERIAL)
        rng = SplitMix64(seed)
        self.used.clear()
        pool: List[str] = []

        for template in self.templates:
            if len(pool) >= count:
                break
            self._keep(pool, template)

        attempts = 0
        while len(pool) < count and attempts < count * 3:
            attempts += 1
            base = self.templates[rng.next_int(len(self.templates))]
            starter = self.starters[rng.next_int(len(self.starters))]
            connector = self.connectors[rng.next_int(len(self.connectors))]
            if not (starter or connector):
                continue
            variation = starter + base.lower() + connector
            if MIN_VARIATION_LENGTH < len(variation) < MAX_VARIATION_LENGTH:
                self._keep(pool, variation)

        remaining = [template for template in self.templates if template not in self.used]
        while len(pool) < count and remaining:
            self._keep(pool, remaining.pop(rng.next_int(len(remaining))))

        LOGGER.info("Built pool of %d compliments after %d variation draws", len(pool), attempts)
        return pool[:count]

    def _keep(self, pool: List[str], text: str) -> None:
        if text in self.used:
            return
        self.used.add(text)
        pool.append(text)


def write_pool(path: Path, compliments: Sequence[str]) -> None:
    save_json(Path(path), {"compliments": list(compliments)})


def load_pool(path: Path) -> List[str]:
    """Read a pool written by :func:`write_pool` or a bare JSON/YAML list."""
    data = load_yaml_or_json(Path(path))
    if isinstance(data, dict):
        data = data.get("compliments", [])
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise TypeError("Expected a list of compliment strings")
    return data
