"""Bundled compliment data for the gift compliment package."""

from __future__ import annotations

import json
from importlib import resources
from typing import Dict, List

_TEMPLATES_FILE = "compliment_templates.json"


def load_compliment_templates() -> Dict[str, List[str]]:
    with resources.files(__package__).joinpath(_TEMPLATES_FILE).open("r", encoding="utf-8") as stream:
        return json.load(stream)


def load_fallback_compliments() -> List[str]:
    """Return the embedded pool used when no remote candidates are available."""
    return list(load_compliment_templates()["templates"])


__all__ = ["load_compliment_templates", "load_fallback_compliments"]
