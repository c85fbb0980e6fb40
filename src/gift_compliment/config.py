"""Configuration helpers for the gift compliment service."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional, cast

from .utils.io import load_yaml_or_json

CONFIG_ENV_VAR = "GIFT_COMPLIMENT_CONFIG"
MODES = ("template", "pool")


@dataclass
class NormalizationConfig:
    """Half-saturation constants for the ``smooth01`` curve."""

    movement_k: float = 5000.0
    clicks_k: float = 10.0
    idle_k: float = 3000.0
    style_idle_k: float = 5000.0


@dataclass
class ClampConfig:
    """Upper bounds applied to raw signals before they reach the fingerprint."""

    max_pixels_moved: float = 1_000_000.0
    max_clicks: int = 10_000
    max_idle_ms: float = 60_000.0


@dataclass
class SelectionConfig:
    """Retry and fallback policy for selection and generation."""

    max_retry_attempts: int = 50
    batch_rounds: int = 3
    batch_size: int = 20
    avoid_window: int = 200
    template_attempts: int = 10


@dataclass
class FetchConfig:
    """Remote candidate source settings."""

    url: Optional[str] = None
    concurrency: int = 5
    timeout: float = 5.0
    response_field: str = "text"


@dataclass
class StoreConfig:
    """Issued-hash store settings."""

    capacity: int = 1000
    path: Optional[Path] = None


@dataclass
class ComplimentConfig:
    """Top-level configuration for the compliment service."""

    mode: str = "template"
    pool_path: Optional[Path] = None
    normalization: NormalizationConfig = field(default_factory=NormalizationConfig)
    clamp: ClampConfig = field(default_factory=ClampConfig)
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    store: StoreConfig = field(default_factory=StoreConfig)

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            msg = f"Unknown mode {self.mode!r}; expected one of {', '.join(MODES)}"
            raise ValueError(msg)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ComplimentConfig:
        store = dict(data.get("store", {}))
        if store.get("path") is not None:
            store["path"] = Path(store["path"])
        return cls(
            mode=data.get("mode", "template"),
            pool_path=Path(data["pool_path"]) if data.get("pool_path") else None,
            normalization=NormalizationConfig(**data.get("normalization", {})),
            clamp=ClampConfig(**data.get("clamp", {})),
            selection=SelectionConfig(**data.get("selection", {})),
            fetch=FetchConfig(**data.get("fetch", {})),
            store=StoreConfig(**store),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.pool_path is not None:
            data["pool_path"] = str(self.pool_path)
        if self.store.path is not None:
            data["store"]["path"] = str(self.store.path)
        return data


def _load_mapping(path: Path) -> dict[str, Any]:
    loaded = load_yaml_or_json(path)
    if loaded is None:
        return {}
    if isinstance(loaded, Mapping):
        return cast(dict[str, Any], dict(loaded))
    msg = "Expected mapping at root of configuration"
    raise TypeError(msg)


def _merge_dict(base: dict[str, Any], overrides: Iterable[dict[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for override in overrides:
        for key, value in override.items():
            existing = result.get(key)
            if isinstance(value, dict) and isinstance(existing, dict):
                nested = _merge_dict(cast(dict[str, Any], existing), [value])
                result[key] = nested
            else:
                result[key] = value
    return result


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Iterable[dict[str, Any]]] = None,
) -> ComplimentConfig:
    """Load configuration from disk and merge overrides.

    When ``path`` is omitted the file named by ``GIFT_COMPLIMENT_CONFIG`` is
    used, if set.
    """

    overrides = list(overrides or [])
    if path is None:
        env_path = os.getenv(CONFIG_ENV_VAR)
        path = Path(env_path) if env_path else None
    base = _load_mapping(Path(path)) if path is not None else {}

    merged = _merge_dict(base, overrides)
    return ComplimentConfig.from_dict(merged)
