# --- TRADEMARK NOTICE ---
# Lightcap (EUIPO. Reg. 019172085) — Contact: alpay@lightcap.ai
# Do not remove this notice from source distributions.

"""Behavioural fingerprints and the seeds derived from them.

Three passive signals (pointer travel, clicks, idle time) are squashed onto
``[0, 1)`` with a saturating exponential, serialised together with the raw
values, the viewport description, the user key and an optional nonce, and
hashed with SHA-256. The first 64 bits of that digest seed the
:class:`~gift_compliment.utils.random.SplitMix64` stream used for every
downstream pick.

The fingerprint layout is fixed::

    m:<norm>|c:<norm>|i:<norm>|rawM:<n>|rawC:<n>|rawI:<n>|env:<w>x<h>:<dpr>:<tz>|user:<key>[|nonce:<nonce>]
"""

from __future__ import annotations

import math
import secrets
import time
import uuid
from dataclasses import dataclass, replace
from typing import Optional, Union

from .config import ClampConfig, NormalizationConfig
from .utils.random import SplitMix64, seed_from_hex
from .utils.text import sha256_hex

SERVER_USER_KEY = "server-user"
FINGERPRINT_DELIMITER = "|"
NORM_PRECISION = 10

Number = Union[int, float]


def smooth01(x: float, k: float) -> float:
    """Map a non-negative signal onto ``[0, 1)`` via ``1 - exp(-x / k)``.

    A non-positive ``k`` degenerates to a step: ``1`` for any positive ``x``
    and ``0`` otherwise.
    """
    if k <= 0:
        return 1.0 if x > 0 else 0.0
    return 1.0 - math.exp(-x / k)


@dataclass(frozen=True)
class UserSignals:
    """Interaction signals gathered while the gift was being unwrapped."""

    pixels_moved: float = 0.0
    clicks: int = 0
    idle_ms: float = 0.0

    def clamped(self, limits: Optional[ClampConfig] = None) -> UserSignals:
        """Return a copy with each field bounded to ``[0, limit]``."""
        limits = limits or ClampConfig()
        return replace(
            self,
            pixels_moved=_clamp(self.pixels_moved, limits.max_pixels_moved),
            clicks=_clamp(self.clicks, limits.max_clicks),
            idle_ms=_clamp(self.idle_ms, limits.max_idle_ms),
        )


@dataclass(frozen=True)
class EnvData:
    """Viewport and locale description supplied with each request."""

    width: int
    height: int
    device_pixel_ratio: float
    timezone_offset_minutes: int

    def describe(self) -> str:
        return (
            f"{format_number(self.width)}x{format_number(self.height)}:"
            f"{format_number(self.device_pixel_ratio)}:{format_number(self.timezone_offset_minutes)}"
        )


FALLBACK_ENV = EnvData(width=1920, height=1080, device_pixel_ratio=1, timezone_offset_minutes=0)


def _clamp(value: Number, upper: Number) -> Number:
    return max(0, min(value, upper))


def format_number(value: Number) -> str:
    """Render ``value`` the way the fingerprint expects, independent of locale.

    Integral values drop any fractional part (``3.0`` becomes ``"3"``);
    other floats use the shortest round-tripping representation.
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not valid fingerprint numbers")
    if isinstance(value, int):
        return str(value)
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(float(value))


def normalise_signals(
    signals: UserSignals, normalization: Optional[NormalizationConfig] = None
) -> tuple[float, float, float]:
    """Return ``(movement, clicks, idle)`` squashed with the fingerprint constants."""
    normalization = normalization or NormalizationConfig()
    return (
        smooth01(signals.pixels_moved, normalization.movement_k),
        smooth01(signals.clicks, normalization.clicks_k),
        smooth01(signals.idle_ms, normalization.idle_k),
    )


def build_fingerprint(
    signals: UserSignals,
    user_key: str,
    env: EnvData,
    nonce: Optional[str] = None,
    normalization: Optional[NormalizationConfig] = None,
) -> str:
    """Serialise every selection input into one canonical string.

    An empty ``nonce`` is treated the same as no nonce.
    """
    movement, clicks, idle = normalise_signals(signals, normalization)
    parts = [
        f"m:{movement:.{NORM_PRECISION}f}",
        f"c:{clicks:.{NORM_PRECISION}f}",
        f"i:{idle:.{NORM_PRECISION}f}",
        f"rawM:{format_number(signals.pixels_moved)}",
        f"rawC:{format_number(signals.clicks)}",
        f"rawI:{format_number(signals.idle_ms)}",
        f"env:{env.describe()}",
        f"user:{user_key}",
    ]
    if nonce:
        parts.append(f"nonce:{nonce}")
    return FINGERPRINT_DELIMITER.join(parts)


def hash_fingerprint(fingerprint: str) -> str:
    """Return the 64-character hex SHA-256 digest of ``fingerprint``."""
    return sha256_hex(fingerprint)


def hash_to_seed(digest_hex: str) -> int:
    """Return the 64-bit seed held in the first 16 hex characters of ``digest_hex``."""
    return seed_from_hex(digest_hex)


def compute_entropy_key(
    signals: UserSignals,
    user_key: str,
    env: EnvData,
    nonce: Optional[str] = None,
    normalization: Optional[NormalizationConfig] = None,
) -> str:
    """Return the fingerprint hash for the given inputs."""
    return hash_fingerprint(build_fingerprint(signals, user_key, env, nonce, normalization))


def seeded_rng(
    signals: UserSignals,
    user_key: str,
    env: EnvData,
    nonce: Optional[str] = None,
    normalization: Optional[NormalizationConfig] = None,
) -> tuple[SplitMix64, str]:
    """Return a fresh generator for the inputs together with the fingerprint hash."""
    digest = compute_entropy_key(signals, user_key, env, nonce, normalization)
    return SplitMix64(hash_to_seed(digest)), digest


def new_user_key() -> str:
    """Return a fresh anonymous user key (UUID4)."""
    return str(uuid.uuid4())


def new_session_nonce() -> str:
    """Return a per-request nonce of millisecond timestamp plus random suffix."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)[:7]}"
