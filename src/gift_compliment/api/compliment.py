"""Validation of raw request payloads and the status/body contract.

Payload shape::

    {
      "pixelsMoved": number >= 0, "clicks": number >= 0, "idleMs": number >= 0,
      "userKey": string,
      "env": {"w": int >= 0, "h": int >= 0, "dpr": number > 0, "tzOffset": int},
      "avoidHashes": [hex string, ...],   # optional
      "nonce": string                     # optional
    }

Signals are clamped later by the service, not rejected here.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Optional

from ..config import SelectionConfig
from ..entropy import EnvData, UserSignals
from ..logging import get_logger
from ..service import ComplimentRequest, ComplimentService

LOGGER = get_logger(__name__)

INVALID_BODY = {"error": "Invalid request body"}


class ValidationError(ValueError):
    """Raised when a request payload is malformed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


def _number(payload: Mapping[str, Any], field: str) -> float:
    value = payload.get(field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(field, "expected a number")
    if not math.isfinite(value):
        raise ValidationError(field, "expected a finite number")
    return value


def _integer(payload: Mapping[str, Any], field: str, minimum: Optional[int] = None) -> int:
    value = payload.get(field)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "expected an integer")
    if minimum is not None and value < minimum:
        raise ValidationError(field, f"must be >= {minimum}")
    return value


def _env(payload: Mapping[str, Any]) -> EnvData:
    raw = payload.get("env")
    if not isinstance(raw, Mapping):
        raise ValidationError("env", "expected an object")
    dpr = _number(raw, "dpr")
    if dpr <= 0:
        raise ValidationError("dpr", "must be positive")
    return EnvData(
        width=_integer(raw, "w", minimum=0),
        height=_integer(raw, "h", minimum=0),
        device_pixel_ratio=dpr,
        timezone_offset_minutes=_integer(raw, "tzOffset"),
    )


def _avoid_hashes(payload: Mapping[str, Any], window: int) -> frozenset[str]:
    raw = payload.get("avoidHashes", [])
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise ValidationError("avoidHashes", "expected a list of strings")
    return frozenset(raw[-window:]) if window > 0 else frozenset()


def parse_request(payload: Any, selection: Optional[SelectionConfig] = None) -> ComplimentRequest:
    """Turn a decoded JSON body into a :class:`ComplimentRequest`.

    Only the most recent ``avoid_window`` avoid hashes are kept.
    """
    selection = selection or SelectionConfig()
    if not isinstance(payload, Mapping):
        raise ValidationError("body", "expected an object")
    user_key = payload.get("userKey")
    if not isinstance(user_key, str):
        raise ValidationError("userKey", "expected a string")
    nonce = payload.get("nonce")
    if nonce is not None and not isinstance(nonce, str):
        raise ValidationError("nonce", "expected a string")
    signals = UserSignals(
        pixels_moved=_number(payload, "pixelsMoved"),
        clicks=_number(payload, "clicks"),
        idle_ms=_number(payload, "idleMs"),
    )
    return ComplimentRequest(
        signals=signals,
        env=_env(payload),
        user_key=user_key,
        avoid_hashes=_avoid_hashes(payload, selection.avoid_window),
        nonce=nonce,
    )


class ComplimentAPI:
    """Map payloads to ``(status, body)`` pairs for a web framework to return."""

    def __init__(self, service: Optional[ComplimentService] = None) -> None:
        self.service = service or ComplimentService()

    def handle(self, payload: Any) -> tuple[int, dict[str, str]]:
        try:
            request = parse_request(payload, self.service.config.selection)
        except ValidationError as exc:
            LOGGER.warning("Rejected compliment request: %s", exc)
            return 400, dict(INVALID_BODY)
        return 200, self.service.compliment(request).to_dict()
