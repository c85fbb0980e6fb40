from __future__ import annotations

from typing import Any

import pytest

from gift_compliment.api import ComplimentAPI, ValidationError, parse_request
from gift_compliment.config import SelectionConfig
from gift_compliment.service import ComplimentService


def _payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "pixelsMoved": 1520.25,
        "clicks": 4,
        "idleMs": 2300,
        "userKey": "3f1c9a4e-demo",
        "env": {"w": 1440, "h": 900, "dpr": 2, "tzOffset": -60},
        "avoidHashes": [],
        "nonce": "try-1",
    }
    payload.update(overrides)
    return payload


def test_valid_payload_returns_compliment() -> None:
    status, body = ComplimentAPI(ComplimentService()).handle(_payload())
    assert status == 200
    assert set(body) == {"id", "text", "reflection"}
    assert len(body["id"]) == 64


def test_repeated_payload_is_stable() -> None:
    api = ComplimentAPI()
    assert api.handle(_payload()) == api.handle(_payload())


def test_parse_request_maps_fields() -> None:
    request = parse_request(_payload())
    assert request.user_key == "3f1c9a4e-demo"
    assert request.env.device_pixel_ratio == 2
    assert request.env.timezone_offset_minutes == -60
    assert request.signals.pixels_moved == 1520.25
    assert request.nonce == "try-1"


def test_parse_request_keeps_recent_avoid_hashes() -> None:
    hashes = [f"{index:064x}" for index in range(250)]
    request = parse_request(_payload(avoidHashes=hashes), SelectionConfig(avoid_window=200))
    assert len(request.avoid_hashes) == 200
    assert hashes[-1] in request.avoid_hashes
    assert hashes[0] not in request.avoid_hashes


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"clicks": True}, "clicks"),
        ({"pixelsMoved": "far"}, "pixelsMoved"),
        ({"idleMs": float("nan")}, "idleMs"),
        ({"userKey": 12}, "userKey"),
        ({"env": None}, "env"),
        ({"env": {"w": 1440, "h": 900, "dpr": 0, "tzOffset": 0}}, "dpr"),
        ({"env": {"w": 1440.5, "h": 900, "dpr": 1, "tzOffset": 0}}, "w"),
        ({"env": {"w": 1440, "h": -1, "dpr": 1, "tzOffset": 0}}, "h"),
        ({"env": {"w": 1440, "h": 900, "dpr": 1}}, "tzOffset"),
        ({"avoidHashes": "abc"}, "avoidHashes"),
        ({"nonce": 5}, "nonce"),
    ],
)
def test_malformed_fields_are_rejected(overrides: dict[str, Any], field: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        parse_request(_payload(**overrides))
    assert excinfo.value.field == field


def test_handle_maps_validation_to_bad_request() -> None:
    status, body = ComplimentAPI().handle(["not", "an", "object"])
    assert status == 400
    assert body == {"error": "Invalid request body"}


def test_negative_signals_are_clamped_not_rejected() -> None:
    status, _ = ComplimentAPI().handle(_payload(pixelsMoved=-50, idleMs=10**9))
    assert status == 200
