from __future__ import annotations

import math
import uuid
from dataclasses import replace

import pytest

from gift_compliment.config import ClampConfig
from gift_compliment.entropy import (
    EnvData,
    UserSignals,
    build_fingerprint,
    compute_entropy_key,
    format_number,
    hash_fingerprint,
    hash_to_seed,
    new_user_key,
    smooth01,
)


def test_smooth01_matches_documented_saturation() -> None:
    assert smooth01(5000, 5000) == pytest.approx(0.6321, abs=1e-4)


def test_smooth01_is_zero_at_origin_and_bounded() -> None:
    assert smooth01(0, 10) == 0.0
    for x in [0.5, 1, 10, 250, 5000, 20000]:
        value = smooth01(x, 5000)
        assert 0.0 <= value < 1.0


def test_smooth01_is_strictly_increasing() -> None:
    values = [smooth01(x, 3000) for x in range(0, 30000, 250)]
    assert all(later > earlier for earlier, later in zip(values, values[1:]))


def test_smooth01_degenerates_to_step_without_scale() -> None:
    assert smooth01(3, 0) == 1.0
    assert smooth01(0, 0) == 0.0
    assert smooth01(-1, -5) == 0.0


def test_fingerprint_layout(still_signals: UserSignals, env: EnvData) -> None:
    fingerprint = build_fingerprint(still_signals, "u1", env)
    assert fingerprint == (
        "m:0.0000000000|c:0.0000000000|i:0.0000000000"
        "|rawM:0|rawC:0|rawI:0|env:1920x1080:1:0|user:u1"
    )
    assert build_fingerprint(still_signals, "u1", env, "n1") == fingerprint + "|nonce:n1"


def test_fingerprint_uses_ten_decimals(env: EnvData) -> None:
    signals = UserSignals(pixels_moved=5000, clicks=10, idle_ms=3000)
    segments = build_fingerprint(signals, "u1", env).split("|")
    expected = f"{1 - math.exp(-1):.10f}"
    assert segments[:3] == [f"m:{expected}", f"c:{expected}", f"i:{expected}"]


def test_empty_nonce_is_treated_as_absent(busy_signals: UserSignals, env: EnvData) -> None:
    assert build_fingerprint(busy_signals, "u1", env, "") == build_fingerprint(busy_signals, "u1", env)


def test_fingerprint_is_deterministic(busy_signals: UserSignals, env: EnvData) -> None:
    first = compute_entropy_key(busy_signals, "u1", env, "n1")
    second = compute_entropy_key(UserSignals(4321.5, 7, 1250), "u1", replace(env), "n1")
    assert first == second


@pytest.mark.parametrize(
    "signals_change, key, env_change, nonce",
    [
        ({"pixels_moved": 4321.6}, "u1", {}, None),
        ({"clicks": 8}, "u1", {}, None),
        ({"idle_ms": 1251}, "u1", {}, None),
        ({}, "u2", {}, None),
        ({}, "u1", {"width": 1280}, None),
        ({}, "u1", {"height": 720}, None),
        ({}, "u1", {"device_pixel_ratio": 2}, None),
        ({}, "u1", {"timezone_offset_minutes": -60}, None),
        ({}, "u1", {}, "n1"),
    ],
)
def test_any_single_field_changes_the_seed(
    busy_signals: UserSignals, env: EnvData, signals_change, key, env_change, nonce
) -> None:
    base_fingerprint = build_fingerprint(busy_signals, "u1", env)
    changed_signals = replace(busy_signals, **signals_change)
    changed_env = replace(env, **env_change)
    fingerprint = build_fingerprint(changed_signals, key, changed_env, nonce)
    assert fingerprint != base_fingerprint
    assert hash_to_seed(hash_fingerprint(fingerprint)) != hash_to_seed(hash_fingerprint(base_fingerprint))


def test_nonces_yield_distinct_seeds(still_signals: UserSignals, env: EnvData) -> None:
    first = compute_entropy_key(still_signals, "u1", env, "n1")
    second = compute_entropy_key(still_signals, "u1", env, "n2")
    assert first != second
    assert hash_to_seed(first) != hash_to_seed(second)


def test_hash_is_lowercase_hex(still_signals: UserSignals, env: EnvData) -> None:
    digest = compute_entropy_key(still_signals, "u1", env)
    assert len(digest) == 64
    assert digest == digest.lower()
    int(digest, 16)


def test_seed_reads_first_sixty_four_bits() -> None:
    digest = "0123456789abcdef" + "f" * 48
    assert hash_to_seed(digest) == 0x0123456789ABCDEF


def test_format_number_drops_integral_fraction() -> None:
    assert format_number(3.0) == "3"
    assert format_number(7) == "7"
    assert format_number(1.5) == "1.5"
    assert format_number(2.625) == "2.625"
    with pytest.raises(TypeError):
        format_number(True)


def test_clamping_bounds_each_signal() -> None:
    wild = UserSignals(pixels_moved=5_000_000, clicks=99_999, idle_ms=-20)
    clamped = wild.clamped()
    assert clamped == UserSignals(pixels_moved=1_000_000, clicks=10_000, idle_ms=0)
    tight = wild.clamped(ClampConfig(max_pixels_moved=10, max_clicks=2, max_idle_ms=5))
    assert (tight.pixels_moved, tight.clicks, tight.idle_ms) == (10, 2, 0)


def test_new_user_key_is_uuid4() -> None:
    assert uuid.UUID(new_user_key()).version == 4
