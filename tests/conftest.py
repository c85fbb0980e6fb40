from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from gift_compliment.config import ComplimentConfig
from gift_compliment.entropy import EnvData, UserSignals


@pytest.fixture
def config() -> ComplimentConfig:
    return ComplimentConfig()


@pytest.fixture
def env() -> EnvData:
    return EnvData(width=1920, height=1080, device_pixel_ratio=1, timezone_offset_minutes=0)


@pytest.fixture
def still_signals() -> UserSignals:
    return UserSignals(pixels_moved=0, clicks=0, idle_ms=0)


@pytest.fixture
def busy_signals() -> UserSignals:
    return UserSignals(pixels_moved=4321.5, clicks=7, idle_ms=1250)
