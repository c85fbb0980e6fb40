"""Command line interface for the gift compliment service."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

from .config import ComplimentConfig, load_config
from .entropy import (
    SERVER_USER_KEY,
    EnvData,
    UserSignals,
    build_fingerprint,
    compute_entropy_key,
    hash_fingerprint,
    hash_to_seed,
)
from .logging import configure_logging
from .reflection import generate_reflection
from .seeding import DEFAULT_POOL_SIZE, PoolBuilder, write_pool
from .service import ComplimentRequest, ComplimentService

LOGGER = configure_logging(logger_name=__name__)

PIXELS_OPTION = typer.Option(0.0, "--pixels-moved", help="Cumulative pointer travel in pixels.")
CLICKS_OPTION = typer.Option(0, "--clicks", help="Number of clicks while unwrapping.")
IDLE_OPTION = typer.Option(0.0, "--idle-ms", help="Idle time in milliseconds.")
USER_KEY_OPTION = typer.Option(SERVER_USER_KEY, "--user-key", help="Stable anonymous user key.")
WIDTH_OPTION = typer.Option(1920, "--width", help="Viewport width.")
HEIGHT_OPTION = typer.Option(1080, "--height", help="Viewport height.")
DPR_OPTION = typer.Option(1.0, "--dpr", help="Device pixel ratio.")
TZ_OPTION = typer.Option(0, "--tz-offset", help="Timezone offset in minutes.")
NONCE_OPTION = typer.Option(None, "--nonce", help="Session nonce; omit for a fresh one.")
FINGERPRINT_NONCE_OPTION = typer.Option(None, "--nonce", help="Optional session nonce.")
AVOID_OPTION = typer.Option(None, "--avoid", help="Hash to avoid; repeatable.")
MODE_OPTION = typer.Option(None, "--mode", help="Override the configured mode (template or pool).")
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Path to compliment configuration (YAML or JSON).",
)
COUNT_OPTION = typer.Option(DEFAULT_POOL_SIZE, "--count", help="Number of compliments to emit.")
SEED_OPTION = typer.Option(None, "--seed", help="Integer seed for the pool expansion.")
OUTPUT_OPTION = typer.Option(..., "--output", help="Destination JSON file.")

app = typer.Typer(help="Issue behaviour-seeded compliments and inspect their fingerprints.")


def _load(config_path: Optional[Path], mode: Optional[str]) -> ComplimentConfig:
    overrides = [{"mode": mode}] if mode else []
    try:
        return load_config(config_path, overrides)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _env(width: int, height: int, dpr: float, tz_offset: int) -> EnvData:
    return EnvData(width=width, height=height, device_pixel_ratio=dpr, timezone_offset_minutes=tz_offset)


@app.command()
def compliment(
    pixels_moved: float = PIXELS_OPTION,
    clicks: int = CLICKS_OPTION,
    idle_ms: float = IDLE_OPTION,
    user_key: str = USER_KEY_OPTION,
    width: int = WIDTH_OPTION,
    height: int = HEIGHT_OPTION,
    dpr: float = DPR_OPTION,
    tz_offset: int = TZ_OPTION,
    nonce: Optional[str] = NONCE_OPTION,
    avoid: Optional[List[str]] = AVOID_OPTION,
    mode: Optional[str] = MODE_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Issue a compliment and print ``{id, text, reflection}`` as JSON."""

    config = _load(config_path, mode)
    service = ComplimentService.from_config(config)
    request = ComplimentRequest(
        signals=UserSignals(pixels_moved=pixels_moved, clicks=clicks, idle_ms=idle_ms),
        env=_env(width, height, dpr, tz_offset),
        user_key=user_key,
        avoid_hashes=frozenset(avoid or []),
        nonce=nonce,
    )
    response = service.compliment(request)
    service.save_store()
    typer.echo(json.dumps(response.to_dict(), indent=2))


@app.command()
def reflect(
    pixels_moved: float = PIXELS_OPTION,
    clicks: int = CLICKS_OPTION,
    idle_ms: float = IDLE_OPTION,
    user_key: str = USER_KEY_OPTION,
    width: int = WIDTH_OPTION,
    height: int = HEIGHT_OPTION,
    dpr: float = DPR_OPTION,
    tz_offset: int = TZ_OPTION,
    nonce: Optional[str] = FINGERPRINT_NONCE_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Print the behaviour caption for the given signals."""

    config = load_config(config_path)
    signals = UserSignals(pixels_moved=pixels_moved, clicks=clicks, idle_ms=idle_ms).clamped(config.clamp)
    key = compute_entropy_key(
        signals, user_key, _env(width, height, dpr, tz_offset), nonce, config.normalization
    )
    typer.echo(
        generate_reflection(key, signals.pixels_moved, signals.clicks, signals.idle_ms, config.normalization)
    )


@app.command()
def fingerprint(
    pixels_moved: float = PIXELS_OPTION,
    clicks: int = CLICKS_OPTION,
    idle_ms: float = IDLE_OPTION,
    user_key: str = USER_KEY_OPTION,
    width: int = WIDTH_OPTION,
    height: int = HEIGHT_OPTION,
    dpr: float = DPR_OPTION,
    tz_offset: int = TZ_OPTION,
    nonce: Optional[str] = FINGERPRINT_NONCE_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Print the fingerprint string, its hash and the derived seed."""

    config = load_config(config_path)
    signals = UserSignals(pixels_moved=pixels_moved, clicks=clicks, idle_ms=idle_ms).clamped(config.clamp)
    env = _env(width, height, dpr, tz_offset)
    text = build_fingerprint(signals, user_key, env, nonce, config.normalization)
    digest = hash_fingerprint(text)
    payload = {"fingerprint": text, "hash": digest, "seed": str(hash_to_seed(digest))}
    typer.echo(json.dumps(payload, indent=2))


@app.command("seed-pool")
def seed_pool(
    output: Path = OUTPUT_OPTION,
    count: int = COUNT_OPTION,
    seed: Optional[int] = SEED_OPTION,
) -> None:
    """Expand the bundled templates into a candidate pool file."""

    pool = PoolBuilder.from_bundled(seed=seed).build(count)
    write_pool(output, pool)
    LOGGER.info("Wrote %d compliments to %s", len(pool), output)
    typer.echo(f"{len(pool)} compliments written to {output}")


if __name__ == "__main__":
    app()
