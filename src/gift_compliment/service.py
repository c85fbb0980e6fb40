# --- TRADEMARK NOTICE ---
# Lightcap (EUIPO. Reg. 019172085) — Contact: alpay@lightcap.ai
# Do not remove this notice from source distributions.

"""Request-level orchestration of compliment selection and generation.

:meth:`ComplimentService.compliment` always returns a response. Template mode
regenerates under derived nonces until the text escapes the avoid-set. Pool
mode walks remote batches, then the embedded pool, then the embedded pool
with the avoid-set ignored. Any unexpected failure falls back to a compliment
generated from a fixed fingerprint.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import AbstractSet, Optional, Protocol

from .config import ComplimentConfig
from .data import load_fallback_compliments
from .entropy import (
    FALLBACK_ENV,
    SERVER_USER_KEY,
    EnvData,
    UserSignals,
    compute_entropy_key,
    new_session_nonce,
)
from .fetch_pool import RemoteComplimentSource
from .generator import ComplimentGenerator, GeneratedCompliment
from .logging import get_logger
from .reflection import DEFAULT_REFLECTION, generate_reflection
from .seeding import load_pool
from .selection import CandidateSelector, SelectionResult
from .store import IssuedHashStore

LOGGER = get_logger(__name__)

FALLBACK_USER_KEY = "fallback"

SOURCE_TEMPLATE = "template"
SOURCE_REMOTE = "remote"
SOURCE_EMBEDDED = "embedded"
SOURCE_EMBEDDED_REPEAT = "embedded-repeat"
SOURCE_FALLBACK = "fallback"


class CandidateSource(Protocol):
    def fetch_batch(self, count: int, concurrency: int) -> list[str]: ...


@dataclass(frozen=True)
class ComplimentRequest:
    signals: UserSignals
    env: EnvData
    user_key: str = SERVER_USER_KEY
    avoid_hashes: frozenset[str] = field(default_factory=frozenset)
    nonce: Optional[str] = None


@dataclass(frozen=True)
class ComplimentResponse:
    id: str
    text: str
    reflection: str
    source: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "text": self.text, "reflection": self.reflection}


class ComplimentService:
    """Issue one compliment per request."""

    def __init__(
        self,
        config: Optional[ComplimentConfig] = None,
        source: Optional[CandidateSource] = None,
        store: Optional[IssuedHashStore] = None,
        fallback_pool: Optional[Sequence[str]] = None,
        nonce_factory: Callable[[], str] = new_session_nonce,
    ) -> None:
        self.config = config or ComplimentConfig()
        self.source = source
        self.store = store
        self.fallback_pool = list(fallback_pool) if fallback_pool is not None else load_fallback_compliments()
        self.nonce_factory = nonce_factory
        self.selector = CandidateSelector(
            normalization=self.config.normalization,
            max_retry_attempts=self.config.selection.max_retry_attempts,
        )
        self.generator = ComplimentGenerator(self.config.normalization)

    @classmethod
    def from_config(cls, config: ComplimentConfig) -> ComplimentService:
        source = None
        if config.fetch.url:
            source = RemoteComplimentSource(
                config.fetch.url,
                timeout=config.fetch.timeout,
                response_field=config.fetch.response_field,
            )
        store = None
        if config.store.path is not None:
            store = IssuedHashStore.load(config.store.path, capacity=config.store.capacity)
        fallback_pool = load_pool(config.pool_path) if config.pool_path is not None else None
        return cls(config, source=source, store=store, fallback_pool=fallback_pool)

    def compliment(self, request: ComplimentRequest) -> ComplimentResponse:
        try:
            return self._compliment(request)
        except Exception:
            LOGGER.exception("Compliment generation failed; using fixed fallback")
            return self._fallback_response()

    def _compliment(self, request: ComplimentRequest) -> ComplimentResponse:
        signals = request.signals.clamped(self.config.clamp)
        nonce = request.nonce or self.nonce_factory()
        avoid = self._avoid_set(request)

        if self.config.mode == "pool":
            result, source = self._select_from_pool(signals, request.user_key, request.env, avoid, nonce)
            text, digest = result.text, result.hash
        else:
            text, digest = self._generate(signals, request.user_key, request.env, avoid, nonce)
            source = SOURCE_TEMPLATE

        entropy_key = compute_entropy_key(
            signals, request.user_key, request.env, nonce, self.config.normalization
        )
        reflection = generate_reflection(
            entropy_key, signals.pixels_moved, signals.clicks, signals.idle_ms, self.config.normalization
        )
        if self.store is not None:
            self.store.add(request.user_key, digest)

        LOGGER.info(
            "Issued compliment %s... from %s: %s... (%s)",
            digest[:16],
            source,
            text[:50],
            reflection,
        )
        return ComplimentResponse(id=digest, text=text, reflection=reflection, source=source)

    def _avoid_set(self, request: ComplimentRequest) -> frozenset[str]:
        avoid = set(request.avoid_hashes)
        if self.store is not None:
            avoid |= self.store.avoid_set(request.user_key, self.config.selection.avoid_window)
        return frozenset(avoid)

    def _generate(
        self,
        signals: UserSignals,
        user_key: str,
        env: EnvData,
        avoid: AbstractSet[str],
        nonce: str,
    ) -> tuple[str, str]:
        attempts = self.config.selection.template_attempts
        for attempt in range(attempts):
            current_nonce = nonce if attempt == 0 else f"{nonce}-retry-{attempt}"
            generated = self._generate_with_nonce(signals, user_key, env, current_nonce)
            if generated.hash not in avoid:
                return generated.text, generated.hash

        LOGGER.info("Template output collided %d times; forcing a fallback nonce", attempts)
        generated = self._generate_with_nonce(signals, user_key, env, f"{nonce}-fallback")
        return generated.text, generated.hash

    def _generate_with_nonce(
        self, signals: UserSignals, user_key: str, env: EnvData, nonce: str
    ) -> GeneratedCompliment:
        key = compute_entropy_key(signals, user_key, env, nonce, self.config.normalization)
        return self.generator.generate_compliment(key, signals.pixels_moved, signals.clicks, signals.idle_ms)

    def _select_from_pool(
        self,
        signals: UserSignals,
        user_key: str,
        env: EnvData,
        avoid: AbstractSet[str],
        nonce: str,
    ) -> tuple[SelectionResult, str]:
        selection = self.config.selection
        if self.source is not None:
            for round_index in range(selection.batch_rounds):
                batch_size = selection.batch_size * (2**round_index)
                batch = self.source.fetch_batch(batch_size, self.config.fetch.concurrency)
                if not batch:
                    LOGGER.warning("Round %d returned no candidates", round_index + 1)
                    continue
                result = self.selector.select(signals, user_key, env, batch, avoid, nonce)
                if result.hash not in avoid:
                    return result, SOURCE_REMOTE
                LOGGER.info("Round %d exhausted by avoid-set", round_index + 1)

        LOGGER.info("Falling back to embedded pool of %d", len(self.fallback_pool))
        result = self.selector.select(signals, user_key, env, self.fallback_pool, avoid, nonce)
        if result.hash not in avoid:
            return result, SOURCE_EMBEDDED
        result = self.selector.select(signals, user_key, env, self.fallback_pool, frozenset(), nonce)
        return result, SOURCE_EMBEDDED_REPEAT

    def _fallback_response(self) -> ComplimentResponse:
        key = compute_entropy_key(
            UserSignals(),
            FALLBACK_USER_KEY,
            FALLBACK_ENV,
            str(int(time.time() * 1000)),
        )
        generated = ComplimentGenerator().generate_compliment(key, 0, 0, 0)
        return ComplimentResponse(
            id=generated.hash,
            text=generated.text,
            reflection=DEFAULT_REFLECTION,
            source=SOURCE_FALLBACK,
        )

    def save_store(self) -> None:
        if self.store is not None and self.config.store.path is not None:
            self.store.save(self.config.store.path)
