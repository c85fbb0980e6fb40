# --- TRADEMARK NOTICE ---
# Lightcap (EUIPO. Reg. 019172085) — Contact: alpay@lightcap.ai
# Do not remove this notice from source distributions.

"""Deterministic pick of one compliment from a candidate pool.

Selection is a pure function of its inputs: the fingerprint of the caller's
signals seeds a :class:`SplitMix64` stream and that stream chooses among the
candidates that are neither duplicates within the batch nor present in the
caller's avoid-set. When everything is avoided the same stream keeps drawing
over the raw pool for a bounded number of attempts, and the first raw
candidate is returned as a last resort. The result may then repeat, but the
call never fails for a non-empty pool.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import AbstractSet, Optional

from .config import NormalizationConfig
from .entropy import EnvData, UserSignals, seeded_rng
from .logging import get_logger
from .utils.random import SplitMix64
from .utils.text import content_hash, normalise_text

LOGGER = get_logger(__name__)

MAX_RETRY_ATTEMPTS = 50


class EmptyPoolError(ValueError):
    """Raised when selection is attempted over an empty candidate pool."""


@dataclass(frozen=True)
class SelectionResult:
    text: str
    hash: str
    fingerprint_hash: str
    exhausted: bool = False


@dataclass(frozen=True)
class _Candidate:
    text: str
    hash: str


def _prepare(candidates: Iterable[str]) -> list[_Candidate]:
    prepared = []
    for raw in candidates:
        text = normalise_text(raw)
        prepared.append(_Candidate(text=text, hash=content_hash(text)))
    return prepared


def dedupe(candidates: Sequence[_Candidate]) -> list[_Candidate]:
    """Keep the first occurrence of each distinct hash, preserving order."""
    seen: set[str] = set()
    unique = []
    for candidate in candidates:
        if candidate.hash in seen:
            continue
        seen.add(candidate.hash)
        unique.append(candidate)
    return unique


class CandidateSelector:
    """Select one candidate per request from a fingerprint-seeded stream."""

    def __init__(
        self,
        normalization: Optional[NormalizationConfig] = None,
        max_retry_attempts: int = MAX_RETRY_ATTEMPTS,
    ) -> None:
        self.normalization = normalization or NormalizationConfig()
        self.max_retry_attempts = max_retry_attempts

    def select(
        self,
        signals: UserSignals,
        user_key: str,
        env: EnvData,
        candidates: Sequence[str],
        avoid_hashes: AbstractSet[str] = frozenset(),
        nonce: Optional[str] = None,
    ) -> SelectionResult:
        if not candidates:
            raise EmptyPoolError("No compliments available")

        pool = _prepare(candidates)
        valid = [candidate for candidate in dedupe(pool) if candidate.hash not in avoid_hashes]
        rng, fingerprint_hash = seeded_rng(signals, user_key, env, nonce, self.normalization)

        if valid:
            chosen = valid[rng.next_int(len(valid))]
            return SelectionResult(chosen.text, chosen.hash, fingerprint_hash)

        retried = self._retry(pool, avoid_hashes, rng)
        if retried is not None:
            return SelectionResult(retried.text, retried.hash, fingerprint_hash)

        LOGGER.info("Every candidate avoided; repeating %s", pool[0].hash[:16])
        first = pool[0]
        return SelectionResult(first.text, first.hash, fingerprint_hash, exhausted=True)

    def _retry(
        self,
        pool: Sequence[_Candidate],
        avoid_hashes: AbstractSet[str],
        rng: SplitMix64,
    ) -> Optional[_Candidate]:
        attempts = min(len(pool), self.max_retry_attempts)
        for _ in range(attempts):
            candidate = pool[rng.next_int(len(pool))]
            if candidate.hash not in avoid_hashes:
                return candidate
        return None


def select_candidate(
    signals: UserSignals,
    user_key: str,
    env: EnvData,
    candidates: Sequence[str],
    avoid_hashes: AbstractSet[str] = frozenset(),
    nonce: Optional[str] = None,
) -> SelectionResult:
    """Select with default normalisation and retry bounds."""
    return CandidateSelector().select(signals, user_key, env, candidates, avoid_hashes, nonce)
