from __future__ import annotations

import pytest

from gift_compliment.entropy import EnvData, UserSignals, compute_entropy_key
from gift_compliment.selection import CandidateSelector, EmptyPoolError, select_candidate
from gift_compliment.utils.text import content_hash

POOL = ["X", "Y", "Z"]


def test_selection_is_deterministic(still_signals: UserSignals, env: EnvData) -> None:
    first = select_candidate(still_signals, "u1", env, POOL)
    again = CandidateSelector().select(still_signals, "u1", env, list(POOL))
    assert first == again
    assert first.text in POOL
    assert first.hash == content_hash(first.text)
    assert first.fingerprint_hash == compute_entropy_key(still_signals, "u1", env)
    assert not first.exhausted


def test_still_user_golden_pick(still_signals: UserSignals, env: EnvData) -> None:
    result = select_candidate(still_signals, "u1", env, POOL)
    assert result.text == "X"
    assert result.fingerprint_hash.startswith("52f192a3c79dc3f4")


def test_avoided_candidate_is_never_returned(still_signals: UserSignals, env: EnvData) -> None:
    avoid = {content_hash("X")}
    for user in (f"user-{index}" for index in range(60)):
        result = select_candidate(still_signals, user, env, POOL, avoid)
        assert result.text != "X"
        assert result.hash not in avoid


def test_single_survivor_is_chosen(busy_signals: UserSignals, env: EnvData) -> None:
    avoid = {content_hash("X"), content_hash("Z")}
    result = select_candidate(busy_signals, "u1", env, POOL, avoid, nonce="n1")
    assert result.text == "Y"


def test_full_exhaustion_repeats_first_candidate(still_signals: UserSignals, env: EnvData) -> None:
    avoid = {content_hash(text) for text in POOL}
    result = select_candidate(still_signals, "u1", env, POOL, avoid)
    assert result.text == "X"
    assert result.exhausted


def test_empty_pool_raises(still_signals: UserSignals, env: EnvData) -> None:
    with pytest.raises(EmptyPoolError):
        select_candidate(still_signals, "u1", env, [])


def test_whitespace_variants_share_a_hash() -> None:
    assert content_hash("  a  b ") == content_hash("a b")
    assert content_hash("a\tb\n") == content_hash("a b")
    assert content_hash("A b") != content_hash("a b")


def test_duplicates_within_batch_are_collapsed(busy_signals: UserSignals, env: EnvData) -> None:
    pool = ["  You shine.", "You   shine.", "You shine. "]
    result = select_candidate(busy_signals, "u1", env, pool)
    assert result.text == "You shine."


def test_dedupe_does_not_resurrect_avoided_text(busy_signals: UserSignals, env: EnvData) -> None:
    pool = ["Kind words.", " Kind  words. ", "Warm words."]
    result = select_candidate(busy_signals, "u1", env, pool, {content_hash("Kind words.")})
    assert result.text == "Warm words."


def test_nonce_changes_the_seed_even_for_same_signals(still_signals: UserSignals, env: EnvData) -> None:
    first = select_candidate(still_signals, "u1", env, POOL, nonce="n1")
    second = select_candidate(still_signals, "u1", env, POOL, nonce="n2")
    assert first.fingerprint_hash != second.fingerprint_hash


def test_selection_spreads_across_pool(env: EnvData) -> None:
    pool = [f"Compliment {index}" for index in range(5)]
    picks = {
        select_candidate(UserSignals(pixels_moved=index * 37.5, clicks=index % 4, idle_ms=100), "u1", env, pool).text
        for index in range(200)
    }
    assert picks == set(pool)


def test_selector_does_not_mutate_avoid_set(still_signals: UserSignals, env: EnvData) -> None:
    avoid = {content_hash("Y")}
    select_candidate(still_signals, "u1", env, POOL, avoid)
    assert avoid == {content_hash("Y")}
