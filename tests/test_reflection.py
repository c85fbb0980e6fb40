from __future__ import annotations

import hashlib

from gift_compliment.reflection import DEFAULT_REFLECTION, REFLECTIONS, generate_reflection


def _hashes(count: int) -> list[str]:
    return [hashlib.sha256(f"reflect-{index}".encode("utf-8")).hexdigest() for index in range(count)]


def test_reflection_is_deterministic_caption() -> None:
    digest = _hashes(1)[0]
    caption = generate_reflection(digest, 800, 2, 4000)
    assert caption == generate_reflection(digest, 800, 2, 4000)
    assert caption in REFLECTIONS.phrases


def test_default_caption_is_reachable() -> None:
    assert DEFAULT_REFLECTION in REFLECTIONS.phrases
    assert len(REFLECTIONS.phrases) == 24


def test_exploration_favours_exploratory_captions() -> None:
    exploratory = set(REFLECTIONS.phrases[6:12])
    digests = _hashes(300)
    explorer = sum(generate_reflection(d, 100_000, 0, 0) in exploratory for d in digests)
    still = sum(generate_reflection(d, 0, 0, 60_000) in exploratory for d in digests)
    assert explorer > still + 15
