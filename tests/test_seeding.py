from __future__ import annotations

from pathlib import Path

import pytest

from gift_compliment.data import load_compliment_templates, load_fallback_compliments
from gift_compliment.seeding import PoolBuilder, load_pool, write_pool


def test_bundled_templates_are_complete() -> None:
    data = load_compliment_templates()
    assert len(data["templates"]) == 220
    assert "" in data["starters"]
    assert "" in data["connectors"]
    assert load_fallback_compliments() == data["templates"]


def test_small_pool_is_template_prefix() -> None:
    templates = load_fallback_compliments()
    assert PoolBuilder.from_bundled(seed=1).build(5) == templates[:5]


def test_expanded_pool_is_unique_and_bounded() -> None:
    pool = PoolBuilder.from_bundled(seed=3).build(350)
    assert len(pool) == 350
    assert len(set(pool)) == 350
    for variation in pool[220:]:
        assert 20 < len(variation) < 200


def test_expansion_is_reproducible_per_seed() -> None:
    first = PoolBuilder.from_bundled(seed=9).build(300)
    assert first == PoolBuilder.from_bundled(seed=9).build(300)
    assert first != PoolBuilder.from_bundled(seed=10).build(300)
    assert PoolBuilder.from_bundled().build(260) == PoolBuilder.from_bundled().build(260)


def test_builder_without_combinators_stops_at_templates() -> None:
    pool = PoolBuilder(["Alpha is kind.", "Beta is brave."], seed=0).build(10)
    assert pool == ["Alpha is kind.", "Beta is brave."]


def test_builder_requires_templates() -> None:
    with pytest.raises(ValueError):
        PoolBuilder([]).build(3)


def test_pool_file_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "pool" / "compliments.json"
    write_pool(path, ["One kind thing.", "Two kind things."])
    assert load_pool(path) == ["One kind thing.", "Two kind things."]


def test_load_pool_accepts_bare_list(tmp_path: Path) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text("- You listen well.\n- You notice details.\n", encoding="utf8")
    assert load_pool(path) == ["You listen well.", "You notice details."]
    bad = tmp_path / "bad.json"
    bad.write_text('{"compliments": [1, 2]}', encoding="utf8")
    with pytest.raises(TypeError):
        load_pool(bad)
