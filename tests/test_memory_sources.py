from __future__ import annotations

import base64
import json
from pathlib import Path

import pytest

from core import TARGET_ID_KEY, Entity
from sources import InMemoryEntitySource, InMemoryScheduler, load_fixture
from utils.exceptions import ConfigurationError


def test_entity_source_can_honor_or_ignore_limit() -> None:
    entities = [Entity(id=i, lookup_key=f"k{i}") for i in range(5)]

    assert len(list(InMemoryEntitySource(entities).fetch_top_ranked(2))) == 5
    assert len(list(InMemoryEntitySource(entities, honor_limit=True).fetch_top_ranked(2))) == 2


def test_resolve_prefers_lookup_key_over_stale_hint() -> None:
    source = InMemoryEntitySource([Entity(id=1, lookup_key="a"), Entity(id=2, lookup_key="b")])

    assert source.resolve_by_lookup_key("b", hint_id=1).id == 2
    assert source.resolve_by_lookup_key("missing", hint_id=1) is None


def test_scheduler_fire_consumes_window() -> None:
    scheduler = InMemoryScheduler()
    scheduler.arm_window(1, 2)

    assert scheduler.fire() is True
    assert scheduler.is_window_armed() is False


def test_load_fixture_builds_collaborators(tmp_path: Path, image_bytes) -> None:
    (tmp_path / "ada.png").write_bytes(image_bytes(50, 50))
    payload = {
        "feature_flags": {"dynamic_shortcuts": True},
        "window_armed": True,
        "icon_max": [128, 96],
        "contacts": [
            {"id": 1, "lookup_key": "ada", "display_name": "Ada", "photo_path": "ada.png"},
            {
                "id": 2,
                "lookup_key": "bob",
                "display_name": "Bob",
                "photo_base64": base64.b64encode(image_bytes(20, 20)).decode("ascii"),
            },
            {"id": 3, "lookup_key": "cy", "display_name": "Cy"},
        ],
        "pinned": [
            {"shortcut_id": "ada", "contact_id": 1},
            {"shortcut_id": "zed", "enabled": False},
        ],
    }
    path = tmp_path / "fixture.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    fixture = load_fixture(path)

    assert [e.lookup_key for e in fixture.entity_source.fetch_top_ranked(3)] == ["ada", "bob", "cy"]
    assert fixture.photo_store.fetch_photo_bytes(1) == (tmp_path / "ada.png").read_bytes()
    assert fixture.photo_store.fetch_photo_bytes(2) is not None
    assert fixture.photo_store.fetch_photo_bytes(3) is None
    assert (fixture.platform.icon_max_width, fixture.platform.icon_max_height) == (128, 96)
    assert fixture.platform.pinned("ada").extras == {TARGET_ID_KEY: 1}
    assert fixture.platform.pinned("zed").extras is None
    assert fixture.platform.pinned("zed").enabled is False
    assert fixture.scheduler.is_window_armed() is True
    assert fixture.feature_gate.is_enabled("dynamic_shortcuts") is True


def test_load_fixture_rejects_unreadable_files(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_fixture(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_fixture(bad)
