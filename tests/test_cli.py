from __future__ import annotations

import json
from pathlib import Path

import main


def _write_fixture(tmp_path: Path, image_bytes, **overrides) -> Path:
    (tmp_path / "ada.png").write_bytes(image_bytes(300, 300))
    payload = {
        "contacts": [
            {"id": 1, "lookup_key": "ada", "display_name": "Ada Lovelace", "photo_path": "ada.png"},
            {"id": 2, "lookup_key": "bob", "display_name": "Robert Tables the Third"},
            {"id": 3, "lookup_key": "cy", "display_name": "Cy"},
            {"id": 4, "lookup_key": "dee", "display_name": "Dee"},
        ],
        "pinned": [
            {"shortcut_id": "bob", "contact_id": 2, "enabled": False},
            {"shortcut_id": "gone", "contact_id": 99},
        ],
    }
    payload.update(overrides)
    path = tmp_path / "fixture.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_cli_refresh_prints_published_state(tmp_path: Path, image_bytes, capsys) -> None:
    path = _write_fixture(tmp_path, image_bytes)

    code = main.main(["--fixture", str(path), "--plain-logs", "refresh"])
    report = json.loads(capsys.readouterr().out)

    assert code == 0
    assert report["processed"] is True
    assert report["status"]["state"] == "completed"
    assert [item["shortcut_id"] for item in report["platform"]["dynamic"]] == ["ada", "bob", "cy"]
    assert report["platform"]["dynamic"][0]["icon"] == "192x192 photo"
    pinned = {item["shortcut_id"]: item for item in report["platform"]["pinned"]}
    assert pinned["bob"]["enabled"] is True
    assert pinned["gone"]["enabled"] is False
    assert report["window_armed"] is True


def test_cli_teardown_disables_pinned(tmp_path: Path, image_bytes, capsys) -> None:
    path = _write_fixture(tmp_path, image_bytes)

    code = main.main(["--fixture", str(path), "--plain-logs", "teardown"])
    report = json.loads(capsys.readouterr().out)

    assert code == 0
    assert report["status"]["state"] == "torn_down"
    assert report["platform"]["dynamic"] == []
    assert all(item["enabled"] is False for item in report["platform"]["pinned"])


def test_cli_initialize_skips_when_armed(tmp_path: Path, image_bytes, capsys) -> None:
    path = _write_fixture(tmp_path, image_bytes, window_armed=True)

    code = main.main(["--fixture", str(path), "--plain-logs", "initialize"])
    report = json.loads(capsys.readouterr().out)

    assert code == 0
    assert report["processed"] is False


def test_cli_reports_bad_fixture(tmp_path: Path, capsys) -> None:
    code = main.main(["--fixture", str(tmp_path / "nope.json"), "--plain-logs", "show"])

    assert code == 2
    assert "error" in json.loads(capsys.readouterr().out)


def test_cli_reports_invalid_fixture_rows(tmp_path: Path, capsys) -> None:
    rows = [
        {"contacts": [{"id": 1, "display_name": "No Key"}]},
        {"contacts": ["not-an-object"]},
        {"contacts": [{"id": 1, "lookup_key": "ada", "display_name": "Ada", "photo_base64": "abc"}]},
        {"pinned": [{"shortcut_id": "ada", "enabled": "sometimes", "short_label": ["x"]}]},
    ]
    for index, payload in enumerate(rows):
        path = tmp_path / f"bad-{index}.json"
        path.write_text(json.dumps(payload), encoding="utf-8")

        code = main.main(["--fixture", str(path), "--plain-logs", "show"])
        report = json.loads(capsys.readouterr().out)

        assert code == 2
        assert "row" in report["error"]
