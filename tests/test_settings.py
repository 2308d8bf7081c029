from __future__ import annotations

from pydantic import ValidationError
import pytest

from config import IconSettings, LabelSettings, ScheduleSettings, Settings, SyncSettings


def test_defaults_match_launcher_limits() -> None:
    settings = Settings()

    assert settings.labels.short_max_length == 12
    assert settings.labels.long_max_length == 30
    assert settings.sync.max_shortcuts == 3
    assert settings.schedule.min_update_delay_millis == 10_000
    assert settings.schedule.max_update_delay_millis == 86_400_000
    assert settings.icons.recommended_pixel_length == 176


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("LABEL_SHORT_MAX_LENGTH", "8")
    monkeypatch.setenv("SHORTCUTS_MAX_SHORTCUTS", "5")
    monkeypatch.setenv("ICON_MASK_SHAPE", "rounded")

    assert LabelSettings().short_max_length == 8
    assert SyncSettings().max_shortcuts == 5
    assert IconSettings().mask_shape == "rounded"


def test_load_from_env_file(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("SCHEDULE_MIN_UPDATE_DELAY_MILLIS", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("SCHEDULE_MIN_UPDATE_DELAY_MILLIS=2500\n", encoding="utf-8")

    settings = Settings.load_from_env_file(env_file)

    assert settings.schedule.min_update_delay_millis == 2500
    monkeypatch.delenv("SCHEDULE_MIN_UPDATE_DELAY_MILLIS", raising=False)


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(ValidationError):
        ScheduleSettings(min_update_delay_millis=5000, max_update_delay_millis=10)
    with pytest.raises(ValidationError):
        SyncSettings(disabled_message="   ")
    with pytest.raises(ValidationError):
        IconSettings(mask_shape="hexagon")
    with pytest.raises(ValidationError):
        LabelSettings(short_max_length=-1)
