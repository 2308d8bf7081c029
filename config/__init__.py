"""
Configuration Management Module
Label budgets, icon geometry, schedule window and sync behaviour
"""
from .settings import (
    Settings,
    LabelSettings,
    IconSettings,
    ScheduleSettings,
    SyncSettings,
    get_settings,
)

__all__ = [
    "Settings",
    "LabelSettings",
    "IconSettings",
    "ScheduleSettings",
    "SyncSettings",
    "get_settings",
]
