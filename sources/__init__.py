"""Collaborator interfaces and in-memory implementations."""

from .base import EntitySource, FeatureGate, PhotoStore, Scheduler, ShortcutPlatform
from .memory import (
    Fixture,
    InMemoryEntitySource,
    InMemoryPhotoStore,
    InMemoryScheduler,
    InMemoryShortcutPlatform,
    StaticFeatureGate,
    load_fixture,
)

__all__ = [
    "EntitySource",
    "FeatureGate",
    "Fixture",
    "InMemoryEntitySource",
    "InMemoryPhotoStore",
    "InMemoryScheduler",
    "InMemoryShortcutPlatform",
    "PhotoStore",
    "Scheduler",
    "ShortcutPlatform",
    "StaticFeatureGate",
    "load_fixture",
]
