"""Compose labels, icon and contact metadata into a shortcut descriptor."""

from __future__ import annotations

import logging
from typing import Optional

from config import Settings
from core import Entity, ShortcutDescriptor, make_descriptor
from icons import AvatarRenderer, IconGenerator
from sources.base import PhotoStore, ShortcutPlatform
from utils.exceptions import PhotoStoreError

from .labels import LabelTruncator


logger = logging.getLogger(__name__)


class ShortcutBuilder:
    """Builds one immutable descriptor per contact."""

    def __init__(
        self,
        *,
        photo_store: Optional[PhotoStore],
        icon_generator: IconGenerator,
        labels: Optional[LabelTruncator] = None,
        disabled_message: str = "Shortcut has been disabled",
    ) -> None:
        self._photo_store = photo_store
        self._icons = icon_generator
        self._labels = labels or LabelTruncator()
        self._disabled_message = disabled_message

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        photo_store: Optional[PhotoStore],
        platform: ShortcutPlatform,
        avatar_renderer: Optional[AvatarRenderer] = None,
    ) -> "ShortcutBuilder":
        icons = IconGenerator(
            settings=settings.icons,
            avatar_renderer=avatar_renderer,
            max_width=platform.icon_max_width,
            max_height=platform.icon_max_height,
        )
        return cls(
            photo_store=photo_store,
            icon_generator=icons,
            labels=LabelTruncator.from_settings(settings.labels),
            disabled_message=settings.sync.disabled_message,
        )

    def build(self, entity: Entity) -> ShortcutDescriptor:
        icon = self._icons.generate_icon(
            self._photo_for(entity),
            entity.display_name,
            entity.lookup_key,
            self._icons.recommended_size,
        )
        return make_descriptor(
            shortcut_id=entity.lookup_key,
            short_label=self._labels.short_label(entity.display_name),
            long_label=self._labels.long_label(entity.display_name),
            icon=icon,
            entity_id=entity.id,
            disabled_message=self._disabled_message,
        )

    def _photo_for(self, entity: Entity) -> Optional[bytes]:
        if entity.photo is not None:
            return entity.photo
        if self._photo_store is None:
            return None
        try:
            return self._photo_store.fetch_photo_bytes(entity.id)
        except (PhotoStoreError, OSError) as exc:
            logger.warning("photo_fetch_failed contact_id=%s error=%s", entity.id, exc)
            return None
