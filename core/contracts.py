"""Data contracts shared by the builder, reconcilers and orchestrator."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# Key of the contact id inside a shortcut's opaque extras payload.
TARGET_ID_KEY = "contact_id"

LOOKUP_URI_PREFIX = "content://com.android.contacts/contacts/lookup"


class RefreshTrigger(str, Enum):
    """What caused a refresh cycle."""

    MANUAL = "manual"
    INITIALIZE = "initialize"
    JOB = "job"


class Entity(BaseModel):
    """Immutable contact snapshot read from the entity source."""

    model_config = ConfigDict(frozen=True)

    id: int
    lookup_key: str
    display_name: str = ""
    photo: Optional[bytes] = None

    @field_validator("lookup_key", mode="before")
    @classmethod
    def _non_empty_key(cls, value: Any) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("lookup_key is required")
        return text

    @field_validator("display_name", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return "" if value is None else str(value)


class IconRaster(BaseModel):
    """Square RGBA raster carried by a shortcut descriptor."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=1)
    height: int = Field(ge=1)
    mode: str = "RGBA"
    data: bytes
    source: Literal["photo", "fallback"] = "photo"

    @model_validator(mode="after")
    def _square(self) -> "IconRaster":
        if self.width != self.height:
            raise ValueError(f"icon must be square, got {self.width}x{self.height}")
        return self

    @classmethod
    def from_image(cls, image: Image.Image, *, source: Literal["photo", "fallback"] = "photo") -> "IconRaster":
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls(width=rgba.width, height=rgba.height, mode="RGBA", data=rgba.tobytes(), source=source)

    def to_image(self) -> Image.Image:
        return Image.frombytes(self.mode, (self.width, self.height), self.data)


class ShortcutDescriptor(BaseModel):
    """Everything the platform needs to publish or update one shortcut."""

    model_config = ConfigDict(frozen=True)

    shortcut_id: str
    short_label: str
    long_label: str
    icon: IconRaster
    extras: Dict[str, int] = Field(default_factory=dict)
    intent_uri: str
    disabled_message: str

    @property
    def contact_id(self) -> int:
        return read_target_id(self.extras)


class PinnedEntry(BaseModel):
    """Platform-side view of a shortcut the user has pinned."""

    model_config = ConfigDict(frozen=True)

    shortcut_id: str
    extras: Optional[Dict[str, Any]] = None
    enabled: bool = True
    short_label: Optional[str] = None
    long_label: Optional[str] = None
    icon: Optional[IconRaster] = None
    intent_uri: Optional[str] = None
    disabled_message: Optional[str] = None


class StatusTimestamps(BaseModel):
    """Lifecycle timestamps for a refresh cycle."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class RefreshStatus(BaseModel):
    """Observable outcome of one refresh cycle."""

    refresh_id: str
    trigger: RefreshTrigger = RefreshTrigger.MANUAL
    state: str = "queued"
    published: int = 0
    updated: int = 0
    enabled: int = 0
    disabled: int = 0
    errors: List[str] = Field(default_factory=list)
    timestamps: StatusTimestamps = Field(default_factory=StatusTimestamps)


def read_target_id(extras: Optional[Mapping[str, Any]]) -> int:
    """Contact id stored in a shortcut payload, 0 when absent or unreadable."""
    if not extras:
        return 0
    try:
        return int(extras.get(TARGET_ID_KEY) or 0)
    except (TypeError, ValueError):
        return 0


def lookup_uri(lookup_key: str, entity_id: int) -> str:
    return f"{LOOKUP_URI_PREFIX}/{lookup_key}/{int(entity_id)}"


def make_descriptor(
    *,
    shortcut_id: str,
    short_label: str,
    long_label: str,
    icon: IconRaster,
    entity_id: int,
    disabled_message: str,
) -> ShortcutDescriptor:
    """Assemble a descriptor in one call; the payload keeps the id, the key stays the shortcut id."""
    return ShortcutDescriptor(
        shortcut_id=shortcut_id,
        short_label=short_label,
        long_label=long_label,
        icon=icon,
        extras={TARGET_ID_KEY: int(entity_id)},
        intent_uri=lookup_uri(shortcut_id, entity_id),
        disabled_message=disabled_message,
    )
