"""Label truncation for launcher shortcut labels."""

from __future__ import annotations

from dataclasses import dataclass

from config import LabelSettings

ELLIPSIS = "…"


def truncate(text: str, max_len: int) -> str:
    """Fit ``text`` into ``max_len`` characters, ending in an ellipsis when cut.

    The boundary is strict: a name exactly ``max_len`` long is truncated.
    """
    value = text or ""
    if len(value) < max_len:
        return value
    if max_len <= 1:
        return ELLIPSIS
    return value[: max_len - 1].rstrip() + ELLIPSIS


@dataclass(frozen=True)
class LabelTruncator:
    """Short/long label budgets bound together."""

    short_max_length: int = 12
    long_max_length: int = 30

    @classmethod
    def from_settings(cls, settings: LabelSettings) -> "LabelTruncator":
        return cls(short_max_length=settings.short_max_length, long_max_length=settings.long_max_length)

    def short_label(self, display_name: str) -> str:
        return truncate(display_name, self.short_max_length)

    def long_label(self, display_name: str) -> str:
        return truncate(display_name, self.long_max_length)
