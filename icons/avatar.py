"""Fallback avatar renderers used when a contact has no usable photo."""

from __future__ import annotations

import hashlib
from typing import Sequence

from PIL import Image, ImageColor, ImageDraw, ImageFont


LETTER_TILE_COLORS = (
    "#DB4437",
    "#E91E63",
    "#9C27B0",
    "#673AB7",
    "#3F51B5",
    "#4285F4",
    "#039BE5",
    "#0097A7",
    "#009688",
    "#0F9D58",
    "#689F38",
    "#EF6C00",
    "#FF5722",
    "#757575",
)
DEFAULT_TILE_COLOR = "#607D8B"
LETTER_TO_TILE_RATIO = 0.67


class AvatarRenderer:
    """Base renderer that can be replaced by platform drawables or mocks."""

    def render(self, display_name: str, lookup_key: str, size: int) -> Image.Image:
        raise NotImplementedError


class LetterTileAvatarRenderer(AvatarRenderer):
    """Coloured circle with the contact's initial, seeded by lookup key."""

    def __init__(self, *, colors: Sequence[str] = LETTER_TILE_COLORS, circular: bool = True) -> None:
        self._colors = tuple(colors) or (DEFAULT_TILE_COLOR,)
        self._circular = bool(circular)

    def pick_color(self, display_name: str, lookup_key: str) -> str:
        identifier = str(lookup_key or display_name or "").strip()
        if not identifier:
            return DEFAULT_TILE_COLOR
        digest = hashlib.md5(identifier.encode("utf-8")).digest()
        return self._colors[int.from_bytes(digest[:4], "big") % len(self._colors)]

    def render(self, display_name: str, lookup_key: str, size: int) -> Image.Image:
        edge = max(1, int(size))
        tile = Image.new("RGBA", (edge, edge), (0, 0, 0, 0))
        draw = ImageDraw.Draw(tile)
        color = ImageColor.getcolor(self.pick_color(display_name, lookup_key), "RGBA")
        bounds = (0, 0, edge - 1, edge - 1)
        if self._circular:
            draw.ellipse(bounds, fill=color)
        else:
            draw.rectangle(bounds, fill=color)

        initial = _initial(display_name)
        if initial:
            _draw_letter(draw, initial, edge)
        else:
            _draw_silhouette(draw, edge)
        return tile


def _initial(display_name: str) -> str:
    text = str(display_name or "").strip()
    if text and text[0].isalpha():
        return text[0].upper()
    return ""


def _draw_letter(draw: ImageDraw.ImageDraw, letter: str, edge: int) -> None:
    font = ImageFont.load_default(size=max(1, int(edge * LETTER_TO_TILE_RATIO * 0.8)))
    left, top, right, bottom = draw.textbbox((0, 0), letter, font=font)
    x = (edge - (right - left)) / 2 - left
    y = (edge - (bottom - top)) / 2 - top
    draw.text((x, y), letter, fill=(255, 255, 255, 255), font=font)


def _draw_silhouette(draw: ImageDraw.ImageDraw, edge: int) -> None:
    head = edge * 0.18
    cx, cy = edge / 2, edge * 0.4
    draw.ellipse((cx - head, cy - head, cx + head, cy + head), fill=(255, 255, 255, 255))
    draw.pieslice(
        (edge * 0.22, edge * 0.62, edge * 0.78, edge * 1.05),
        start=180,
        end=360,
        fill=(255, 255, 255, 255),
    )
