"""Shortcut icon generation: sampled centered crop of a photo, or a fallback avatar."""

from __future__ import annotations

from io import BytesIO
import logging
from typing import Optional

from PIL import Image, ImageColor, ImageDraw

from config import IconSettings
from core import IconRaster
from utils.exceptions import IconDecodeError

from .avatar import AvatarRenderer, LetterTileAvatarRenderer
from .sampling import CropPlan, plan_crop


logger = logging.getLogger(__name__)

_DECODE_ERRORS = (OSError, ValueError, SyntaxError, Image.DecompressionBombError)


class IconGenerator:
    """Builds square icons bounded by the platform's icon maximums."""

    def __init__(
        self,
        *,
        settings: Optional[IconSettings] = None,
        avatar_renderer: Optional[AvatarRenderer] = None,
        max_width: Optional[int] = None,
        max_height: Optional[int] = None,
    ) -> None:
        self._settings = settings or IconSettings()
        self._avatar_renderer = avatar_renderer or LetterTileAvatarRenderer()
        self._max_width = max_width
        self._max_height = max_height

    @property
    def recommended_size(self) -> int:
        return self._settings.recommended_pixel_length

    def generate_icon(
        self,
        photo: Optional[bytes],
        display_name: str,
        lookup_key: str,
        target_size: Optional[int] = None,
    ) -> IconRaster:
        """Icon from ``photo`` when it decodes, otherwise a generated avatar."""
        size = int(target_size or self.recommended_size)
        if photo:
            try:
                return self.decode_photo(photo, recommended=size)
            except IconDecodeError as exc:
                logger.error("icon_decode_failed lookup_key=%s error=%s", lookup_key, exc)
        return self.fallback_avatar(display_name, lookup_key, size)

    def decode_photo(self, photo: bytes, *, recommended: int) -> IconRaster:
        """Decode only the centered square region of ``photo``, subsampled while decoding."""
        try:
            with Image.open(BytesIO(photo)) as source:
                # Only the header has been read at this point.
                plan = plan_crop(
                    source.width,
                    source.height,
                    recommended=recommended,
                    max_width=self._max_width,
                    max_height=self._max_height,
                )
                region = _decode_region(source, plan)
        except _DECODE_ERRORS as exc:
            raise IconDecodeError(
                "Failed to decode contact photo for shortcut",
                {"bytes": len(photo), "error": f"{type(exc).__name__}: {exc}"},
            ) from exc

        logger.debug(
            "icon_decoded sample=%s box=%s size=%s",
            plan.sample_size,
            plan.box,
            plan.target_size,
        )
        return IconRaster.from_image(self._apply_mask(region, plan.target_size), source="photo")

    def fallback_avatar(self, display_name: str, lookup_key: str, size: int) -> IconRaster:
        """Render the avatar onto an opaque ``size`` x ``size`` canvas."""
        avatar = self._avatar_renderer.render(display_name, lookup_key, size).convert("RGBA")
        if avatar.size != (size, size):
            avatar = avatar.resize((size, size), Image.Resampling.LANCZOS)

        background = ImageColor.getcolor(self._settings.fallback_background, "RGBA")
        canvas = Image.new("RGBA", (size, size), background[:3] + (255,))
        canvas.alpha_composite(avatar)
        return IconRaster.from_image(canvas, source="fallback")

    def _apply_mask(self, region: Image.Image, size: int) -> Image.Image:
        tile = region.convert("RGBA")
        if tile.size != (size, size):
            tile = tile.resize((size, size), Image.Resampling.LANCZOS)

        shape = self._settings.mask_shape
        if shape == "square":
            return tile

        mask = Image.new("L", (size, size), 0)
        draw = ImageDraw.Draw(mask)
        bounds = (0, 0, size - 1, size - 1)
        if shape == "circle":
            draw.ellipse(bounds, fill=255)
        else:
            radius = int(size * self._settings.corner_radius_ratio)
            draw.rounded_rectangle(bounds, radius=radius, fill=255)

        result = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        result.paste(tile, (0, 0), mask)
        return result


def _decode_region(source: Image.Image, plan: CropPlan) -> Image.Image:
    """Crop ``plan.box`` and apply the sampling divisor.

    JPEG streams are downscaled by the codec (draft mode); whatever factor
    the codec could not apply is finished with an integer box reduction.
    """
    width, height = source.size
    sample = plan.sample_size
    drafted = 1
    if sample > 1:
        source.draft(None, (max(1, width // sample), max(1, height // sample)))
        drafted = max(1, round(width / source.width))

    box = tuple(edge // drafted for edge in plan.box)
    region = source.crop(box)
    if region.mode not in ("RGB", "RGBA"):
        region = region.convert("RGBA")

    remaining = max(1, sample // drafted)
    if remaining > 1:
        region = region.reduce(remaining)
    return region
