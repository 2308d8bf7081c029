from __future__ import annotations

import logging

from PIL import Image

from config import IconSettings
from icons import IconGenerator, LetterTileAvatarRenderer
from icons.avatar import LETTER_TILE_COLORS


class RecordingAvatarRenderer(LetterTileAvatarRenderer):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, str, int]] = []

    def render(self, display_name: str, lookup_key: str, size: int) -> Image.Image:
        self.calls.append((display_name, lookup_key, size))
        return super().render(display_name, lookup_key, size)


def _generator(**kwargs) -> IconGenerator:
    params = {"max_width": 192, "max_height": 192}
    params.update(kwargs)
    return IconGenerator(**params)


def test_photo_is_cropped_to_centered_square(image_bytes) -> None:
    icon = _generator().generate_icon(image_bytes(400, 300), "Ada", "key-ada", 176)

    assert icon.source == "photo"
    assert icon.width == icon.height == 192


def test_large_jpeg_is_sampled_during_decode(image_bytes) -> None:
    photo = image_bytes(2000, 1600, fmt="JPEG")
    icon = _generator().generate_icon(photo, "Ada", "key-ada", 176)

    assert icon.source == "photo"
    assert icon.width == icon.height == 192


def test_platform_maximums_bound_the_icon(image_bytes) -> None:
    icon = _generator(max_width=96, max_height=128).generate_icon(image_bytes(2000, 1600, fmt="JPEG"), "Ada", "k", 176)
    assert icon.width == icon.height == 96


def test_extreme_aspect_ratio_yields_small_square(image_bytes) -> None:
    icon = _generator().generate_icon(image_bytes(10000, 10), "Wide", "key-wide", 176)

    assert icon.source == "photo"
    assert icon.width == icon.height == 10
    assert icon.width <= 176


def test_tiny_and_small_images_are_not_upsampled(image_bytes) -> None:
    generator = _generator()

    single = generator.generate_icon(image_bytes(1, 1), "Dot", "key-dot", 176)
    assert (single.width, single.height) == (1, 1)

    small = generator.generate_icon(image_bytes(100, 80), "Small", "key-small", 176)
    assert (small.width, small.height) == (80, 80)


def test_circle_mask_clears_corners_and_keeps_center(image_bytes) -> None:
    icon = _generator().generate_icon(image_bytes(400, 400, color=(10, 200, 30)), "Ada", "key-ada", 176)
    image = icon.to_image()

    assert image.getpixel((0, 0))[3] == 0
    center = image.getpixel((icon.width // 2, icon.height // 2))
    assert center[3] == 255
    assert abs(center[1] - 200) <= 2


def test_square_mask_keeps_every_pixel_opaque(image_bytes) -> None:
    generator = _generator(settings=IconSettings(mask_shape="square"))
    image = generator.generate_icon(image_bytes(300, 300), "Ada", "key-ada", 176).to_image()

    assert image.getpixel((0, 0))[3] == 255


def test_rounded_mask_clears_corners_and_keeps_edges(image_bytes) -> None:
    generator = _generator(settings=IconSettings(mask_shape="rounded", corner_radius_ratio=0.25))
    icon = generator.generate_icon(image_bytes(300, 300), "Ada", "key-ada", 176)
    image = icon.to_image()

    assert image.getpixel((0, 0))[3] == 0
    assert image.getpixel((icon.width - 1, icon.height - 1))[3] == 0
    assert image.getpixel((icon.width // 2, 0))[3] == 255
    assert image.getpixel((0, icon.height // 2))[3] == 255


def test_missing_photo_uses_fallback_avatar_at_recommended_size() -> None:
    renderer = RecordingAvatarRenderer()
    icon = _generator(avatar_renderer=renderer).generate_icon(None, "Grace Hopper", "key-grace", 176)

    assert icon.source == "fallback"
    assert icon.width == icon.height == 176
    assert renderer.calls == [("Grace Hopper", "key-grace", 176)]
    # Rendered onto an opaque canvas.
    assert icon.to_image().getpixel((0, 0))[3] == 255


def test_zero_byte_photo_falls_back() -> None:
    icon = _generator().generate_icon(b"", "Empty", "key-empty", 176)
    assert icon.source == "fallback"
    assert icon.width == 176


def test_malformed_photo_is_logged_and_falls_back(caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="icons.generator"):
        icon = _generator().generate_icon(b"definitely not an image", "Broken", "key-broken", 176)

    assert icon.source == "fallback"
    assert icon.width == icon.height == 176
    assert "icon_decode_failed" in caplog.text


def test_truncated_jpeg_falls_back(image_bytes) -> None:
    photo = image_bytes(800, 800, fmt="JPEG")
    icon = _generator().generate_icon(photo[: len(photo) // 3], "Cut", "key-cut", 176)
    assert icon.source == "fallback"


def test_fallback_is_deterministic_per_contact() -> None:
    generator = _generator()
    first = generator.generate_icon(None, "Linus", "key-linus", 64)
    second = generator.generate_icon(None, "Linus", "key-linus", 64)

    assert first == second


def test_letter_tile_color_is_stable_and_from_palette() -> None:
    renderer = LetterTileAvatarRenderer()
    color = renderer.pick_color("Ada", "key-ada")

    assert color in LETTER_TILE_COLORS
    assert renderer.pick_color("Someone Else", "key-ada") == color


def test_letter_tile_handles_names_without_letters() -> None:
    tile = LetterTileAvatarRenderer().render("+1 555 0100", "key-phone", 48)
    assert tile.size == (48, 48)
    assert tile.mode == "RGBA"


def test_square_letter_tile_fills_corners() -> None:
    renderer = LetterTileAvatarRenderer(circular=False)
    tile = renderer.render("Ada", "key-ada", 48)

    corner = tile.getpixel((0, 0))
    assert corner[3] == 255
    assert "#%02X%02X%02X" % corner[:3] == renderer.pick_color("Ada", "key-ada")
    assert LetterTileAvatarRenderer().render("Ada", "key-ada", 48).getpixel((0, 0))[3] == 0
