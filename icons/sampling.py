"""Sampling divisor and centered-crop arithmetic for shortcut icons."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class CropPlan:
    """Where to cut the source image and how far to subsample it."""

    sample_size: int
    scaled_width: int
    scaled_height: int
    target_size: int
    box: Tuple[int, int, int, int]


def optimal_sample_size(dimension: int, target: int) -> int:
    """Largest power of two that keeps ``dimension // s`` at or above ``target``.

    Unknown (non-positive) sizes cannot be sampled, so they yield 1.
    """
    if dimension < 1 or target < 1:
        return 1
    sample = 1
    while dimension // (sample * 2) >= target:
        sample *= 2
    return sample


def plan_crop(
    source_width: int,
    source_height: int,
    *,
    recommended: int,
    max_width: Optional[int] = None,
    max_height: Optional[int] = None,
) -> CropPlan:
    """Compute the square crop of a ``source_width`` x ``source_height`` image.

    The box is expressed in source coordinates; sampling is applied to the
    extracted region afterwards.
    """
    if source_width < 1 or source_height < 1:
        raise ValueError(f"image has no pixels: {source_width}x{source_height}")

    sample = min(
        optimal_sample_size(source_width, recommended),
        optimal_sample_size(source_height, recommended),
    )
    scaled_width = source_width // sample
    scaled_height = source_height // sample

    target_width = scaled_width if max_width is None else min(scaled_width, max_width)
    target_height = scaled_height if max_height is None else min(scaled_height, max_height)

    # Make it square.
    target_size = min(target_width, target_height)
    if target_size < 1:
        raise ValueError(f"icon bounds too small: {max_width}x{max_height}")

    x_offset = ((scaled_width - target_size) * sample) // 2
    y_offset = ((scaled_height - target_size) * sample) // 2
    box = (x_offset, y_offset, source_width - x_offset, source_height - y_offset)

    return CropPlan(
        sample_size=sample,
        scaled_width=scaled_width,
        scaled_height=scaled_height,
        target_size=target_size,
        box=box,
    )
