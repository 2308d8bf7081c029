"""Shortcut icon generation."""

from .avatar import AvatarRenderer, LetterTileAvatarRenderer
from .generator import IconGenerator
from .sampling import CropPlan, optimal_sample_size, plan_crop

__all__ = [
    "AvatarRenderer",
    "CropPlan",
    "IconGenerator",
    "LetterTileAvatarRenderer",
    "optimal_sample_size",
    "plan_crop",
]
