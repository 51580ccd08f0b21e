"""Decides whether a source image is worth resizing."""

from .models import ImageDimensions


def should_resize(dimensions: ImageDimensions, target_height: int) -> bool:
    """Only downscale: a source at or below the target height is left alone."""
    return dimensions.height > target_height
