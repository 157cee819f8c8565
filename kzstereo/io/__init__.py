"""Image input and disparity output for kzstereo."""

from .image_loader import (
    StereoPair,
    convert_gray,
    is_gray,
    load_rgb_image,
    load_stereo_pair,
)
from .disparity_writer import (
    DisparityWriter,
    RawDisparityWriter,
    ScaledDisparityWriter,
)

__all__ = [
    "StereoPair",
    "convert_gray",
    "is_gray",
    "load_rgb_image",
    "load_stereo_pair",
    "DisparityWriter",
    "RawDisparityWriter",
    "ScaledDisparityWriter",
]
