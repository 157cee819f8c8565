"""Image pair loading for the stereo matcher.

Images are always decoded as RGB. When both images of the pair are gray
(all three channels equal everywhere) they are reduced to one channel so the
data penalty is computed on intensities only.
"""

import logging
from pathlib import Path

import cv2
import numpy as np

from kzstereo.errors import ResourceUnavailable
from kzstereo.utilities.arbitrary_types_model import ABaseModel

logger = logging.getLogger(__name__)


class StereoPair(ABaseModel):
    """Left and right images of a stereo pair.

    Attributes:
        left: (height, width) gray or (height, width, 3) RGB image
        right: Same layout as left
        color: Whether the images kept their three channels
    """

    left: np.ndarray
    right: np.ndarray
    color: bool


def load_rgb_image(*, filepath: Path) -> np.ndarray:
    """Load an image as a (height, width, 3) uint8 RGB array.

    Args:
        filepath: Path to any format OpenCV can decode

    Returns:
        RGB image

    Raises:
        ResourceUnavailable: If the file cannot be read or decoded
    """
    filepath = Path(filepath)
    image = cv2.imread(str(filepath), cv2.IMREAD_COLOR)
    if image is None:
        raise ResourceUnavailable(f"Unable to read image {filepath}")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def is_gray(image: np.ndarray) -> bool:
    """Check whether an RGB image has identical channels."""
    return bool(
        np.array_equal(image[..., 0], image[..., 1])
        and np.array_equal(image[..., 0], image[..., 2])
    )


def convert_gray(image: np.ndarray) -> np.ndarray:
    """Keep the red channel of an RGB image."""
    return np.ascontiguousarray(image[..., 0])


def load_stereo_pair(*, left_path: Path, right_path: Path) -> StereoPair:
    """Load both images, reducing them to gray when neither has color.

    Args:
        left_path: Path to the left (reference) image
        right_path: Path to the right image

    Returns:
        StereoPair ready for the solver
    """
    left = load_rgb_image(filepath=left_path)
    right = load_rgb_image(filepath=right_path)

    if is_gray(left) and is_gray(right):
        logger.info("Both images are gray, matching on intensity")
        return StereoPair(left=convert_gray(left), right=convert_gray(right), color=False)

    return StereoPair(left=left, right=right, color=True)
