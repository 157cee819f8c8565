"""Writers for disparity maps of the left image.

Disparity maps are float arrays with NaN marking occluded pixels.
"""

from abc import ABC, abstractmethod
from pathlib import Path

import cv2
import numpy as np

from kzstereo.errors import ResourceUnavailable
from kzstereo.utilities.arbitrary_types_model import ABaseModel

OCCLUDED_RGB = (0, 255, 255)
DARKEST_GRAY = 64


class DisparityWriter(ABaseModel, ABC):
    """Abstract base class for disparity map writers.

    Usage:
        writer = RawDisparityWriter()
        writer.write(filepath=Path("disp.tif"), disparity=disp, d_min=-15, d_max=0)
    """

    last_write_path: Path | None = None

    @abstractmethod
    def render(self, *, disparity: np.ndarray, d_min: int, d_max: int) -> np.ndarray:
        """Convert a disparity map to the array written on disk.

        Args:
            disparity: (height, width) disparities, NaN where occluded
            d_min: Smallest disparity of the search range
            d_max: Largest disparity of the search range

        Returns:
            Array in the channel order expected by OpenCV
        """
        pass

    def write(
        self,
        *,
        filepath: Path,
        disparity: np.ndarray,
        d_min: int,
        d_max: int
    ) -> None:
        """Render and save a disparity map.

        Raises:
            ResourceUnavailable: If the directory cannot be created or OpenCV
                cannot encode the file
        """
        filepath = Path(filepath)
        image = self.render(disparity=disparity, d_min=d_min, d_max=d_max)
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)
            written = cv2.imwrite(str(filepath), image)
        except (OSError, cv2.error) as error:
            raise ResourceUnavailable(f"Unable to write image {filepath}") from error
        if not written:
            raise ResourceUnavailable(f"Unable to write image {filepath}")
        self.last_write_path = filepath


class RawDisparityWriter(DisparityWriter):
    """Single-channel float32 map; use a TIFF path to keep the values."""

    def render(self, *, disparity: np.ndarray, d_min: int, d_max: int) -> np.ndarray:
        return disparity.astype(np.float32)


class ScaledDisparityWriter(DisparityWriter):
    """8-bit RGB map for viewing.

    Disparities map linearly to gray levels in [64, 255], the largest
    disparity brightest unless ``reverse`` is set. Occluded pixels are cyan.
    """

    reverse: bool = False

    def render(self, *, disparity: np.ndarray, d_min: int, d_max: int) -> np.ndarray:
        occluded = np.isnan(disparity)
        values = np.where(occluded, d_max, disparity).astype(np.float64)

        span = d_max - d_min
        if span == 0:
            gray = np.full(values.shape, 255.0)
        else:
            offset = (values - d_min) if self.reverse else (d_max - values)
            gray = 255 - ((255 - DARKEST_GRAY) * offset) // span
        gray = np.clip(gray, 0, 255).astype(np.uint8)

        rgb = np.repeat(gray[..., np.newaxis], 3, axis=2)
        rgb[occluded] = OCCLUDED_RGB
        return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)
