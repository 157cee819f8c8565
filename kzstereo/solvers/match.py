"""Stereo matching state around the graph-cut optimization.

Match holds the image pair, the cost parameters and the disparity range,
estimates the occlusion cost from image statistics and saves disparity maps.
The alpha-expansion optimization itself is provided by a backend subclass
that implements kz2() and fills ``disparity``.
"""

import logging
from pathlib import Path

import numpy as np
from pydantic import Field
from typing_extensions import Self

from kzstereo.errors import InvalidArgument, ParameterDerivationError, SolverUnavailable
from kzstereo.io.disparity_writer import RawDisparityWriter, ScaledDisparityWriter
from kzstereo.io.image_loader import StereoPair
from kzstereo.parameters.cost_parameters import CostParameters, DataCostKind
from kzstereo.solvers.base_solver import StereoSolver

logger = logging.getLogger(__name__)

PENALTY_CUTOFF = 30


def half_pixel_bounds(image: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Min and max of each pixel and its two horizontal half-pixel neighbours.

    Args:
        image: (height, width, channels) image

    Returns:
        (low, high) arrays with the shape of image
    """
    values = image.astype(np.float64)
    previous = np.concatenate([values[:, :1], values[:, :-1]], axis=1)
    following = np.concatenate([values[:, 1:], values[:, -1:]], axis=1)
    minus = (values + previous) / 2
    plus = (values + following) / 2
    low = np.minimum(values, np.minimum(minus, plus))
    high = np.maximum(values, np.maximum(minus, plus))
    return low, high


def birchfield_tomasi_penalty(
    *,
    left: np.ndarray,
    left_bounds: tuple[np.ndarray, np.ndarray],
    right: np.ndarray,
    right_bounds: tuple[np.ndarray, np.ndarray],
    data_cost: DataCostKind
) -> np.ndarray:
    """Sampling-insensitive dissimilarity between aligned pixel arrays.

    All arrays share the shape (height, width, channels). The per-channel
    dissimilarity is truncated, squared for L2, then summed over channels.

    Returns:
        (height, width) data penalties
    """
    left_low, left_high = left_bounds
    right_low, right_high = right_bounds
    left_values = left.astype(np.float64)
    right_values = right.astype(np.float64)

    left_to_right = np.maximum.reduce([
        np.zeros_like(left_values),
        left_values - right_high,
        right_low - left_values,
    ])
    right_to_left = np.maximum.reduce([
        np.zeros_like(right_values),
        right_values - left_high,
        left_low - right_values,
    ])
    delta = np.minimum(np.minimum(left_to_right, right_to_left), PENALTY_CUTOFF)
    if data_cost == DataCostKind.L2:
        delta = delta * delta
    return delta.sum(axis=2)


class Match(StereoSolver):
    """Graph-cut stereo matching state for one image pair.

    Attributes:
        left: Left image, (height, width) gray or (height, width, 3) RGB
        right: Right image, same layout as left
        color: Whether the images are RGB
        rng: Random generator ordering the labels when randomize_order is set
        params: Cost parameters from the last set_parameters() call
        d_min: Smallest disparity searched
        d_max: Largest disparity searched
        disparity: Left disparity map, NaN where occluded, filled by kz2()
    """

    left: np.ndarray
    right: np.ndarray
    color: bool
    rng: np.random.Generator = Field(default_factory=np.random.default_rng)
    params: CostParameters | None = None
    d_min: int = 0
    d_max: int = 0
    disparity: np.ndarray | None = None

    @classmethod
    def from_stereo_pair(cls, *, pair: StereoPair, rng: np.random.Generator) -> Self:
        return cls(left=pair.left, right=pair.right, color=pair.color, rng=rng)

    def set_parameters(self, params: CostParameters) -> None:
        self.params = params.model_copy()

    def set_disp_range(self, d_min: int, d_max: int) -> None:
        if d_min > d_max:
            raise InvalidArgument(f"Empty disparity range [{d_min}, {d_max}]")
        self.d_min = d_min
        self.d_max = d_max

    def label_order(self) -> list[int]:
        """Disparities in the order an expansion iteration visits them."""
        labels = list(range(self.d_min, self.d_max + 1))
        if self.params is not None and self.params.randomize_order:
            self.rng.shuffle(labels)
        return labels

    def _as_channels(self, image: np.ndarray) -> np.ndarray:
        return image if image.ndim == 3 else image[..., np.newaxis]

    def get_k(self) -> float:
        """Estimate K as the mean k-th smallest data penalty over disparities.

        k is a quarter of the number of disparities, at least 3.

        Returns:
            Estimated occlusion cost

        Raises:
            RuntimeError: If set_parameters() was never called
            ParameterDerivationError: If no pixel can be sampled or K is 0
        """
        if self.params is None:
            raise RuntimeError("set_parameters() must be called before get_k()")

        left = self._as_channels(self.left)
        right = self._as_channels(self.right)
        height = min(left.shape[0], right.shape[0])
        left = left[:height]
        right = right[:height]

        n_labels = self.d_max - self.d_min + 1
        k = min(max((n_labels + 2) // 4, 3), n_labels)
        x_start = max(0, -self.d_min)
        x_stop = min(left.shape[1], right.shape[1] - self.d_max)
        if x_stop <= x_start or height == 0:
            raise ParameterDerivationError("Not enough samples to estimate K")

        left_bounds = half_pixel_bounds(left)
        right_bounds = half_pixel_bounds(right)
        left_slice = slice(x_start, x_stop)

        penalties = np.empty((n_labels, height, x_stop - x_start))
        for index, d in enumerate(range(self.d_min, self.d_max + 1)):
            right_slice = slice(x_start + d, x_stop + d)
            penalties[index] = birchfield_tomasi_penalty(
                left=left[:, left_slice],
                left_bounds=(left_bounds[0][:, left_slice], left_bounds[1][:, left_slice]),
                right=right[:, right_slice],
                right_bounds=(right_bounds[0][:, right_slice], right_bounds[1][:, right_slice]),
                data_cost=self.params.data_cost
            )

        kth_smallest = np.partition(penalties, k - 1, axis=0)[k - 1]
        total = float(kth_smallest.sum())
        if total == 0:
            raise ParameterDerivationError("K estimate is 0")

        k_value = total / kth_smallest.size
        logger.info(f"Computing statistics: K(data_penalty noise) = {k_value:.4f}")
        return k_value

    def kz2(self) -> None:
        raise SolverUnavailable(
            "No graph-cut backend is installed; subclass Match and implement kz2()"
        )

    def _require_disparity(self) -> np.ndarray:
        if self.disparity is None:
            raise RuntimeError("kz2() must run before saving the disparity map")
        return self.disparity

    def save_x_left(self, path: Path) -> None:
        RawDisparityWriter().write(
            filepath=path,
            disparity=self._require_disparity(),
            d_min=self.d_min,
            d_max=self.d_max
        )

    def save_scaled_x_left(self, path: Path, flag: bool) -> None:
        ScaledDisparityWriter(reverse=flag).write(
            filepath=path,
            disparity=self._require_disparity(),
            d_min=self.d_min,
            d_max=self.d_max
        )
