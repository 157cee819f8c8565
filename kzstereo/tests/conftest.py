"""Pytest configuration and fixtures for kzstereo tests.

Provides reusable fixtures for:
- Temporary directories
- Synthetic stereo pairs written to disk
- A recording solver standing in for the graph-cut backend
"""

import shutil
import tempfile
from pathlib import Path
from typing import Callable

import cv2
import numpy as np
import pytest
from pydantic import Field

from kzstereo.io.image_loader import StereoPair
from kzstereo.parameters.cost_parameters import CostParameters
from kzstereo.solvers.base_solver import StereoSolver


class RecordingSolver(StereoSolver):
    """Solver that records every call and returns a fixed K estimate."""

    k_estimate: float = 30.0
    calls: list[str] = Field(default_factory=list)
    pushed: list[CostParameters] = Field(default_factory=list)
    saved: list[tuple[str, Path, bool | None]] = Field(default_factory=list)
    disp_range: tuple[int, int] | None = None
    rng: np.random.Generator | None = None

    def set_parameters(self, params: CostParameters) -> None:
        self.calls.append("set_parameters")
        self.pushed.append(params.model_copy())

    def get_k(self) -> float:
        self.calls.append("get_k")
        return self.k_estimate

    def set_disp_range(self, d_min: int, d_max: int) -> None:
        self.calls.append("set_disp_range")
        self.disp_range = (d_min, d_max)

    def kz2(self) -> None:
        self.calls.append("kz2")

    def save_x_left(self, path: Path) -> None:
        self.calls.append("save_x_left")
        self.saved.append(("raw", Path(path), None))

    def save_scaled_x_left(self, path: Path, flag: bool) -> None:
        self.calls.append("save_scaled_x_left")
        self.saved.append(("scaled", Path(path), flag))


@pytest.fixture
def temp_dir() -> Path:
    """Create temporary directory for tests.

    Yields:
        Path to temporary directory (auto-cleaned up)
    """
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp)


@pytest.fixture
def recording_solver() -> RecordingSolver:
    return RecordingSolver()


@pytest.fixture
def recording_factory() -> Callable[..., RecordingSolver]:
    """Solver factory keeping every solver it creates in ``factory.created``."""
    created: list[RecordingSolver] = []

    def factory(*, pair: StereoPair, rng: np.random.Generator) -> RecordingSolver:
        solver = RecordingSolver(rng=rng)
        created.append(solver)
        return solver

    factory.created = created
    return factory


@pytest.fixture
def gray_texture() -> np.ndarray:
    """(24, 48) random texture, reproducible."""
    rng = np.random.default_rng(seed=7)
    return rng.integers(0, 256, size=(24, 48), dtype=np.uint8)


@pytest.fixture
def gray_pair_paths(temp_dir: Path, gray_texture: np.ndarray) -> tuple[Path, Path]:
    """Gray stereo pair on disk, right image shifted 3 pixels left."""
    left_path = temp_dir / "left.png"
    right_path = temp_dir / "right.png"
    right = np.roll(gray_texture, -3, axis=1)
    cv2.imwrite(str(left_path), cv2.merge([gray_texture] * 3))
    cv2.imwrite(str(right_path), cv2.merge([right] * 3))
    return left_path, right_path


@pytest.fixture
def color_pair_paths(temp_dir: Path) -> tuple[Path, Path]:
    """Color stereo pair on disk with distinct channels."""
    rng = np.random.default_rng(seed=11)
    left = rng.integers(0, 256, size=(16, 32, 3), dtype=np.uint8)
    right = np.roll(left, -2, axis=1)
    left_path = temp_dir / "left_color.png"
    right_path = temp_dir / "right_color.png"
    cv2.imwrite(str(left_path), left)
    cv2.imwrite(str(right_path), right)
    return left_path, right_path
