import logging
from abc import ABC, abstractmethod
from pathlib import Path

from kzstereo.parameters.cost_parameters import CostParameters
from kzstereo.utilities.arbitrary_types_model import ABaseModel

logger = logging.getLogger(__name__)


class StereoSolver(ABaseModel, ABC):
    """Contract of the graph-cut stereo solver.

    The normalization engine only pushes parameters, asks for an automatic
    occlusion cost estimate, and triggers the optimization and saving.

    Usage:
        solver.set_parameters(params)
        k = solver.get_k()
        solver.set_disp_range(d_min=-16, d_max=0)
        solver.kz2()
        solver.save_x_left(Path("disparity.tif"))
    """

    @abstractmethod
    def set_parameters(self, params: CostParameters) -> None:
        """Store a copy of the cost parameters used by the next calls."""
        pass

    @abstractmethod
    def get_k(self) -> float:
        """Estimate the occlusion cost from image statistics.

        Only valid after set_parameters().

        Returns:
            Estimated occlusion cost, in data penalty units
        """
        pass

    @abstractmethod
    def set_disp_range(self, d_min: int, d_max: int) -> None:
        """Set the range of disparities searched by the solver."""
        pass

    @abstractmethod
    def kz2(self) -> None:
        """Run the energy minimization."""
        pass

    @abstractmethod
    def save_x_left(self, path: Path) -> None:
        """Save the raw disparity map of the left image."""
        pass

    @abstractmethod
    def save_scaled_x_left(self, path: Path, flag: bool) -> None:
        """Save a scaled, viewable disparity map of the left image."""
        pass
