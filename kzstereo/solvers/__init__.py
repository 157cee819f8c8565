"""Graph-cut solver collaborators."""

from .base_solver import StereoSolver
from .match import Match

__all__ = [
    "StereoSolver",
    "Match",
]
