import logging
import time
from pathlib import Path
from typing import Callable

import numpy as np
from pydantic import Field

from kzstereo.io.image_loader import StereoPair, load_stereo_pair
from kzstereo.parameters.cost_parameters import CostParameters, Lambda
from kzstereo.parameters.deriver import derive_missing
from kzstereo.parameters.fraction_decoder import Fraction, decode_fraction, format_fraction
from kzstereo.parameters.reducer import reduce_parameters
from kzstereo.parameters.rescaler import TrackedField, rescale_fields
from kzstereo.solvers.base_solver import StereoSolver
from kzstereo.solvers.match import Match
from kzstereo.utilities.arbitrary_types_model import ABaseModel

logger = logging.getLogger(__name__)

SolverFactory = Callable[..., StereoSolver]


class FractionTokens(ABaseModel):
    """Raw cost tokens from the command line, None when not given."""
    lambda_token: str | None = None
    lambda1_token: str | None = None
    lambda2_token: str | None = None
    k_token: str | None = None

    def in_order(self) -> list[tuple[TrackedField, str | None]]:
        """Tokens in the order they are applied."""
        return [
            (TrackedField.LAMBDA, self.lambda_token),
            (TrackedField.LAMBDA1, self.lambda1_token),
            (TrackedField.LAMBDA2, self.lambda2_token),
            (TrackedField.OCCLUSION_COST, self.k_token),
        ]

    def decoded(self) -> list[tuple[TrackedField, Fraction]]:
        """Decode the given tokens, skipping the ones left empty.

        Raises:
            InvalidFraction: On the first token that does not decode
        """
        return [(field, decode_fraction(token)) for field, token in self.in_order() if token]


class NormalizationResult(ABaseModel):
    """Final solver weights and the reduced lambda fraction."""
    params: CostParameters
    lambda_: Lambda

    def k_report(self) -> str:
        return f"K={format_fraction(self.params.occlusion_cost, self.params.denominator)}"

    def lambda_report(self) -> str:
        return f"lambda={format_fraction(self.lambda_.value, self.lambda_.denominator)}"

    def __str__(self) -> str:
        return "\n".join([self.k_report(), self.lambda_report()])


def apply_fraction_tokens(
    *,
    params: CostParameters,
    lambda_: Lambda,
    tokens: FractionTokens
) -> None:
    """Decode each given token and rescale the tracked fields after each one.

    Raises:
        InvalidFraction: On the first token that does not decode
    """
    for field, fraction in tokens.decoded():
        logger.debug(f"Setting {field.value} to {fraction.numerator}/{fraction.denominator}")
        rescale_fields(params=params, lambda_=lambda_, field=field, fraction=fraction)


def finalize_parameters(
    *,
    params: CostParameters,
    lambda_: Lambda,
    solver: StereoSolver
) -> NormalizationResult:
    """Derive missing weights, reduce them and push them to the solver."""
    derive_missing(params=params, lambda_=lambda_, solver=solver)
    reduce_parameters(params=params, lambda_=lambda_, solver=solver)
    return NormalizationResult(params=params, lambda_=lambda_)


def normalize_parameters(
    *,
    params: CostParameters,
    tokens: FractionTokens,
    solver: StereoSolver
) -> NormalizationResult:
    """Run decode, rescale, derive and reduce on a copy of ``params``.

    Args:
        params: Starting parameters, usually the defaults
        tokens: Cost tokens given by the user
        solver: Solver used for the K estimate and receiving the result

    Returns:
        NormalizationResult with the reduced weights
    """
    params = params.model_copy()
    lambda_ = Lambda()
    apply_fraction_tokens(params=params, lambda_=lambda_, tokens=tokens)
    return finalize_parameters(params=params, lambda_=lambda_, solver=solver)


class MatchConfig(ABaseModel):
    """Configuration of one stereo matching run.

    Attributes:
        left_path: Left (reference) image
        right_path: Right image
        d_min: Smallest disparity searched
        d_max: Largest disparity searched
        disparity_output: Raw disparity map to write, None to skip
        scaled_output: Scaled disparity image to write, None to skip
        params: Starting cost parameters
        tokens: Cost tokens to apply on top of params
        seed: Non-negative seed of the solver's random generator, defaults to the current time
    """

    left_path: Path
    right_path: Path
    d_min: int
    d_max: int
    disparity_output: Path | None = None
    scaled_output: Path | None = None
    params: CostParameters = Field(default_factory=CostParameters)
    tokens: FractionTokens = Field(default_factory=FractionTokens)
    seed: int = Field(default_factory=lambda: int(time.time()), ge=0)

    @property
    def runs_solver(self) -> bool:
        return self.disparity_output is not None or self.scaled_output is not None

    def __str__(self) -> str:
        lines = [
            "Match Configuration:",
            f"  Left:      {self.left_path}",
            f"  Right:     {self.right_path}",
            f"  Disparity: [{self.d_min}, {self.d_max}]",
            f"  Output:    {self.disparity_output}",
            f"  Scaled:    {self.scaled_output}",
            f"  Seed:      {self.seed}",
            "",
            str(self.params),
        ]
        return "\n".join(lines)


class StereoMatchPipeline(ABaseModel):
    """Normalize the cost weights for an image pair, then report or solve.

    Steps, in order:
    1. Decode the cost tokens, rescaling after each one
    2. Load the images and build the solver
    3. Set the disparity range
    4. Derive the missing weights and reduce them
    5. Run the solver and save, when an output path is configured
    """

    config: MatchConfig
    solver_factory: SolverFactory = Match.from_stereo_pair
    solver: StereoSolver | None = None
    result: NormalizationResult | None = None

    def create_solver(self, *, pair: StereoPair) -> StereoSolver:
        rng = np.random.default_rng(self.config.seed)
        return self.solver_factory(pair=pair, rng=rng)

    def run(self) -> NormalizationResult:
        logger.info(f"Pipeline config: {self.config}")

        params = self.config.params.model_copy()
        lambda_ = Lambda()
        apply_fraction_tokens(params=params, lambda_=lambda_, tokens=self.config.tokens)

        pair = load_stereo_pair(
            left_path=self.config.left_path,
            right_path=self.config.right_path
        )
        self.solver = self.create_solver(pair=pair)
        self.solver.set_disp_range(self.config.d_min, self.config.d_max)

        self.result = finalize_parameters(params=params, lambda_=lambda_, solver=self.solver)
        logger.info(f"Normalized weights: {self.result.k_report()}, {self.result.lambda_report()}")

        if self.config.runs_solver:
            self.solve_and_save()
        return self.result

    def solve_and_save(self) -> None:
        logger.info("=" * 80)
        logger.info("STARTING GRAPH-CUT OPTIMIZATION")
        logger.info("=" * 80)
        start_time = time.time()
        self.solver.kz2()
        logger.info(f"Optimization finished in {time.time() - start_time:.2f}s")

        if self.config.disparity_output is not None:
            self.solver.save_x_left(self.config.disparity_output)
        if self.config.scaled_output is not None:
            self.solver.save_scaled_x_left(self.config.scaled_output, False)
