"""Automatic derivation of the smoothness and occlusion weights.

When lambda is not given it is set to K/5, K being the occlusion cost given
by the user or estimated by the solver. The result is kept as a fraction
with a power-of-two denominator large enough that rounding to an integer
numerator keeps at least two significant bits.

Arithmetic is done in single precision; derived weights depend on its
rounding.
"""

import logging
from typing import TYPE_CHECKING

import numpy as np

from kzstereo.errors import ParameterDerivationError
from kzstereo.parameters.cost_parameters import CostParameters, Lambda
from kzstereo.parameters.fraction_decoder import Fraction
from kzstereo.parameters.rescaler import TrackedField, rescale_fields

if TYPE_CHECKING:
    from kzstereo.solvers.base_solver import StereoSolver

logger = logging.getLogger(__name__)

LAMBDA_PER_K = np.float32(5.0)
MIN_SCALED_LAMBDA = np.float32(3.0)


def lambda_fraction_from_k(*, k_value: float) -> Fraction:
    """Compute lambda = K/5 as an integer over a power of two.

    Args:
        k_value: Occlusion cost as a real number

    Returns:
        Fraction (lambda, p) with p the smallest power of two such that
        (K/5)*p >= 3

    Raises:
        ParameterDerivationError: If K is not a finite positive number
    """
    target = np.float32(k_value) / LAMBDA_PER_K
    if not np.isfinite(target) or target <= 0:
        raise ParameterDerivationError(f"Cannot derive lambda from occlusion cost K={k_value}")

    denominator = 1
    while target < MIN_SCALED_LAMBDA:
        target *= np.float32(2.0)
        denominator *= 2
    numerator = int(target + np.float32(0.5))
    return Fraction(numerator=numerator, denominator=denominator)


def derive_missing(
    *,
    params: CostParameters,
    lambda_: Lambda,
    solver: "StereoSolver"
) -> None:
    """Fill unset lambda, occlusion cost, lambda1 and lambda2 in place.

    The solver is only queried when both lambda and K are unset (K <= 0).

    Args:
        params: Cost parameters, possibly with unset weights
        lambda_: Master smoothness weight, in shared-denominator units
        solver: Solver providing the automatic K estimate

    Raises:
        ParameterDerivationError: If K cannot be represented as a float or
            gives no usable lambda
    """
    if not lambda_.is_set:
        if params.occlusion_cost > 0:
            try:
                k_value = np.float32(params.occlusion_cost) / np.float32(params.denominator)
            except OverflowError:
                raise ParameterDerivationError(
                    "Occlusion cost K is out of the floating point range"
                ) from None
        else:
            solver.set_parameters(params)
            k_value = np.float32(solver.get_k())
            logger.info(f"Automatic occlusion cost estimate: K={float(k_value):.4f}")

        fraction = lambda_fraction_from_k(k_value=float(k_value))
        logger.info(f"Derived lambda={fraction.numerator}/{fraction.denominator}")
        rescale_fields(
            params=params,
            lambda_=lambda_,
            field=TrackedField.LAMBDA,
            fraction=fraction
        )

    if params.occlusion_cost < 0:
        params.occlusion_cost = 5 * lambda_.value
    if params.lambda1 < 0:
        params.lambda1 = 3 * lambda_.value
    if params.lambda2 < 0:
        params.lambda2 = lambda_.value
