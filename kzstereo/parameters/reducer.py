"""Greatest-common-divisor reduction of the final integer weights.

Smaller integers lower the risk of overflow in the solver's integer graph
while keeping every cost ratio exact.
"""

import logging
from math import gcd
from typing import TYPE_CHECKING

from kzstereo.parameters.cost_parameters import CostParameters, Lambda

if TYPE_CHECKING:
    from kzstereo.solvers.base_solver import StereoSolver

logger = logging.getLogger(__name__)

INT32_MAX = 2**31 - 1


def reduce_parameters(
    *,
    params: CostParameters,
    lambda_: Lambda,
    solver: "StereoSolver"
) -> Lambda:
    """Reduce the solver weights and the lambda fraction in place.

    The parameters are pushed to the solver once, after the shared weights
    are reduced. Lambda is reduced over the denominator in effect before
    that reduction.

    Args:
        params: Fully derived cost parameters
        lambda_: Master smoothness weight, in shared-denominator units
        solver: Solver receiving the reduced parameters

    Returns:
        The same lambda, now expressed on its own reduced denominator
    """
    denominator_lambda = params.denominator

    divisor = gcd(params.occlusion_cost, gcd(params.lambda1, gcd(params.lambda2, params.denominator)))
    if divisor > 1:
        logger.debug(f"Reducing cost weights by {divisor}")
        params.occlusion_cost //= divisor
        params.lambda1 //= divisor
        params.lambda2 //= divisor
        params.denominator //= divisor

    params.check_solver_ready()
    _warn_on_overflow(params=params)
    solver.set_parameters(params)

    lambda_.denominator = denominator_lambda
    lambda_divisor = gcd(lambda_.value, lambda_.denominator)
    if lambda_divisor > 1:
        lambda_.value //= lambda_divisor
        lambda_.denominator //= lambda_divisor
    return lambda_


def _warn_on_overflow(*, params: CostParameters) -> None:
    for name in ("occlusion_cost", "lambda1", "lambda2", "denominator"):
        value = getattr(params, name)
        if value > INT32_MAX:
            logger.warning(f"{name}={value} exceeds the 32-bit range of the graph solver")
