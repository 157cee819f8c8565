"""Proportional rescaling of the tracked cost fields.

Setting one field to n/d while keeping integers means every other field, and
the shared denominator, must absorb the factor d. Only multiplications are
performed, so successive calls compose exactly and preserve every ratio.
"""

from enum import Enum

from kzstereo.parameters.cost_parameters import CostParameters, Lambda
from kzstereo.parameters.fraction_decoder import Fraction


class TrackedField(str, Enum):
    """Cost fields that share the common denominator."""
    LAMBDA = "lambda"
    LAMBDA1 = "lambda1"
    LAMBDA2 = "lambda2"
    OCCLUSION_COST = "occlusion_cost"


def _read_fields(*, params: CostParameters, lambda_: Lambda) -> dict[TrackedField, int]:
    return {
        TrackedField.LAMBDA: lambda_.value,
        TrackedField.LAMBDA1: params.lambda1,
        TrackedField.LAMBDA2: params.lambda2,
        TrackedField.OCCLUSION_COST: params.occlusion_cost,
    }


def rescale_fields(
    *,
    params: CostParameters,
    lambda_: Lambda,
    field: TrackedField,
    fraction: Fraction
) -> None:
    """Set ``field`` to fraction.numerator/fraction.denominator in place.

    The chosen field becomes ``numerator * old_denominator``. Every other
    tracked field and the shared denominator are multiplied by
    ``fraction.denominator``. Unset (negative) fields stay negative.

    Args:
        params: Cost parameters holding the shared denominator
        lambda_: Master smoothness weight, in shared-denominator units
        field: Field being set
        fraction: New value of the field
    """
    values = _read_fields(params=params, lambda_=lambda_)
    values[field] = fraction.numerator

    for tracked, value in values.items():
        multiplier = params.denominator if tracked is field else fraction.denominator
        values[tracked] = value * multiplier

    lambda_.value = values[TrackedField.LAMBDA]
    params.lambda1 = values[TrackedField.LAMBDA1]
    params.lambda2 = values[TrackedField.LAMBDA2]
    params.occlusion_cost = values[TrackedField.OCCLUSION_COST]
    params.denominator *= fraction.denominator
