"""Rational normalization of the graph-cut cost weights.

- cost_parameters: CostParameters, Lambda, DataCostKind
- fraction_decoder: decode_fraction(), format_fraction()
- rescaler: rescale_fields() over TrackedField
- deriver: derive_missing(), lambda_fraction_from_k()
- reducer: reduce_parameters()

Usage:
    from kzstereo.parameters import CostParameters, Lambda, decode_fraction

    params = CostParameters()
    lambda_ = Lambda()
    rescale_fields(params=params, lambda_=lambda_, field=TrackedField.LAMBDA,
                   fraction=decode_fraction("5/2"))
"""

from .cost_parameters import (
    UNSET,
    CostParameters,
    DataCostKind,
    Lambda,
)
from .fraction_decoder import (
    AUTO_TOKEN,
    Fraction,
    decode_fraction,
    format_fraction,
)
from .rescaler import (
    TrackedField,
    rescale_fields,
)
from .deriver import (
    derive_missing,
    lambda_fraction_from_k,
)
from .reducer import reduce_parameters

__all__ = [
    "UNSET",
    "CostParameters",
    "DataCostKind",
    "Lambda",
    "AUTO_TOKEN",
    "Fraction",
    "decode_fraction",
    "format_fraction",
    "TrackedField",
    "rescale_fields",
    "derive_missing",
    "lambda_fraction_from_k",
    "reduce_parameters",
]
