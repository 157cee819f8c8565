"""Stereo matching pipeline: cost normalization, then report or solve."""

from .stereo_pipeline import (
    FractionTokens,
    MatchConfig,
    NormalizationResult,
    StereoMatchPipeline,
    apply_fraction_tokens,
    finalize_parameters,
    normalize_parameters,
)

__all__ = [
    "FractionTokens",
    "MatchConfig",
    "NormalizationResult",
    "StereoMatchPipeline",
    "apply_fraction_tokens",
    "finalize_parameters",
    "normalize_parameters",
]
