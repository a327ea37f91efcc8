from .source_quality_scorer import SourceQualityScorer
from .recency_scorer import RecencyScorer
from .trust_score import (
    TrustScoreCalculator,
    bias_penalty,
    calculate_trust_score,
    compute_breakdown,
    round_half_up,
    trust_label,
)

__all__ = [
    "SourceQualityScorer",
    "RecencyScorer",
    "TrustScoreCalculator",
    "bias_penalty",
    "calculate_trust_score",
    "compute_breakdown",
    "round_half_up",
    "trust_label",
]
