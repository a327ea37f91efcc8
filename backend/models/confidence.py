from typing import Optional, TypedDict


class TrustScoreBreakdown(TypedDict):
    source_quality: float
    recency: float
    independent_agreement: float
    model_confidence: float
    model_agreement: Optional[float]
    bias_penalty: float
    raw: float
    score: int
