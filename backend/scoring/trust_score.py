from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Union

from config import logger
from config.constants import SCORING_CONFIG, ScoringConfig
from models import BiasSignal, Source, TrustLabel, TrustScoreBreakdown
from .recency_scorer import RecencyScorer
from .source_quality_scorer import SourceQualityScorer


def round_half_up(value: float) -> int:
    # repr() first so 82.5 stored as 82.49999... still rounds up
    return int(Decimal(repr(round(value, 9))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def bias_penalty(bias: BiasSignal) -> float:
    return 0.5 * abs(bias.political_bias) + 0.5 * bias.sensationalism


def trust_label(score: int, config: ScoringConfig = SCORING_CONFIG) -> TrustLabel:
    if score >= config.LIKELY_TRUE_THRESHOLD:
        return "Likely True"
    if score >= config.MIXED_THRESHOLD:
        return "Unverified / Mixed"
    return "Likely Misleading"


class TrustScoreCalculator:
    """Combines evidence, judge confidence and bias into a 0-100 trust score.

    Pure and deterministic: the same inputs (including ``now``) always give
    the same score.
    """

    def __init__(
        self,
        source_scorer: SourceQualityScorer = None,
        recency_scorer: RecencyScorer = None,
        config: ScoringConfig = None,
    ):
        self.config = config or SCORING_CONFIG
        self.source_scorer = source_scorer or SourceQualityScorer(self.config)
        self.recency_scorer = recency_scorer or RecencyScorer(self.config)

    def breakdown(
        self,
        evidence: List[Source],
        model_confidence: float,
        bias_penalty: float,
        model_agreement: Optional[float] = None,
        now: Optional[Union[date, datetime]] = None,
    ) -> TrustScoreBreakdown:
        source_quality = self.source_scorer.quality(evidence)
        agreement = self.source_scorer.independent_agreement(evidence)
        recency = self.recency_scorer.score(evidence, now)

        raw = (
            self.config.SOURCE_QUALITY_WEIGHT * source_quality +
            self.config.MODEL_CONFIDENCE_WEIGHT * model_confidence +
            self.config.RECENCY_WEIGHT * recency +
            self.config.AGREEMENT_WEIGHT * agreement -
            self.config.BIAS_WEIGHT * bias_penalty
        )
        score = max(0, min(100, round_half_up(raw * 100)))

        logger.debug(
            f"Trust score: quality={source_quality:.2f}, confidence={model_confidence:.2f}, "
            f"recency={recency:.2f}, agreement={agreement:.2f}, bias={bias_penalty:.2f} → {score}"
        )

        return TrustScoreBreakdown(
            source_quality=source_quality,
            recency=recency,
            independent_agreement=agreement,
            model_confidence=model_confidence,
            model_agreement=model_agreement,
            bias_penalty=bias_penalty,
            raw=raw,
            score=score,
        )

    def score(self, *args, **kwargs) -> int:
        return self.breakdown(*args, **kwargs)["score"]


_DEFAULT_CALCULATOR = TrustScoreCalculator()


def compute_breakdown(
    evidence: List[Source],
    model_confidence: float,
    bias_penalty: float,
    model_agreement: Optional[float] = None,
    now: Optional[Union[date, datetime]] = None,
) -> TrustScoreBreakdown:
    return _DEFAULT_CALCULATOR.breakdown(evidence, model_confidence, bias_penalty, model_agreement, now)


def calculate_trust_score(
    evidence: List[Source],
    model_confidence: float,
    bias_penalty: float,
    model_agreement: Optional[float] = None,
    now: Optional[Union[date, datetime]] = None,
) -> int:
    """
    Trust score for one claim.

    Args:
        evidence: Annotated sources retrieved for the claim
        model_confidence: Consensus confidence of the verifier judges, 0.0 to 1.0
        bias_penalty: 0.5·|politicalBias| + 0.5·sensationalism
        model_agreement: Fraction of judges agreeing; recorded, not weighted
        now: Reference day for recency, defaults to today

    Returns:
        Integer score clamped to [0, 100]
    """
    return compute_breakdown(evidence, model_confidence, bias_penalty, model_agreement, now)["score"]
