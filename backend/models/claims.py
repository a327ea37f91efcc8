from typing import List, Literal, Optional

from pydantic import Field, field_validator

from .base import ReportModel, clamp
from .bias import BiasSignal
from .sources import Source

JudgeVerdictType = Literal["likely_true", "mixed", "likely_misleading"]
ClaimVerdictType = Literal["likely_true", "mixed", "likely_misleading", "unable_to_verify"]


class JudgeVerdict(ReportModel):
    """One judge's opinion on one claim.

    ``confidence`` is None when the judge did not report a usable value, which
    keeps "the judge said 0.5" distinguishable from "the judge said nothing".
    """
    judge_name: str
    verdict: JudgeVerdictType
    confidence: Optional[float] = None
    agrees_with_final: bool = False
    reasoning: str = ""

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, v: Optional[float]) -> Optional[float]:
        return None if v is None else clamp(v, 0.0, 1.0)

    @property
    def confidence_known(self) -> bool:
        return self.confidence is not None


class Claim(ReportModel):
    id: str
    text: str
    verdict: ClaimVerdictType
    trust_score: int
    explanation: str
    evidence: List[Source] = Field(default_factory=list)
    bias: BiasSignal
    judge_verdicts: List[JudgeVerdict] = Field(default_factory=list)

    @field_validator("trust_score")
    @classmethod
    def _clamp_score(cls, v: int) -> int:
        return int(clamp(v, 0, 100))
