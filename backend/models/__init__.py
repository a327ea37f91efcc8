from .sources import Source
from .bias import BiasSignal, OverallBias
from .claims import (
    Claim,
    ClaimVerdictType,
    JudgeVerdict,
    JudgeVerdictType,
)
from .report import AnalysisReport, AnalyzeRequest, TrustLabel
from .verdicts import ConsensusResult
from .confidence import TrustScoreBreakdown
from .judge_outputs import (
    BiasOpinion,
    JudgeOpinion,
    SourceCandidate,
    normalize_verdict,
    coerce_unit_interval,
)

__all__ = [
    "Source",

    "BiasSignal",
    "OverallBias",

    "Claim",
    "ClaimVerdictType",
    "JudgeVerdict",
    "JudgeVerdictType",

    "AnalysisReport",
    "AnalyzeRequest",
    "TrustLabel",

    "ConsensusResult",
    "TrustScoreBreakdown",

    "BiasOpinion",
    "JudgeOpinion",
    "SourceCandidate",
    "normalize_verdict",
    "coerce_unit_interval",
]
