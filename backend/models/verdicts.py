from dataclasses import dataclass, field
from typing import List

from .claims import JudgeVerdict, JudgeVerdictType


@dataclass(frozen=True)
class ConsensusResult:
    """Outcome of one multi-judge verification round for a single claim."""
    final_verdict: JudgeVerdictType
    verdicts: List[JudgeVerdict] = field(default_factory=list)
    model_confidence: float = 0.0
    model_agreement: float = 0.0
    explanation: str = ""
    failed_judges: List[str] = field(default_factory=list)

    @property
    def all_failed(self) -> bool:
        return not self.verdicts
