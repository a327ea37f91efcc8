import asyncio
from typing import List, Sequence, Tuple

from config import BIAS_CONFIG, JUDGE_CONFIG, logger
from models import BiasOpinion, BiasSignal, OverallBias, Source
from prompts import BIAS_PROMPT
from utils.parsing import parse_judge_payload
from .judge_gateway import JudgeGateway, JudgeIdentity
from .verification import JUDGE_FAILURES

DEFAULT_EXPLANATION = "No significant bias detected."
ALL_FAILED_EXPLANATION = "Bias could not be assessed: every perspective judge failed, neutral defaults used."
NO_SOURCES_EXPLANATION = "Unable to assess bias without sources."


def classify_bias(political_bias: float) -> OverallBias:
    if political_bias < BIAS_CONFIG.LEFT_THRESHOLD:
        return "left"
    if political_bias < BIAS_CONFIG.SLIGHT_LEFT_THRESHOLD:
        return "slight_left"
    if political_bias <= BIAS_CONFIG.SLIGHT_RIGHT_THRESHOLD:
        return "center"
    if political_bias <= BIAS_CONFIG.RIGHT_THRESHOLD:
        return "slight_right"
    return "right"


def default_bias(explanation: str = ALL_FAILED_EXPLANATION) -> BiasSignal:
    return BiasSignal(
        political_bias=BIAS_CONFIG.DEFAULT_BIAS,
        sensationalism=BIAS_CONFIG.DEFAULT_SENSATIONALISM,
        overall_bias=classify_bias(BIAS_CONFIG.DEFAULT_BIAS),
        explanation=explanation,
    )


def _format_sources(evidence: Sequence[Source], max_length: int) -> str:
    if not evidence:
        return "No sources available."
    lines = [f"- {s.domain}: {s.title}. {s.snippet}".strip() for s in evidence]
    return "\n".join(lines)[:max_length]


class BiasAssessor:
    """Averages the bias readings of several perspective-framed judges."""

    def __init__(
        self,
        gateway: JudgeGateway,
        judges: Sequence[JudgeIdentity],
        timeout: float = JUDGE_CONFIG.BIAS_TIMEOUT,
    ):
        self.gateway = gateway
        self.judges = list(judges)
        self.timeout = timeout

    async def assess(self, claims: Sequence[str], evidence: Sequence[Source]) -> BiasSignal:
        prompt = BIAS_PROMPT.format(
            claims="\n".join(f"- {c}" for c in claims),
            sources=_format_sources(evidence, JUDGE_CONFIG.MAX_CONTEXT_LENGTH),
        )
        results = await asyncio.gather(
            *(self._ask_judge(judge, prompt) for judge in self.judges),
            return_exceptions=True
        )

        opinions: List[Tuple[JudgeIdentity, BiasOpinion]] = []
        for judge, result in zip(self.judges, results):
            if isinstance(result, JUDGE_FAILURES):
                logger.warning(f"Bias judge {judge.display_name} failed: {result.message}")
            elif isinstance(result, Exception):
                logger.error(f"Bias judge {judge.display_name} raised {type(result).__name__}: {result}")
            else:
                opinions.append((judge, result))

        if not opinions:
            return default_bias()

        political_bias = round(sum(o.bias for _, o in opinions) / len(opinions), 2)
        sensationalism = round(sum(o.sensationalism for _, o in opinions) / len(opinions), 2)
        explanation = next((o.reasoning for _, o in opinions if o.reasoning), DEFAULT_EXPLANATION)

        logger.info(
            f"Bias from {len(opinions)}/{len(self.judges)} perspectives: "
            f"bias={political_bias}, sensationalism={sensationalism}"
        )
        return BiasSignal(
            political_bias=political_bias,
            sensationalism=sensationalism,
            overall_bias=classify_bias(political_bias),
            explanation=explanation,
        )

    async def _ask_judge(self, judge: JudgeIdentity, prompt: str) -> BiasOpinion:
        reply = await self.gateway.ask(judge, prompt, timeout=self.timeout)
        return parse_judge_payload(reply, BiasOpinion)
