import asyncio
from collections import Counter
from typing import List, Sequence, Tuple

from config import CONSENSUS_CONFIG, JUDGE_CONFIG, logger
from exceptions import ConfigurationMissing, JudgeUnavailable, MalformedJudgeOutput
from models import ConsensusResult, JudgeOpinion, JudgeVerdict, JudgeVerdictType, Source
from prompts import VERIFICATION_PROMPT
from utils.parsing import parse_judge_payload
from .judge_gateway import JudgeGateway, JudgeIdentity

DECISIVE_VERDICTS = ("likely_true", "likely_misleading")

JUDGE_FAILURES = (JudgeUnavailable, MalformedJudgeOutput, ConfigurationMissing)


def derive_consensus(verdicts: Sequence[str]) -> JudgeVerdictType:
    """Final verdict from the verdicts of the judges that answered.

    A decisive verdict wins with a strict majority, or with at least half the
    votes when no judge backed the opposite decisive verdict. Anything else is
    mixed. Depends only on the vote counts, never on arrival order.
    """
    n = len(verdicts)
    if n == 0:
        return "mixed"

    counts = Counter(verdicts)
    for decisive in DECISIVE_VERDICTS:
        if counts[decisive] * 2 > n:
            return decisive

    true_votes = counts["likely_true"]
    misleading_votes = counts["likely_misleading"]
    if true_votes and not misleading_votes and true_votes * 2 >= n:
        return "likely_true"
    if misleading_votes and not true_votes and misleading_votes * 2 >= n:
        return "likely_misleading"
    return "mixed"


def format_evidence(evidence: Sequence[Source], max_length: int = JUDGE_CONFIG.MAX_CONTEXT_LENGTH) -> str:
    if not evidence:
        return "No sources were found for this claim."
    lines = []
    for i, source in enumerate(evidence, 1):
        lines.append(
            f"[{i}] {source.title} ({source.domain}, {source.published_date.isoformat()})\n"
            f"    {source.snippet or 'No excerpt.'}\n"
            f"    {source.url}"
        )
    return "\n".join(lines)[:max_length]


def consensus_explanation(
    opinions: Sequence[Tuple[JudgeIdentity, JudgeOpinion]],
    final_verdict: str,
    failed_names: Sequence[str] = (),
) -> str:
    reasoning = next((o.reasoning for _, o in opinions if o.reasoning), "")
    agreeing = sum(1 for _, o in opinions if o.verdict == final_verdict)
    if agreeing == len(opinions):
        note = "(All judges agree)"
    else:
        note = f'(Judges disagree: {agreeing}/{len(opinions)} "{final_verdict}")'
    if failed_names:
        note += f" (No answer from: {', '.join(failed_names)})"
    return f"{reasoning} {note}".strip()


class MultiJudgeVerifier:
    """Asks every verifier judge about a claim at once and combines the answers."""

    def __init__(
        self,
        gateway: JudgeGateway,
        judges: Sequence[JudgeIdentity],
        timeout: float = JUDGE_CONFIG.VERIFY_TIMEOUT,
    ):
        self.gateway = gateway
        self.judges = list(judges)
        self.timeout = timeout

    async def verify(self, claim: str, evidence: Sequence[Source]) -> ConsensusResult:
        prompt = VERIFICATION_PROMPT.format(claim=claim, sources=format_evidence(evidence))
        results = await asyncio.gather(
            *(self._ask_judge(judge, prompt) for judge in self.judges),
            return_exceptions=True
        )

        opinions: List[Tuple[JudgeIdentity, JudgeOpinion]] = []
        failures: List[Tuple[JudgeIdentity, str]] = []
        for judge, result in zip(self.judges, results):
            if isinstance(result, JUDGE_FAILURES):
                logger.warning(
                    f"Verifier {judge.display_name} failed: {result.message}",
                    extra={"judge": judge.display_name}
                )
                failures.append((judge, result.message))
            elif isinstance(result, Exception):
                logger.error(f"Verifier {judge.display_name} raised {type(result).__name__}: {result}")
                failures.append((judge, f"{type(result).__name__}: {result}"))
            else:
                opinions.append((judge, result))

        failed_names = [judge.display_name for judge, _ in failures]
        if not opinions:
            return self._all_failed(failures)

        final_verdict = derive_consensus([o.verdict for _, o in opinions])
        verdicts = [
            JudgeVerdict(
                judge_name=judge.display_name,
                verdict=opinion.verdict,
                confidence=opinion.confidence,
                agrees_with_final=opinion.verdict == final_verdict,
                reasoning=opinion.reasoning,
            )
            for judge, opinion in opinions
        ]

        known = [v.confidence for v in verdicts if v.confidence_known]
        if known:
            model_confidence = sum(known) / len(known)
        else:
            model_confidence = CONSENSUS_CONFIG.UNKNOWN_CONFIDENCE_SCORE
        agreement = sum(1 for v in verdicts if v.agrees_with_final) / len(verdicts)

        logger.info(
            f"Consensus {final_verdict} from {len(verdicts)}/{len(self.judges)} judges "
            f"(confidence={model_confidence:.2f}, agreement={agreement:.2f})"
        )
        return ConsensusResult(
            final_verdict=final_verdict,
            verdicts=verdicts,
            model_confidence=model_confidence,
            model_agreement=agreement,
            explanation=consensus_explanation(opinions, final_verdict, failed_names),
            failed_judges=failed_names,
        )

    async def _ask_judge(self, judge: JudgeIdentity, prompt: str) -> JudgeOpinion:
        reply = await self.gateway.ask(judge, prompt, timeout=self.timeout)
        return parse_judge_payload(reply, JudgeOpinion)

    def _all_failed(self, failures: Sequence[Tuple[JudgeIdentity, str]]) -> ConsensusResult:
        if failures:
            details = "; ".join(f"{judge.display_name}: {reason}" for judge, reason in failures)
            explanation = f"Verification unavailable: all {len(failures)} judge(s) failed ({details})."
        else:
            explanation = "Verification unavailable: no verifier judges are configured."
        logger.error(explanation)
        return ConsensusResult(
            final_verdict="mixed",
            verdicts=[],
            model_confidence=CONSENSUS_CONFIG.ALL_FAILED_CONFIDENCE,
            model_agreement=0.0,
            explanation=explanation,
            failed_judges=[judge.display_name for judge, _ in failures],
        )
