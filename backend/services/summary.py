import re
from typing import List

from config import JUDGE_CONFIG, logger
from exceptions import ConfigurationMissing, JudgeUnavailable
from models import BiasSignal, Claim
from prompts import SUMMARY_PROMPT
from .claim_extraction import split_sentences
from .judge_gateway import JudgeGateway, JudgeIdentity

_SENTENCE = re.compile(r"[^.!?]+[.!?]+")

_VERDICT_DESCRIPTIONS = {
    "likely_true": "likely true",
    "likely_misleading": "likely misleading",
}


def fallback_summary(text: str) -> str:
    sentences = split_sentences(text)[:2]
    if not sentences:
        return ""
    summary = " ".join(sentences)
    return summary if summary[-1] in ".!?" else summary + "."


class TextSummarizer:
    """Describes in a sentence or two what the screenshot says."""

    def __init__(
        self,
        gateway: JudgeGateway,
        judge: JudgeIdentity,
        timeout: float = JUDGE_CONFIG.SUMMARY_TIMEOUT,
    ):
        self.gateway = gateway
        self.judge = judge
        self.timeout = timeout

    async def summarize(self, text: str) -> str:
        prompt = SUMMARY_PROMPT.format(text=text[:JUDGE_CONFIG.MAX_OCR_PROMPT_LENGTH])
        try:
            reply = await self.gateway.ask(self.judge, prompt, timeout=self.timeout)
            summary = " ".join(reply.split()).strip().strip('"')
            if len(summary) > 10:
                return summary
            logger.warning("Summary judge returned an unusably short reply")
        except (JudgeUnavailable, ConfigurationMissing) as e:
            logger.warning(f"Summary judge failed: {e.message}")
        return fallback_summary(text)


def _first_sentences(text: str, limit: int = 2) -> str:
    sentences = _SENTENCE.findall(text) or [text]
    return " ".join(s.strip() for s in sentences[:limit]).strip()


def compose_report_summary(
    claims: List[Claim],
    bias: BiasSignal,
    source_count: int,
    text_summary: str,
) -> str:
    description = text_summary if text_summary and len(text_summary) > 10 else "; ".join(c.text for c in claims)
    main_verdict = claims[0].verdict if claims else "mixed"
    verdict_desc = _VERDICT_DESCRIPTIONS.get(main_verdict, "unverified")
    bias_desc = "relatively neutral" if bias.overall_bias == "center" else bias.overall_bias.replace("_", " ")
    full = f"{description} — Verdict: {verdict_desc} ({source_count} source(s), {bias_desc} framing)."
    return _first_sentences(full)


def compose_unverifiable_summary(text_summary: str) -> str:
    if text_summary and len(text_summary) > 10:
        return f"{text_summary} — Unable to verify: no web sources found."
    return "Unable to verify claims: no web sources were found for any claim."
