import re
from typing import Any, Iterable, List, Optional

from config import CLAIM_CONFIG, JUDGE_CONFIG, logger
from exceptions import (
    ConfigurationMissing,
    EmptyInputException,
    JudgeUnavailable,
    MalformedJudgeOutput,
)
from prompts import CLAIM_EXTRACTION_PROMPT
from utils.parsing import extract_structured
from .judge_gateway import JudgeGateway, JudgeIdentity

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+|\n+")


def split_sentences(text: str) -> List[str]:
    return [s.strip() for s in _SENTENCE_BOUNDARY.split(text or "") if s and s.strip()]


def fallback_claims(text: str) -> List[str]:
    """Heuristic used when the judge gives nothing usable.

    Raises:
        EmptyInputException: the text holds nothing that could be a claim.
    """
    for sentence in split_sentences(text):
        if len(sentence) > CLAIM_CONFIG.MIN_CLAIM_LENGTH and not sentence.endswith("?"):
            return [sentence]

    stripped = " ".join((text or "").split())
    if any(ch.isalnum() for ch in stripped):
        return [stripped[:CLAIM_CONFIG.FALLBACK_SLICE_LENGTH].strip()]
    raise EmptyInputException("no claim could be extracted from the text")


def _claim_text(item: Any) -> Optional[str]:
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        value = item.get("text") or item.get("claim")
        return value if isinstance(value, str) else None
    return None


def clean_claims(candidates: Iterable[Any]) -> List[str]:
    """Normalise judge claims: trim, drop questions and fragments, dedupe, cap."""
    seen = set()
    claims = []
    for item in candidates:
        text = _claim_text(item)
        if not text:
            continue
        text = " ".join(text.split())
        if len(text) < CLAIM_CONFIG.MIN_JUDGE_CLAIM_LENGTH or text.endswith("?"):
            continue
        key = text.lower()
        if key in seen:
            continue
        seen.add(key)
        claims.append(text)
    return claims[:CLAIM_CONFIG.MAX_CLAIMS]


class ClaimExtractor:
    """Turns OCR text into one to three standalone factual claims."""

    def __init__(
        self,
        gateway: JudgeGateway,
        judge: JudgeIdentity,
        timeout: float = JUDGE_CONFIG.REQUEST_TIMEOUT,
    ):
        self.gateway = gateway
        self.judge = judge
        self.timeout = timeout

    async def extract(self, ocr_text: str) -> List[str]:
        prompt = CLAIM_EXTRACTION_PROMPT.format(text=ocr_text[:JUDGE_CONFIG.MAX_OCR_PROMPT_LENGTH])
        claims: List[str] = []
        try:
            reply = await self.gateway.ask(self.judge, prompt, timeout=self.timeout)
            claims = clean_claims(extract_structured(reply, "array"))
        except MalformedJudgeOutput as e:
            logger.warning(
                f"Claim extraction returned malformed output: {e.last_error}",
                extra={"raw_text": e.raw_text}
            )
        except (JudgeUnavailable, ConfigurationMissing) as e:
            logger.warning(f"Claim extraction judge failed: {e.message}")

        if claims:
            logger.info(f"Extracted {len(claims)} claim(s) via judge")
            return claims

        claims = fallback_claims(ocr_text)
        logger.info("Using sentence heuristic for claim extraction")
        return claims
