from typing import List

from config import Settings, split_model_ref
from prompts import (
    BIAS_PERSPECTIVES,
    CLAIM_EXTRACTOR_SYSTEM_PROMPT,
    SEARCH_SYSTEM_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    VERIFIER_SYSTEM_PROMPT,
)
from .judge_gateway import JudgeIdentity

CLAIM_EXTRACTOR_ASSISTANT = "Verity-ClaimExtractor-v1"
SEARCH_ASSISTANT = "Verity-WebSearch-v1"
VERIFIER_ASSISTANT = "Verity-Verifier-v1"
SUMMARY_ASSISTANT = "Verity-Summary-v1"


def _identity(display_name: str, assistant_name: str, system_prompt: str, model_ref: str) -> JudgeIdentity:
    provider, model_name = split_model_ref(model_ref)
    return JudgeIdentity(
        display_name=display_name,
        assistant_name=assistant_name,
        system_prompt=system_prompt,
        llm_provider=provider,
        model_name=model_name,
    )


def claim_extractor_judge(settings: Settings) -> JudgeIdentity:
    return _identity("claim-extractor", CLAIM_EXTRACTOR_ASSISTANT, CLAIM_EXTRACTOR_SYSTEM_PROMPT, settings.DEFAULT_MODEL)


def summary_judge(settings: Settings) -> JudgeIdentity:
    return _identity("summarizer", SUMMARY_ASSISTANT, SUMMARY_SYSTEM_PROMPT, settings.DEFAULT_MODEL)


def search_judges(settings: Settings) -> List[JudgeIdentity]:
    """Web-search judges in preference order; later ones answer when earlier ones fail."""
    return [
        _identity(split_model_ref(ref)[1], SEARCH_ASSISTANT, SEARCH_SYSTEM_PROMPT, ref)
        for ref in (settings.SEARCH_MODEL, settings.SEARCH_FALLBACK_MODEL)
    ]


def verifier_judges(settings: Settings) -> List[JudgeIdentity]:
    return [
        _identity(split_model_ref(ref)[1], VERIFIER_ASSISTANT, VERIFIER_SYSTEM_PROMPT, ref)
        for ref in settings.VERIFIER_MODELS
    ]


def bias_judges(settings: Settings) -> List[JudgeIdentity]:
    return [
        _identity(perspective["key"], perspective["name"], perspective["prompt"], settings.DEFAULT_MODEL)
        for perspective in BIAS_PERSPECTIVES
    ]
