from .judge_gateway import JudgeGateway, JudgeIdentity, JudgeIdentityCache
from .claim_extraction import ClaimExtractor, clean_claims, fallback_claims, split_sentences
from .summary import TextSummarizer, fallback_summary
from .verification import MultiJudgeVerifier, derive_consensus
from .bias import BiasAssessor, classify_bias

__all__ = [
    "JudgeGateway",
    "JudgeIdentity",
    "JudgeIdentityCache",
    "ClaimExtractor",
    "clean_claims",
    "fallback_claims",
    "split_sentences",
    "TextSummarizer",
    "fallback_summary",
    "MultiJudgeVerifier",
    "derive_consensus",
    "BiasAssessor",
    "classify_bias",
]
