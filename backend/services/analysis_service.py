import asyncio
import uuid
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Sequence

from config import API_TIMEOUTS, CLAIM_CONFIG, RETRIEVAL_CONFIG, Settings, logger
from exceptions import AnalysisTimeoutException
from models import AnalysisReport, BiasSignal, Claim, ConsensusResult, Source
from providers import GoogleSearchProvider, WebSearchJudgeProvider
from scoring import TrustScoreCalculator, bias_penalty, round_half_up, trust_label
from utils.validation import InputValidator
from . import judge_roster
from .bias import BiasAssessor, NO_SOURCES_EXPLANATION, default_bias
from .claim_extraction import ClaimExtractor
from .evidence import EvidenceRetriever
from .judge_gateway import JudgeGateway, JudgeIdentityCache
from .summary import TextSummarizer, compose_report_summary, compose_unverifiable_summary
from .verification import MultiJudgeVerifier

UNABLE_TO_VERIFY_LABEL = "Unable to Verify"
UNABLE_TO_VERIFY_EXPLANATION = "Unable to verify: no web sources were found for this claim."


def union_evidence(evidence_per_claim: Sequence[Sequence[Source]]) -> List[Source]:
    seen = set()
    merged = []
    for evidence in evidence_per_claim:
        for source in evidence:
            if source.url not in seen:
                seen.add(source.url)
                merged.append(source)
    return merged


class AnalysisService:
    """Runs one OCR text through extraction, retrieval, verification, bias and scoring."""

    def __init__(
        self,
        claim_extractor: ClaimExtractor,
        summarizer: TextSummarizer,
        retriever: EvidenceRetriever,
        verifier: MultiJudgeVerifier,
        bias_assessor: BiasAssessor,
        calculator: Optional[TrustScoreCalculator] = None,
        analysis_timeout: float = API_TIMEOUTS.ANALYSIS,
        results_per_claim: int = RETRIEVAL_CONFIG.RESULTS_PER_CLAIM,
    ):
        self.claim_extractor = claim_extractor
        self.summarizer = summarizer
        self.retriever = retriever
        self.verifier = verifier
        self.bias_assessor = bias_assessor
        self.calculator = calculator or TrustScoreCalculator()
        self.analysis_timeout = analysis_timeout
        self.results_per_claim = results_per_claim

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        identity_cache: Optional[JudgeIdentityCache] = None,
    ) -> "AnalysisService":
        gateway = JudgeGateway(settings.JUDGE_API_KEY, settings.JUDGE_BASE_URL, identity_cache)
        providers = [
            WebSearchJudgeProvider(gateway, judge_roster.search_judges(settings)),
            GoogleSearchProvider(
                settings.GOOGLE_SEARCH_API_KEY,
                settings.GOOGLE_SEARCH_ENGINE_ID,
                settings.GOOGLE_SEARCH_ENDPOINT,
            ),
        ]
        return cls(
            claim_extractor=ClaimExtractor(gateway, judge_roster.claim_extractor_judge(settings)),
            summarizer=TextSummarizer(gateway, judge_roster.summary_judge(settings)),
            retriever=EvidenceRetriever(providers),
            verifier=MultiJudgeVerifier(gateway, judge_roster.verifier_judges(settings)),
            bias_assessor=BiasAssessor(gateway, judge_roster.bias_judges(settings)),
        )

    async def analyze(self, ocr_text: str, job_id: Optional[str] = None) -> AnalysisReport:
        """
        Produce a report for one block of OCR text.

        Raises:
            EmptyInputException: the text holds nothing that could be checked
            AnalysisTimeoutException: the whole run exceeded the analysis timeout
        """
        job_id = job_id or uuid.uuid4().hex
        text = InputValidator.sanitize_text(ocr_text, CLAIM_CONFIG.MAX_INPUT_LENGTH)

        loop = asyncio.get_running_loop()
        start_time = loop.time()
        try:
            report = await asyncio.wait_for(self._run(text, job_id), timeout=self.analysis_timeout)
        except asyncio.TimeoutError:
            logger.error(f"Analysis timed out after {self.analysis_timeout:.0f}s", extra={"job_id": job_id})
            raise AnalysisTimeoutException(job_id, self.analysis_timeout)

        duration = round(loop.time() - start_time, 2)
        logger.info(
            f"Analysis complete: {report.label} ({report.aggregate_trust_score}), "
            f"{len(report.claims)} claim(s) in {duration}s",
            extra={"job_id": job_id}
        )
        return report

    async def _run(self, text: str, job_id: str) -> AnalysisReport:
        claim_texts, text_summary = await asyncio.gather(
            self.claim_extractor.extract(text),
            self.summarizer.summarize(text),
        )
        logger.info(f"Checking {len(claim_texts)} claim(s)", extra={"job_id": job_id})

        today = date.today()
        evidence_per_claim: List[List[Source]] = list(await asyncio.gather(
            *(self.retriever.retrieve(c, self.results_per_claim, today) for c in claim_texts)
        ))
        all_evidence = union_evidence(evidence_per_claim)

        if not all_evidence:
            logger.warning("Quality gate: no sources found for any claim", extra={"job_id": job_id})
            return self._unable_to_verify(job_id, claim_texts, text_summary)

        results = await asyncio.gather(
            *(self.verifier.verify(c, ev) for c, ev in zip(claim_texts, evidence_per_claim)),
            self.bias_assessor.assess(claim_texts, all_evidence),
        )
        consensus_per_claim: List[ConsensusResult] = list(results[:-1])
        bias: BiasSignal = results[-1]

        penalty = bias_penalty(bias)
        claims = []
        for idx, (claim_text, evidence, consensus) in enumerate(
            zip(claim_texts, evidence_per_claim, consensus_per_claim), 1
        ):
            if consensus.all_failed:
                logger.warning(f"Claim c{idx}: no verifier answered", extra={"job_id": job_id})
            elif consensus.failed_judges:
                logger.info(
                    f"Claim c{idx}: verified without {', '.join(consensus.failed_judges)}",
                    extra={"job_id": job_id}
                )
            score = self.calculator.score(
                evidence,
                consensus.model_confidence,
                penalty,
                model_agreement=consensus.model_agreement,
                now=today,
            )
            claims.append(Claim(
                id=f"c{idx}",
                text=claim_text,
                verdict=consensus.final_verdict,
                trust_score=score,
                explanation=consensus.explanation,
                evidence=evidence,
                bias=bias,
                judge_verdicts=consensus.verdicts,
            ))

        aggregate = round_half_up(sum(c.trust_score for c in claims) / len(claims)) if claims else 0
        return AnalysisReport(
            job_id=job_id,
            claims=claims,
            aggregate_trust_score=aggregate,
            label=trust_label(aggregate),
            summary=compose_report_summary(claims, bias, len(all_evidence), text_summary),
            generated_at=datetime.now(timezone.utc),
        )

    def _unable_to_verify(self, job_id: str, claim_texts: List[str], text_summary: str) -> AnalysisReport:
        bias = default_bias(NO_SOURCES_EXPLANATION)
        claims = [
            Claim(
                id=f"c{idx}",
                text=claim_text,
                verdict="unable_to_verify",
                trust_score=0,
                explanation=UNABLE_TO_VERIFY_EXPLANATION,
                evidence=[],
                bias=bias,
                judge_verdicts=[],
            )
            for idx, claim_text in enumerate(claim_texts, 1)
        ]
        return AnalysisReport(
            job_id=job_id,
            claims=claims,
            aggregate_trust_score=0,
            label=UNABLE_TO_VERIFY_LABEL,
            summary=compose_unverifiable_summary(text_summary),
            generated_at=datetime.now(timezone.utc),
        )

    def capabilities(self) -> Dict[str, bool]:
        return {
            "judges": self.verifier.gateway.configured,
            "web_search_judge": any(
                p.configured for p in self.retriever.providers if isinstance(p, WebSearchJudgeProvider)
            ),
            "keyword_search": any(
                p.configured for p in self.retriever.providers if isinstance(p, GoogleSearchProvider)
            ),
        }
