# resume/ats/analyzer.py
import random
import logging
from typing import Any, AsyncIterator, Mapping, Optional, Union

from resume.config import ATSConfig
from resume.errors import AnalysisError
from resume.models import ResumeSnapshot
from resume.ats.models import ATSResult, AnalysisMode
from resume.ats.keyword_extractor import KeywordExtractor
from resume.ats.scorer import ATSScorer
from resume.ats.suggestions import SuggestionWriter
from resume.ats.improvements import ImprovementGenerator
from resume.ats.apply_engine import ApplyEngine, ApplyOutcome

logger = logging.getLogger(__name__)


def parse_mode(mode: Union[str, AnalysisMode, None]) -> AnalysisMode:
    """Accept an AnalysisMode or its wire value; None means with-jd"""
    if mode is None:
        return AnalysisMode.WITH_JD
    if isinstance(mode, AnalysisMode):
        return mode
    try:
        return AnalysisMode(mode)
    except ValueError as e:
        raise AnalysisError(f"Unknown analysis mode: {mode!r}") from e


class ATSAnalyzer:
    """
    Score resumes and manage their improvements

    Wires the keyword extractor, scorer, improvement generator and apply
    engine together behind the operations the service and CLI call.
    """

    def __init__(self, config: Optional[ATSConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or ATSConfig()
        if rng is None:
            rng = random.Random(self.config.rng_seed)

        self.keyword_extractor = KeywordExtractor(self.config)
        self.scorer = ATSScorer(self.config, self.keyword_extractor)
        self.generator = ImprovementGenerator(SuggestionWriter(rng))
        self.engine = ApplyEngine(self.scorer, self.config)

    def analyze(
        self,
        resume: ResumeSnapshot,
        job_text: str = "",
        mode: Union[str, AnalysisMode, None] = AnalysisMode.WITH_JD
    ) -> ATSResult:
        """
        Analyze a resume against an optional job description

        Args:
            resume: Resume snapshot
            job_text: Job description; ignored in without-jd mode
            mode: Analysis mode or its wire value

        Returns:
            ATSResult with score, breakdown, keywords and improvements

        Raises:
            AnalysisError: for an unknown mode
        """
        mode = parse_mode(mode)
        if mode is AnalysisMode.WITHOUT_JD:
            job_text = ""

        logger.info(f"Analyzing {resume!r} ({mode.value})")

        card = self.scorer.score_resume(resume, job_text or "")
        improvements = self.generator.generate(resume, card.report)

        return ATSResult(
            score=card.score,
            breakdown=card.breakdown,
            keywords=card.report,
            improvements=improvements,
            section_scores=card.section_scores
        )

    def analyze_payload(self, payload: Any) -> ATSResult:
        """
        Analyze a JSON-like request body

        Expects ``resume`` plus optional ``job_description`` and ``mode``.

        Raises:
            AnalysisError: if any part of the payload is malformed
        """
        if not isinstance(payload, Mapping):
            raise AnalysisError("Request body must be an object")

        job_text = payload.get('job_description') or ""
        if not isinstance(job_text, str):
            raise AnalysisError("job_description must be a string")

        resume = ResumeSnapshot.from_dict(payload.get('resume'))
        return self.analyze(resume, job_text, payload.get('mode'))

    def apply_improvement(
        self,
        result: ATSResult,
        improvement_id: str,
        resume: ResumeSnapshot
    ) -> ApplyOutcome:
        return self.engine.apply_improvement(result, improvement_id, resume)

    def apply_all(self, result: ATSResult, resume: ResumeSnapshot) -> ApplyOutcome:
        return self.engine.apply_all(result, resume)

    def apply_all_async(self, result: ATSResult, resume: ResumeSnapshot) -> AsyncIterator[ApplyOutcome]:
        return self.engine.apply_all_async(result, resume)

    def recompute(
        self,
        result: ATSResult,
        resume: ResumeSnapshot,
        job_text: str = "",
        mode: Union[str, AnalysisMode, None] = AnalysisMode.WITH_JD
    ) -> ATSResult:
        return self.engine.recompute(result, resume, job_text or "", parse_mode(mode))
