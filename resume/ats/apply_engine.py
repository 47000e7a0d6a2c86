# resume/ats/apply_engine.py
import asyncio
import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, AsyncIterator, Dict, Iterator, Optional

from resume.config import ATSConfig
from resume.errors import ApplyError, StaleImprovementError, ImprovementNotFoundError
from resume.models import ResumeSnapshot
from resume.ats.models import (
    ATSResult, Improvement, Category, AnalysisMode,
    SummaryEdit, PersonalFieldEdit, SkillItemsEdit, BulletAppendEdit,
    BulletReplaceEdit, AdvisoryEdit
)
from resume.ats.scorer import ATSScorer

logger = logging.getLogger(__name__)


# Breakdown facet nudged when an improvement of a category is applied
CATEGORY_SECTIONS = MappingProxyType({
    Category.SUMMARY: 'summary',
    Category.SKILLS: 'skills',
    Category.EXPERIENCE: 'experience',
    Category.BULLET: 'experience',
    Category.KEYWORDS: 'keyword_match',
    Category.CONTACT: 'contact',
    Category.FORMATTING: 'formatting',
})

MAX_SECTION_BOOST = 15


@dataclass
class ApplyOutcome:
    """Resume and result after an apply step"""
    resume: ResumeSnapshot
    result: ATSResult
    applied: bool
    improvement_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'resume': self.resume.to_dict(),
            'result': self.result.to_dict(),
            'applied': self.applied,
            'improvement_id': self.improvement_id,
        }


class ApplyEngine:
    """
    Apply improvements to a resume and keep the score roughly in step

    Applying never recomputes; the score and breakdown are nudged by each
    improvement's impact and flagged as an estimate until ``recompute``.
    Inputs are never mutated: every step returns a new resume and result.
    """

    def __init__(self, scorer: Optional[ATSScorer] = None, config: Optional[ATSConfig] = None):
        self.config = config or ATSConfig()
        self.scorer = scorer or ATSScorer(self.config)

    def apply_one(
        self,
        result: ATSResult,
        improvement: Improvement,
        resume: ResumeSnapshot
    ) -> ApplyOutcome:
        """
        Apply a single improvement

        Args:
            result: Result the improvement belongs to
            improvement: Improvement to apply
            resume: Current resume

        Returns:
            ApplyOutcome; ``applied`` is False when the improvement was
            already applied or could not be applied
        """
        current = result.get_improvement(improvement.id)
        if improvement.applied or (current is not None and current.applied):
            logger.debug(f"{improvement.id} already applied, skipping")
            return ApplyOutcome(resume, result, False, improvement.id)

        try:
            updated = self.apply_edit(improvement.edit, resume)
        except ApplyError as e:
            logger.warning(f"Could not apply {improvement.id} ({improvement.title}): {e}")
            return ApplyOutcome(resume, result, False, improvement.id)

        patched = self.patch_result(result, improvement)
        logger.info(f"Applied {improvement.id}: {improvement.title} (+{improvement.impact}, score {patched.score})")
        return ApplyOutcome(updated, patched, True, improvement.id)

    def apply_improvement(
        self,
        result: ATSResult,
        improvement_id: str,
        resume: ResumeSnapshot
    ) -> ApplyOutcome:
        improvement = result.get_improvement(improvement_id)
        if improvement is None:
            raise ImprovementNotFoundError(improvement_id)
        return self.apply_one(result, improvement, resume)

    def iter_apply_all(self, result: ATSResult, resume: ResumeSnapshot) -> Iterator[ApplyOutcome]:
        """
        Apply every pending improvement in list order

        Yields an outcome after each attempt. Stopping early leaves the
        improvements applied so far in place.
        """
        pending = [imp.id for imp in result.pending_improvements]
        logger.info(f"Applying {len(pending)} pending improvements")

        for improvement_id in pending:
            outcome = self.apply_improvement(result, improvement_id, resume)
            result, resume = outcome.result, outcome.resume
            yield outcome

    def apply_all(self, result: ATSResult, resume: ResumeSnapshot) -> ApplyOutcome:
        outcome = ApplyOutcome(resume, result, False)
        for step in self.iter_apply_all(result, resume):
            outcome = ApplyOutcome(step.resume, step.result, outcome.applied or step.applied)
        logger.info(f"Apply all finished: score {outcome.result.score}, {outcome.result.applied_count} applied")
        return outcome

    async def apply_all_async(
        self,
        result: ATSResult,
        resume: ResumeSnapshot
    ) -> AsyncIterator[ApplyOutcome]:
        """Async variant of ``iter_apply_all`` pausing between applications"""
        first = True
        for outcome in self.iter_apply_all(result, resume):
            if not first and self.config.apply_delay_seconds:
                await asyncio.sleep(self.config.apply_delay_seconds)
            first = False
            yield outcome

    def recompute(
        self,
        result: ATSResult,
        resume: ResumeSnapshot,
        job_text: str = "",
        mode: AnalysisMode = AnalysisMode.WITH_JD
    ) -> ATSResult:
        """
        Rescore the resume, keeping the improvement list and applied flags
        """
        if mode is AnalysisMode.WITHOUT_JD:
            job_text = ""
        card = self.scorer.score_resume(resume, job_text)
        drift = result.score - card.score
        if result.score_is_estimate:
            logger.info(f"Recomputed score {card.score} (estimate was {result.score}, drift {drift:+d})")

        return ATSResult(
            score=card.score,
            breakdown=card.breakdown,
            keywords=card.report,
            improvements=list(result.improvements),
            section_scores=card.section_scores,
            score_is_estimate=False
        )

    def score_drift(
        self,
        result: ATSResult,
        resume: ResumeSnapshot,
        job_text: str = "",
        mode: AnalysisMode = AnalysisMode.WITH_JD
    ) -> int:
        """Patched score minus the score a full recompute gives"""
        return result.score - self.recompute(result, resume, job_text, mode).score

    # ---- edits ----

    def apply_edit(self, edit, resume: ResumeSnapshot) -> ResumeSnapshot:
        """
        Return the resume with one edit applied

        Raises:
            StaleImprovementError: if the edit targets content that moved
            TypeError: for an unknown edit type
        """
        if isinstance(edit, SummaryEdit):
            return resume.with_summary(edit.text)

        if isinstance(edit, PersonalFieldEdit):
            try:
                return resume.with_personal(edit.field_name, edit.value)
            except ValueError as e:
                raise ApplyError(str(e)) from e

        if isinstance(edit, SkillItemsEdit):
            return resume.with_skill_items(edit.items, group_label=edit.group_label)

        if isinstance(edit, BulletAppendEdit):
            exp = self._find_experience(resume, edit.experience_id)
            return resume.with_bullets(exp.id, exp.bullets + list(edit.bullets))

        if isinstance(edit, BulletReplaceEdit):
            exp = self._find_experience(resume, edit.experience_id)
            index = edit.bullet_index
            if not 0 <= index < len(exp.bullets) or exp.bullets[index] != edit.current_text:
                raise StaleImprovementError(
                    f"Bullet {index} of {edit.experience_id} no longer reads {edit.current_text!r}"
                )
            bullets = list(exp.bullets)
            bullets[index] = edit.new_text
            return resume.with_bullets(exp.id, bullets)

        if isinstance(edit, AdvisoryEdit):
            return resume

        raise TypeError(f"Unknown edit type: {type(edit).__name__}")

    def _find_experience(self, resume: ResumeSnapshot, experience_id: str):
        exp = resume.find_experience(experience_id)
        if exp is None:
            raise StaleImprovementError(f"Experience entry {experience_id} not found")
        return exp

    def patch_result(self, result: ATSResult, improvement: Improvement) -> ATSResult:
        """Mark the improvement applied and nudge the score by its impact"""
        improvements = [
            replace(imp, applied=True) if imp.id == improvement.id else imp
            for imp in result.improvements
        ]

        breakdown = result.breakdown
        section = CATEGORY_SECTIONS.get(improvement.category)
        if section:
            breakdown = breakdown.boosted(section, min(MAX_SECTION_BOOST, improvement.impact * 2))

        return replace(
            result,
            score=min(100, result.score + improvement.impact),
            breakdown=breakdown,
            improvements=improvements,
            score_is_estimate=True
        )
