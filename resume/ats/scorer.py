# resume/ats/scorer.py
import math
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Optional

from resume.config import ATSConfig
from resume.models import ResumeSnapshot
from resume.ats.models import ScoreBreakdown, KeywordReport, SectionScore
from resume.ats.keyword_extractor import KeywordExtractor
from resume.ats.text_signals import (
    has_action_verb, has_metrics, round_half_up, clamp_score
)
from resume.ats.vocabulary import TECH_SKILLS, SECTION_LABELS, SECTION_TIPS

logger = logging.getLogger(__name__)


# Weight distribution for overall score; fixed, must sum to 1.00
WEIGHTS = MappingProxyType({
    'keyword_match': 0.25,
    'formatting': 0.15,
    'experience': 0.20,
    'skills': 0.15,
    'education': 0.05,
    'summary': 0.10,
    'contact': 0.10,
})

if not math.isclose(sum(WEIGHTS.values()), 1.0):
    raise RuntimeError(f"ATS score weights must sum to 1.0, got {sum(WEIGHTS.values())}")

# Education is not modelled; every resume gets the same neutral value
EDUCATION_PLACEHOLDER = 75

# Keyword score when there is no job text to match against
GENERAL_MODE_KEYWORD_SCORE = 50


@dataclass
class ScoreCard:
    """Everything the scorer derives from one resume and job text"""
    keywords: List[str]
    report: KeywordReport
    breakdown: ScoreBreakdown
    score: int
    section_scores: List[SectionScore] = field(default_factory=list)


def aggregate_score(breakdown: ScoreBreakdown) -> int:
    """Weighted sum of the breakdown, rounded and clamped to 0-100"""
    total = sum(getattr(breakdown, name) * weight for name, weight in WEIGHTS.items())
    return clamp_score(round_half_up(total))


class ATSScorer:
    """
    Calculate ATS sub-scores and the weighted overall score

    Every ``calculate_*`` method is a pure function of its arguments.
    """

    WEIGHTS = WEIGHTS

    def __init__(
        self,
        config: Optional[ATSConfig] = None,
        keyword_extractor: Optional[KeywordExtractor] = None
    ):
        self.config = config or ATSConfig()
        self.keyword_extractor = keyword_extractor or KeywordExtractor(self.config)

    def score_resume(self, resume: ResumeSnapshot, job_description: str) -> ScoreCard:
        """
        Score resume against job description

        Args:
            resume: Resume snapshot
            job_description: Job text; empty selects general mode

        Returns:
            ScoreCard with keywords, coverage report, breakdown and score
        """
        keywords = self.keyword_extractor.extract_keywords(job_description)
        corpus = resume.corpus()
        report = self.build_keyword_report(corpus, keywords)

        breakdown = ScoreBreakdown(
            keyword_match=self.calculate_keyword_score(corpus, keywords),
            formatting=self.calculate_formatting_score(resume),
            experience=self.calculate_experience_score(resume),
            skills=self.calculate_skills_score(resume, report.missing),
            education=self.calculate_education_score(resume),
            summary=self.calculate_summary_score(resume),
            contact=self.calculate_contact_score(resume),
        )
        score = aggregate_score(breakdown)

        logger.info(f"ATS Score: {score}/100 ({len(keywords)} keywords, {len(report.missing)} missing)")

        return ScoreCard(
            keywords=keywords,
            report=report,
            breakdown=breakdown,
            score=score,
            section_scores=self.build_section_scores(breakdown)
        )

    def build_keyword_report(self, corpus: str, keywords: List[str]) -> KeywordReport:
        found = [kw for kw in keywords if kw in corpus]
        missing = [kw for kw in keywords if kw not in corpus]
        recommended = [skill for skill in TECH_SKILLS if skill not in corpus]

        return KeywordReport(
            found=found[:self.config.max_found_keywords],
            missing=missing[:self.config.max_missing_keywords],
            recommended=recommended[:self.config.max_recommended_skills]
        )

    def calculate_keyword_score(self, corpus: str, keywords: List[str]) -> int:
        """Share of keywords found in the resume corpus (0-100)"""
        if not keywords:
            return GENERAL_MODE_KEYWORD_SCORE

        found = sum(1 for kw in keywords if kw in corpus)
        return clamp_score(round_half_up(found / len(keywords) * 100))

    def calculate_formatting_score(self, resume: ResumeSnapshot) -> int:
        """
        Calculate format/structure score (0-100)

        Scoring:
        - 60 base
        - 3-5 bullets per role on average: +20 (2 or more: +10)
        - Has experience: +10
        - Has skill groups: +10
        """
        score = 60

        avg_bullets = 0.0
        if resume.experience:
            avg_bullets = len(resume.all_bullets) / len(resume.experience)

        if 3 <= avg_bullets <= 5:
            score += 20
        elif avg_bullets >= 2:
            score += 10

        if resume.experience:
            score += 10
        if resume.skills:
            score += 10

        return min(100, score)

    def calculate_experience_score(self, resume: ResumeSnapshot) -> int:
        """
        Calculate experience quality score (0-100)

        Scoring:
        - 30 base
        - Up to 30 for bullets opening with an action verb
        - Up to 30 for quantified bullets
        - 2+ roles: +10
        """
        score = 30
        bullets = resume.all_bullets

        if bullets:
            action_ratio = sum(1 for b in bullets if has_action_verb(b)) / len(bullets)
            metrics_ratio = sum(1 for b in bullets if has_metrics(b)) / len(bullets)
            score += round_half_up(action_ratio * 30)
            score += round_half_up(metrics_ratio * 30)

        if len(resume.experience) >= 2:
            score += 10

        return min(100, score)

    def calculate_skills_score(self, resume: ResumeSnapshot, missing_keywords: List[str]) -> int:
        """
        Calculate skills section score (0-100)

        Scoring:
        - 50 base
        - 2+ groups: +15, 3+ groups: +10 more
        - Up to 25 for missing keywords already covered by skill items
        """
        score = 50

        if len(resume.skills) >= 2:
            score += 15
        if len(resume.skills) >= 3:
            score += 10

        all_skills = [s.lower() for s in resume.skill_items]
        if missing_keywords:
            covered = [
                kw for kw in missing_keywords
                if any(kw.lower() in skill for skill in all_skills)
            ]
            coverage = len(covered) / len(missing_keywords)
        else:
            coverage = 1.0
        score += round_half_up(coverage * 25)

        return min(100, score)

    def calculate_education_score(self, resume: ResumeSnapshot) -> int:
        return EDUCATION_PLACEHOLDER

    def calculate_summary_score(self, resume: ResumeSnapshot) -> int:
        """
        Calculate summary quality score (0-100)

        Length tiers at 1/50/100/150 characters, plus small bonuses for
        figures, years of experience and word count.
        """
        summary = resume.summary or ""
        score = 0

        if len(summary) > 0:
            score += 30
        if len(summary) >= 50:
            score += 20
        if len(summary) >= 100:
            score += 20
        if len(summary) >= 150:
            score += 15

        if any(ch.isdigit() for ch in summary):
            score += 5
        if 'year' in summary.lower():
            score += 5
        if len(summary.split(' ')) >= 20:
            score += 5

        return min(100, score)

    def calculate_contact_score(self, resume: ResumeSnapshot) -> int:
        personal = resume.personal
        score = 0
        if personal.email:
            score += 25
        if personal.phone:
            score += 25
        if personal.linkedin:
            score += 20
        if personal.location:
            score += 15
        if personal.title:
            score += 15
        return min(100, score)

    def build_section_scores(self, breakdown: ScoreBreakdown) -> List[SectionScore]:
        """Label, feedback and improvement tips for every breakdown facet"""
        return [
            SectionScore(
                section=section,
                label=SECTION_LABELS[section],
                score=value,
                feedback=self.feedback_for(value),
                max_potential=100,
                tips=self.tips_for(section, value)
            )
            for section, value in breakdown.items()
        ]

    @staticmethod
    def feedback_for(score: int) -> str:
        if score >= 90:
            return "Excellent"
        elif score >= 70:
            return "Good"
        return "Needs improvement"

    @staticmethod
    def tips_for(section: str, score: int) -> List[str]:
        """Fewer tips as a section approaches full marks"""
        tips = SECTION_TIPS.get(section, ())
        if score >= 90:
            return list(tips[:1])
        if score >= 70:
            return list(tips[:3])
        return list(tips)
