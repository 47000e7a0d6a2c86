# resume/ats/suggestions.py
import re
import random
import logging
from typing import List, Optional

from resume.models import ResumeSnapshot, ExperienceEntry
from resume.ats.vocabulary import (
    STRONG_ACTION_VERBS, WEAK_LEAD_INS, BULLET_TEMPLATES,
    TITLE_CATEGORY_HINTS, TITLE_FROM_SKILLS
)

logger = logging.getLogger(__name__)


WEAK_LEAD_IN_PATTERN = re.compile(
    r'^(?:' + '|'.join(re.escape(lead) for lead in WEAK_LEAD_INS) + r')\s*',
    re.IGNORECASE
)


class SuggestionWriter:
    """
    Rule-based rewrites for summaries, bullets and titles

    All randomness comes from ``rng`` so a seeded ``random.Random`` gives
    reproducible suggestions.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def write_summary(self, resume: ResumeSnapshot, missing_keywords: List[str]) -> str:
        """Synthesize a keyword-bearing summary from title and experience count"""
        title = resume.personal.title or "Professional"
        years = f"{len(resume.experience)}+" if resume.experience else "multiple"
        top_keywords = ", ".join(missing_keywords[:3]) or "relevant technologies"

        return (
            f"Results-driven {title} with {years} years of experience delivering "
            f"high-impact solutions. Expertise in {top_keywords}, with proven ability "
            f"to drive efficiency, reduce costs, and exceed targets. Passionate about "
            f"leveraging technology to solve complex business challenges."
        )

    def extend_summary(self, summary: str, keywords: List[str]) -> str:
        keyword_phrase = ", ".join(keywords)
        closing = f"Skilled in {keyword_phrase} with a track record of delivering results."
        if summary.endswith("."):
            return f"{summary} {closing}"
        return f"{summary}. {closing}"

    def add_action_verb(self, bullet: str) -> str:
        """Drop a weak lead-in and open with a strong verb"""
        verb = self.rng.choice(STRONG_ACTION_VERBS)
        cleaned = WEAK_LEAD_IN_PATTERN.sub("", bullet.strip(), count=1)
        return f"{verb} {cleaned[:1].lower()}{cleaned[1:]}"

    def suggest_metrics(self, bullet: str) -> str:
        """Insert a plausible quantifier based on what the bullet talks about"""
        trimmed = bullet.strip()
        if "team" in trimmed:
            return re.sub(r'team', "cross-functional team of 8+", trimmed, count=1, flags=re.IGNORECASE)
        if "project" in trimmed:
            return re.sub(r'project', "$2M+ project", trimmed, count=1, flags=re.IGNORECASE)
        if any(stem in trimmed for stem in ("improv", "increas", "reduc")):
            return f"{trimmed} by 35%"
        return f"{trimmed}, resulting in 25% improvement in efficiency"

    def add_keyword(self, bullet: str, keyword: str) -> str:
        stripped = bullet.strip()
        if stripped.endswith("."):
            stripped = stripped[:-1]
        return f"{stripped} using {keyword} methodologies."

    def bullet_category(self, title: str) -> str:
        title_lower = title.lower()
        for category, hints in TITLE_CATEGORY_HINTS:
            if any(hint in title_lower for hint in hints):
                return category
        return "general"

    def write_bullets(
        self,
        exp: ExperienceEntry,
        count: int,
        missing_keywords: List[str]
    ) -> List[str]:
        """
        Fill bullet templates for a role

        Args:
            exp: Experience entry the bullets are for
            count: Number of bullets wanted
            missing_keywords: First keyword fills the {technology} slot

        Returns:
            ``count`` bullets, distinct while templates last
        """
        templates = BULLET_TEMPLATES[self.bullet_category(exp.title)]
        used = set()
        bullets = []

        for _ in range(count):
            idx = self.rng.randrange(len(templates))
            while idx in used and len(used) < len(templates):
                idx = (idx + 1) % len(templates)
            used.add(idx)
            bullets.append(self._fill_template(templates[idx], missing_keywords))

        return bullets

    def _fill_template(self, template: str, missing_keywords: List[str]) -> str:
        fills = (
            ("{technology}", missing_keywords[0] if missing_keywords else "cloud"),
            ("{number}", str(self.rng.randint(5, 14))),
            ("{percentage}", str(self.rng.randint(20, 49))),
            ("{amount}", f"{self.rng.randint(100, 599)}K"),
            ("{component}", "backend"),
            ("{tool}", "CI/CD"),
            ("{old_time}", "2 hours"),
            ("{new_time}", "15 minutes"),
        )
        bullet = template
        for placeholder, value in fills:
            bullet = bullet.replace(placeholder, value, 1)
        return bullet

    def suggest_title(self, resume: ResumeSnapshot) -> str:
        """Latest role title, else a title inferred from skills"""
        if resume.experience:
            latest_title = resume.experience[0].title
            if latest_title and len(latest_title) > 3:
                return latest_title

        all_skills = " ".join(resume.skill_items).lower()
        for title, hints in TITLE_FROM_SKILLS:
            if any(hint in all_skills for hint in hints):
                return title

        return "Professional"
