# resume/ats/improvements.py
import random
import logging
from typing import List, Optional

from resume.models import ResumeSnapshot, ExperienceEntry
from resume.ats.models import (
    Improvement, KeywordReport, Category, Priority, Action,
    SummaryEdit, PersonalFieldEdit, SkillItemsEdit, BulletAppendEdit,
    BulletReplaceEdit, AdvisoryEdit
)
from resume.ats.suggestions import SuggestionWriter
from resume.ats.text_signals import has_action_verb, has_metrics
from resume.ats.vocabulary import RECOMMENDED_SKILLS, SKILL_CATEGORY_LAYOUT

logger = logging.getLogger(__name__)


LINKEDIN_PLACEHOLDER = "linkedin.com/in/yourprofile"
MIN_SUMMARY_LENGTH = 100
MIN_TITLE_LENGTH = 5
MIN_BULLETS_PER_ROLE = 3
TECHNICAL_GROUP_LABEL = "Technical Skills"


class ImprovementGenerator:
    """
    Rule engine producing prioritized, auto-appliable resume improvements

    Each ``_rule_*`` method inspects the resume and the keyword gap on its
    own and appends zero or more improvements to the list it is handed.
    Ids are numbered per ``generate`` call in rule order; the returned list
    is sorted by priority, then by impact.
    """

    def __init__(
        self,
        writer: Optional[SuggestionWriter] = None,
        rng: Optional[random.Random] = None
    ):
        self.writer = writer or SuggestionWriter(rng)

    def generate(self, resume: ResumeSnapshot, keywords: KeywordReport) -> List[Improvement]:
        """
        Generate improvements for a resume

        Args:
            resume: Resume snapshot
            keywords: Keyword report from the scorer

        Returns:
            Improvements sorted critical-first, higher impact first
        """
        improvements: List[Improvement] = []
        missing = list(keywords.missing)

        self._rule_linkedin(improvements, resume)
        self._rule_summary(improvements, resume, missing)
        self._rule_missing_skills(improvements, resume, missing)
        self._rule_skill_groups(improvements, resume)
        for exp in resume.experience:
            self._rule_bullets(improvements, exp)
            self._rule_experience_keywords(improvements, exp, missing)
        for exp in resume.experience:
            self._rule_bullet_count(improvements, exp, missing)
        self._rule_title(improvements, resume)
        self._rule_technical_section(improvements, resume, missing)
        self._rule_quantification(improvements, resume)

        improvements.sort(key=lambda imp: imp.sort_key)

        logger.info(f"Generated {len(improvements)} improvements")
        return improvements

    def _add(self, improvements: List[Improvement], **kwargs) -> None:
        improvement = Improvement(id=f"imp-{len(improvements)}", **kwargs)
        logger.debug(f"{improvement.id}: {improvement.category.value}/{improvement.action.value} {improvement.title}")
        improvements.append(improvement)

    # ---- contact ----

    def _rule_linkedin(self, improvements: List[Improvement], resume: ResumeSnapshot) -> None:
        if resume.personal.linkedin:
            return
        self._add(
            improvements,
            category=Category.CONTACT,
            priority=Priority.HIGH,
            action=Action.ADD,
            title="Add LinkedIn Profile",
            description="LinkedIn profiles are expected by most recruiters",
            impact=5,
            edit=PersonalFieldEdit('linkedin', LINKEDIN_PLACEHOLDER),
            suggested_value=LINKEDIN_PLACEHOLDER
        )

    def _rule_title(self, improvements: List[Improvement], resume: ResumeSnapshot) -> None:
        if resume.personal.title and len(resume.personal.title) >= MIN_TITLE_LENGTH:
            return
        title = self.writer.suggest_title(resume)
        self._add(
            improvements,
            category=Category.CONTACT,
            priority=Priority.HIGH,
            action=Action.ADD,
            title="Add Professional Title",
            description="A clear job title helps ATS categorize your resume correctly",
            impact=8,
            edit=PersonalFieldEdit('title', title),
            current_value=resume.personal.title or None,
            suggested_value=title
        )

    # ---- summary ----

    def _rule_summary(
        self,
        improvements: List[Improvement],
        resume: ResumeSnapshot,
        missing: List[str]
    ) -> None:
        summary = resume.summary

        if not summary or len(summary) < MIN_SUMMARY_LENGTH:
            suggested = self.writer.write_summary(resume, missing)
            self._add(
                improvements,
                category=Category.SUMMARY,
                priority=Priority.CRITICAL,
                action=Action.REPLACE,
                title="Enhance Professional Summary",
                description="A strong summary with keywords raises the keyword match",
                impact=15,
                edit=SummaryEdit(suggested),
                current_value=summary or "No summary",
                suggested_value=suggested
            )
        elif len(missing) > 3:
            top = missing[:3]
            suggested = self.writer.extend_summary(summary, top)
            self._add(
                improvements,
                category=Category.SUMMARY,
                priority=Priority.HIGH,
                action=Action.ENHANCE,
                title="Add Missing Keywords to Summary",
                description=f"Include: {', '.join(top)}",
                impact=10,
                edit=SummaryEdit(suggested),
                current_value=summary,
                suggested_value=suggested
            )

    # ---- skills ----

    def _rule_missing_skills(
        self,
        improvements: List[Improvement],
        resume: ResumeSnapshot,
        missing: List[str]
    ) -> None:
        all_skills = [s.lower() for s in resume.skill_items]
        uncovered = [
            kw for kw in missing
            if not any(kw.lower() in skill for skill in all_skills)
        ][:5]

        if not uncovered:
            return
        self._add(
            improvements,
            category=Category.SKILLS,
            priority=Priority.CRITICAL,
            action=Action.ADD,
            title="Add Missing Skill Keywords",
            description="These skills from the job description are missing",
            impact=12,
            edit=SkillItemsEdit(tuple(uncovered)),
            suggested_value=", ".join(uncovered)
        )

    def _rule_skill_groups(self, improvements: List[Improvement], resume: ResumeSnapshot) -> None:
        if len(resume.skills) >= 3:
            return
        layout = ", ".join(SKILL_CATEGORY_LAYOUT)
        self._add(
            improvements,
            category=Category.SKILLS,
            priority=Priority.MEDIUM,
            action=Action.ADD,
            title="Organize Skills into Categories",
            description="Categorized skills are easier for ATS to parse",
            impact=8,
            edit=AdvisoryEdit(f"Group your skills as: {layout}"),
            suggested_value=layout
        )

    def _rule_technical_section(
        self,
        improvements: List[Improvement],
        resume: ResumeSnapshot,
        missing: List[str]
    ) -> None:
        labels = [group.label.lower() for group in resume.skills]
        if any("technical" in label or "programming" in label for label in labels):
            return
        if not missing:
            return

        recommended = {s.lower() for s in RECOMMENDED_SKILLS["technical"]}
        tech_skills = [kw for kw in missing if kw.lower() in recommended]

        if tech_skills:
            edit = SkillItemsEdit(tuple(tech_skills), group_label=TECHNICAL_GROUP_LABEL)
            suggested = ", ".join(tech_skills)
        else:
            suggested = "Add relevant technical skills"
            edit = AdvisoryEdit(suggested)

        self._add(
            improvements,
            category=Category.SKILLS,
            priority=Priority.MEDIUM,
            action=Action.ADD,
            title="Add Technical Skills Section",
            description="Dedicated technical skills section improves ATS parsing",
            impact=6,
            edit=edit,
            suggested_value=suggested
        )

    # ---- experience ----

    def _rule_bullets(self, improvements: List[Improvement], exp: ExperienceEntry) -> None:
        """Weak openings and missing figures, one improvement per bullet"""
        for index, bullet in enumerate(exp.bullets):
            if not has_action_verb(bullet):
                suggested = self.writer.add_action_verb(bullet)
                self._add(
                    improvements,
                    category=Category.EXPERIENCE,
                    priority=Priority.HIGH,
                    action=Action.REPLACE,
                    title=f'Strengthen Bullet {index + 1} in "{exp.title}"',
                    description="Start with a strong action verb for better ATS parsing",
                    impact=3,
                    edit=BulletReplaceEdit(exp.id, index, bullet, suggested),
                    current_value=bullet,
                    suggested_value=suggested
                )

            if not has_metrics(bullet):
                suggested = self.writer.suggest_metrics(bullet)
                self._add(
                    improvements,
                    category=Category.EXPERIENCE,
                    priority=Priority.HIGH,
                    action=Action.ENHANCE,
                    title=f'Add Metrics to Bullet in "{exp.title}"',
                    description="Quantified achievements rank higher in ATS",
                    impact=4,
                    edit=BulletReplaceEdit(exp.id, index, bullet, suggested),
                    current_value=bullet,
                    suggested_value=suggested
                )

    def _rule_experience_keywords(
        self,
        improvements: List[Improvement],
        exp: ExperienceEntry,
        missing: List[str]
    ) -> None:
        if not exp.bullets:
            return
        exp_text = exp.text.lower()
        absent = [kw for kw in missing if kw.lower() not in exp_text][:2]
        if not absent:
            return

        first = exp.bullets[0]
        suggested = self.writer.add_keyword(first, absent[0])
        self._add(
            improvements,
            category=Category.KEYWORDS,
            priority=Priority.HIGH,
            action=Action.ENHANCE,
            title=f'Add Keywords to "{exp.title}" Experience',
            description=f"Incorporate: {', '.join(absent)}",
            impact=6,
            edit=BulletReplaceEdit(exp.id, 0, first, suggested),
            current_value=first,
            suggested_value=suggested
        )

    def _rule_bullet_count(
        self,
        improvements: List[Improvement],
        exp: ExperienceEntry,
        missing: List[str]
    ) -> None:
        if len(exp.bullets) >= MIN_BULLETS_PER_ROLE:
            return
        needed = MIN_BULLETS_PER_ROLE - len(exp.bullets)
        bullets = self.writer.write_bullets(exp, needed, missing)
        self._add(
            improvements,
            category=Category.BULLET,
            priority=Priority.HIGH,
            action=Action.ADD,
            title=f'Add {needed} More Bullet{"s" if needed > 1 else ""} to "{exp.title}"',
            description="3-5 bullets per role is optimal. Suggested bullets based on your role:",
            impact=5 * needed,
            edit=BulletAppendEdit(exp.id, tuple(bullets)),
            suggested_value="\n".join(bullets)
        )

    # ---- formatting ----

    def _rule_quantification(self, improvements: List[Improvement], resume: ResumeSnapshot) -> None:
        unquantified = sum(1 for b in resume.all_bullets if not has_metrics(b))
        if unquantified <= 3:
            return
        hint = "Add specific numbers: percentages, dollar amounts, team sizes, timeframes"
        self._add(
            improvements,
            category=Category.FORMATTING,
            priority=Priority.HIGH,
            action=Action.ENHANCE,
            title="Quantify More Achievements",
            description=f"{unquantified} bullets lack metrics",
            impact=10,
            edit=AdvisoryEdit(hint),
            suggested_value=hint
        )
