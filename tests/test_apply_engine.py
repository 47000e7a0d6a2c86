import asyncio
import random
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume.config import ATSConfig  # noqa: E402
from resume.errors import ImprovementNotFoundError, StaleImprovementError  # noqa: E402
from resume.models import ResumeSnapshot, PersonalInfo, SkillGroup, ExperienceEntry  # noqa: E402
from resume.ats.analyzer import ATSAnalyzer  # noqa: E402
from resume.ats.apply_engine import ApplyEngine, CATEGORY_SECTIONS  # noqa: E402
from resume.ats.models import (  # noqa: E402
    Category, Priority, Action, Improvement, ATSResult, ScoreBreakdown, KeywordReport,
    BulletReplaceEdit, SummaryEdit
)

JOB_TEXT = "Backend engineer: Python, Docker, Kubernetes and PostgreSQL. Python services at scale."


def sample_resume() -> ResumeSnapshot:
    return ResumeSnapshot(
        personal=PersonalInfo(name="Alex Kim", email="alex@example.com"),
        summary="Engineer.",
        skills=[SkillGroup("Skills", ["Java"])],
        experience=[
            ExperienceEntry(id="exp-1", title="Developer", company="Acme", bullets=[
                "Worked on the billing service",
                "Helped with on-call",
            ]),
            ExperienceEntry(id="exp-2", title="Intern", company="Initech", bullets=[
                "Wrote tests",
            ]),
        ],
    )


def make_analyzer(seed: int = 21) -> ATSAnalyzer:
    return ATSAnalyzer(ATSConfig(apply_delay_seconds=0), rng=random.Random(seed))


class ApplyEngineTests(unittest.TestCase):
    def setUp(self):
        self.analyzer = make_analyzer()
        self.resume = sample_resume()
        self.result = self.analyzer.analyze(self.resume, JOB_TEXT)

    def find(self, result, category, action, **attrs):
        for imp in result.improvements:
            if imp.category is category and imp.action is action and all(
                getattr(imp, key) == value for key, value in attrs.items()
            ):
                return imp
        self.fail(f"No {category.value}/{action.value} improvement with {attrs}")

    def test_apply_summary_patches_score(self):
        imp = self.find(self.result, Category.SUMMARY, Action.REPLACE)
        outcome = self.analyzer.apply_improvement(self.result, imp.id, self.resume)

        self.assertTrue(outcome.applied)
        self.assertEqual(outcome.resume.summary, imp.suggested_value)
        self.assertEqual(outcome.result.score, min(100, self.result.score + imp.impact))
        self.assertEqual(
            outcome.result.breakdown.summary,
            min(100, self.result.breakdown.summary + min(15, imp.impact * 2))
        )
        self.assertTrue(outcome.result.score_is_estimate)
        self.assertTrue(outcome.result.get_improvement(imp.id).applied)

        # inputs untouched
        self.assertEqual(self.resume.summary, "Engineer.")
        self.assertFalse(self.result.get_improvement(imp.id).applied)

    def test_applying_twice_is_applying_once(self):
        imp = self.find(self.result, Category.CONTACT, Action.ADD, title="Add LinkedIn Profile")
        once = self.analyzer.apply_improvement(self.result, imp.id, self.resume)
        twice = self.analyzer.apply_improvement(once.result, imp.id, once.resume)

        self.assertFalse(twice.applied)
        self.assertEqual(twice.result.to_dict(), once.result.to_dict())
        self.assertEqual(twice.resume.to_dict(), once.resume.to_dict())
        self.assertEqual(once.resume.personal.linkedin, "linkedin.com/in/yourprofile")

    def test_replaying_the_same_improvement_object_is_a_no_op(self):
        imp = self.find(self.result, Category.BULLET, Action.ADD, experience_id="exp-2")
        engine = self.analyzer.engine

        once = engine.apply_one(self.result, imp, self.resume)
        # imp itself still reads applied=False; the result is what records it
        self.assertFalse(imp.applied)
        twice = engine.apply_one(once.result, imp, once.resume)

        self.assertTrue(once.applied)
        self.assertFalse(twice.applied)
        self.assertEqual(len(twice.resume.find_experience("exp-2").bullets), 3)
        self.assertEqual(twice.result.score, once.result.score)
        self.assertEqual(twice.result.to_dict(), once.result.to_dict())
        self.assertEqual(twice.resume.to_dict(), once.resume.to_dict())

    def test_category_section_table_is_read_only(self):
        with self.assertRaises(TypeError):
            CATEGORY_SECTIONS[Category.SUMMARY] = 'contact'
        self.assertEqual(CATEGORY_SECTIONS[Category.BULLET], 'experience')

    def test_unknown_improvement_id(self):
        with self.assertRaises(ImprovementNotFoundError) as ctx:
            self.analyzer.apply_improvement(self.result, "imp-999", self.resume)
        self.assertIsInstance(ctx.exception, KeyError)
        self.assertEqual(ctx.exception.improvement_id, "imp-999")

    def test_missing_skills_merge_into_first_group(self):
        imp = self.find(self.result, Category.SKILLS, Action.ADD, priority=Priority.CRITICAL)
        outcome = self.analyzer.apply_improvement(self.result, imp.id, self.resume)
        items = outcome.resume.skills[0].items
        self.assertEqual(items[0], "Java")
        for kw in imp.edit.items:
            self.assertIn(kw, items)

    def test_advisory_improvement_only_marks_applied(self):
        imp = self.find(self.result, Category.SKILLS, Action.ADD, title="Organize Skills into Categories")
        outcome = self.analyzer.apply_improvement(self.result, imp.id, self.resume)
        self.assertTrue(outcome.applied)
        self.assertIs(outcome.resume, self.resume)
        self.assertEqual(outcome.result.score, min(100, self.result.score + imp.impact))

    def test_appended_bullets_land_on_their_role(self):
        imp = self.find(self.result, Category.BULLET, Action.ADD, experience_id="exp-2")
        outcome = self.analyzer.apply_improvement(self.result, imp.id, self.resume)
        bullets = outcome.resume.find_experience("exp-2").bullets
        self.assertEqual(bullets[0], "Wrote tests")
        self.assertEqual(len(bullets), 3)
        self.assertEqual(outcome.resume.find_experience("exp-1").bullets, self.resume.experience[0].bullets)

    def test_apply_all_never_lowers_score(self):
        previous = self.result.score
        last = None
        for outcome in self.analyzer.engine.iter_apply_all(self.result, self.resume):
            self.assertGreaterEqual(outcome.result.score, previous)
            self.assertLessEqual(outcome.result.score, 100)
            previous = outcome.result.score
            last = outcome

        final = self.analyzer.apply_all(self.result, self.resume)
        self.assertEqual(final.result.to_dict(), last.result.to_dict())
        self.assertLessEqual(final.result.score, 100)
        self.assertEqual(final.result.pending_improvements, [
            imp for imp in final.result.improvements if not imp.applied
        ])

    def test_apply_all_skips_applied_entries(self):
        imp = self.find(self.result, Category.SUMMARY, Action.REPLACE)
        first = self.analyzer.apply_improvement(self.result, imp.id, self.resume)
        ids = [o.improvement_id for o in self.analyzer.engine.iter_apply_all(first.result, first.resume)]
        self.assertNotIn(imp.id, ids)

    def test_second_edit_on_rewritten_bullet_is_a_no_op(self):
        verb = self.find(self.result, Category.EXPERIENCE, Action.REPLACE, experience_id="exp-1", bullet_index=0)
        metric = self.find(self.result, Category.EXPERIENCE, Action.ENHANCE, experience_id="exp-1", bullet_index=0)

        first = self.analyzer.apply_improvement(self.result, verb.id, self.resume)
        with self.assertLogs('resume.ats.apply_engine', level='WARNING'):
            second = self.analyzer.apply_improvement(first.result, metric.id, first.resume)

        self.assertFalse(second.applied)
        self.assertFalse(second.result.get_improvement(metric.id).applied)
        self.assertEqual(second.result.score, first.result.score)
        self.assertEqual(second.resume.find_experience("exp-1").bullets[0], verb.suggested_value)

    def test_duplicate_bullets_are_edited_by_position(self):
        resume = ResumeSnapshot(experience=[
            ExperienceEntry(id="exp-1", title="Developer", bullets=[
                "Worked on the billing service",
                "Worked on the billing service",
                "Worked on the billing service",
            ]),
        ])
        result = self.analyzer.analyze(resume, "")
        second = self.find(result, Category.EXPERIENCE, Action.REPLACE, bullet_index=1)

        outcome = self.analyzer.apply_improvement(result, second.id, resume)
        bullets = outcome.resume.experience[0].bullets
        self.assertEqual(bullets[0], "Worked on the billing service")
        self.assertEqual(bullets[1], second.suggested_value)
        self.assertEqual(bullets[2], "Worked on the billing service")

    def test_edit_for_removed_role_is_a_no_op(self):
        imp = self.find(self.result, Category.BULLET, Action.ADD, experience_id="exp-2")
        trimmed = ResumeSnapshot(experience=self.resume.experience[:1])
        with self.assertLogs('resume.ats.apply_engine', level='WARNING'):
            outcome = self.analyzer.apply_improvement(self.result, imp.id, trimmed)
        self.assertFalse(outcome.applied)
        self.assertIs(outcome.resume, trimmed)

    def test_unknown_edit_type(self):
        with self.assertRaises(TypeError):
            ApplyEngine().apply_edit(object(), self.resume)


class RecomputeTests(unittest.TestCase):
    def test_recompute_replaces_estimate_and_keeps_improvements(self):
        analyzer = make_analyzer()
        resume = sample_resume()
        result = analyzer.analyze(resume, JOB_TEXT)
        outcome = analyzer.apply_all(result, resume)

        fresh = analyzer.recompute(outcome.result, outcome.resume, JOB_TEXT)
        self.assertFalse(fresh.score_is_estimate)
        self.assertEqual(
            [(imp.id, imp.applied) for imp in fresh.improvements],
            [(imp.id, imp.applied) for imp in outcome.result.improvements]
        )
        expected = analyzer.analyze(outcome.resume, JOB_TEXT)
        self.assertEqual(fresh.score, expected.score)
        self.assertEqual(fresh.breakdown, expected.breakdown)

        drift = analyzer.engine.score_drift(outcome.result, outcome.resume, JOB_TEXT)
        self.assertEqual(drift, outcome.result.score - fresh.score)

    def test_patched_score_caps_at_hundred(self):
        result = ATSResult(
            score=98,
            breakdown=ScoreBreakdown(summary=95),
            keywords=KeywordReport(),
            improvements=[Improvement(
                id="imp-0", category=Category.SUMMARY, priority=Priority.CRITICAL,
                action=Action.REPLACE, title="Enhance Professional Summary",
                description="", impact=15, edit=SummaryEdit("New summary"),
            )],
        )
        outcome = ApplyEngine().apply_improvement(result, "imp-0", ResumeSnapshot())
        self.assertEqual(outcome.result.score, 100)
        self.assertEqual(outcome.result.breakdown.summary, 100)
        self.assertEqual(outcome.resume.summary, "New summary")


class AsyncApplyTests(unittest.TestCase):
    def test_async_apply_all_matches_sync(self):
        analyzer = make_analyzer()
        resume = sample_resume()
        result = analyzer.analyze(resume, JOB_TEXT)

        async def collect():
            return [outcome async for outcome in analyzer.apply_all_async(result, resume)]

        outcomes = asyncio.run(collect())
        self.assertEqual(len(outcomes), len(result.improvements))
        self.assertEqual(
            outcomes[-1].result.to_dict(),
            analyzer.apply_all(result, resume).result.to_dict()
        )

    def test_stale_edit_target_detected(self):
        engine = ApplyEngine()
        resume = ResumeSnapshot(experience=[ExperienceEntry(id="exp-1", bullets=["Shipped it"])])
        edit = BulletReplaceEdit("exp-1", 0, "Something else", "Rewritten")
        with self.assertRaises(StaleImprovementError):
            engine.apply_edit(edit, resume)


if __name__ == "__main__":
    unittest.main()
