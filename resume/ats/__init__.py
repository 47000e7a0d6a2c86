# resume/ats/__init__.py
"""
ATS (Applicant Tracking System) scoring and improvement module
"""

from resume.ats.models import (
    AnalysisMode, Category, Priority, Action,
    SummaryEdit, PersonalFieldEdit, SkillItemsEdit,
    BulletAppendEdit, BulletReplaceEdit, AdvisoryEdit,
    ScoreBreakdown, KeywordReport, SectionScore, Improvement, ATSResult
)
from resume.ats.keyword_extractor import KeywordExtractor
from resume.ats.scorer import ATSScorer, ScoreCard, aggregate_score
from resume.ats.suggestions import SuggestionWriter
from resume.ats.improvements import ImprovementGenerator
from resume.ats.apply_engine import ApplyEngine, ApplyOutcome
from resume.ats.analyzer import ATSAnalyzer

__all__ = [
    'AnalysisMode',
    'Category',
    'Priority',
    'Action',
    'SummaryEdit',
    'PersonalFieldEdit',
    'SkillItemsEdit',
    'BulletAppendEdit',
    'BulletReplaceEdit',
    'AdvisoryEdit',
    'ScoreBreakdown',
    'KeywordReport',
    'SectionScore',
    'Improvement',
    'ATSResult',
    'KeywordExtractor',
    'ATSScorer',
    'ScoreCard',
    'aggregate_score',
    'SuggestionWriter',
    'ImprovementGenerator',
    'ApplyEngine',
    'ApplyOutcome',
    'ATSAnalyzer',
]
