# resume/ats/models.py
from dataclasses import MISSING, dataclass, field, asdict, fields, replace
from typing import List, Dict, Optional, Tuple, Union, Any, Mapping
from enum import Enum

from resume.errors import ResultParseError


class AnalysisMode(Enum):
    """Whether the job text takes part in scoring"""
    WITH_JD = "with-jd"
    WITHOUT_JD = "without-jd"


class Category(Enum):
    """Resume facet an improvement touches"""
    CONTACT = "contact"
    SUMMARY = "summary"
    SKILLS = "skills"
    EXPERIENCE = "experience"
    KEYWORDS = "keywords"
    FORMATTING = "formatting"
    BULLET = "bullet"


class Priority(Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


class Action(Enum):
    ADD = "add"
    REPLACE = "replace"
    ENHANCE = "enhance"
    REMOVE = "remove"


# ---------------------------------------------------------------------------
# Resume edits: one variant per apply rule, each carrying only what it needs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SummaryEdit:
    """Replace the summary text"""
    text: str
    kind = "summary"


@dataclass(frozen=True)
class PersonalFieldEdit:
    """Set one personal field"""
    field_name: str
    value: str
    kind = "personal_field"


@dataclass(frozen=True)
class SkillItemsEdit:
    """Merge items into a skill group (first group when no label is given)"""
    items: Tuple[str, ...]
    group_label: Optional[str] = None
    kind = "skill_items"


@dataclass(frozen=True)
class BulletAppendEdit:
    """Append bullets to an experience entry"""
    experience_id: str
    bullets: Tuple[str, ...]
    kind = "bullet_append"


@dataclass(frozen=True)
class BulletReplaceEdit:
    """Replace the bullet at a known position, if it still reads current_text"""
    experience_id: str
    bullet_index: int
    current_text: str
    new_text: str
    kind = "bullet_replace"


@dataclass(frozen=True)
class AdvisoryEdit:
    """Guidance the user applies by hand; the resume is left as is"""
    hint: str
    kind = "advisory"


ResumeEdit = Union[
    SummaryEdit, PersonalFieldEdit, SkillItemsEdit,
    BulletAppendEdit, BulletReplaceEdit, AdvisoryEdit
]

EDIT_TYPES = {
    cls.kind: cls
    for cls in (
        SummaryEdit, PersonalFieldEdit, SkillItemsEdit,
        BulletAppendEdit, BulletReplaceEdit, AdvisoryEdit
    )
}


def edit_to_dict(edit: ResumeEdit) -> Dict[str, Any]:
    data = {'kind': edit.kind}
    for f in fields(edit):
        value = getattr(edit, f.name)
        data[f.name] = list(value) if isinstance(value, tuple) else value
    return data


def _string_list(value: Any, where: str) -> List[str]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ResultParseError(f"{where} must be a list of strings")
    return list(value)


def _edit_field(field_type: Any, value: Any, where: str) -> Any:
    """Check one wire value against the edit field's declared type"""
    if field_type is int:
        # bool is an int subclass but never a valid index
        if not isinstance(value, int) or isinstance(value, bool):
            raise ResultParseError(f"{where} must be an integer")
        return value
    if field_type == Tuple[str, ...]:
        return tuple(_string_list(value, where))
    if field_type == Optional[str]:
        if value is not None and not isinstance(value, str):
            raise ResultParseError(f"{where} must be a string or null")
        return value
    if not isinstance(value, str):
        raise ResultParseError(f"{where} must be a string")
    return value


def edit_from_dict(data: Any) -> ResumeEdit:
    if not isinstance(data, Mapping):
        raise ResultParseError("edit must be an object")

    edit_cls = EDIT_TYPES.get(data.get('kind'))
    if edit_cls is None:
        raise ResultParseError(f"Unknown edit kind: {data.get('kind')!r}")

    kwargs = {}
    for f in fields(edit_cls):
        if f.name not in data:
            if f.default is not MISSING:
                continue
            raise ResultParseError(f"{edit_cls.kind} edit is missing '{f.name}'")
        kwargs[f.name] = _edit_field(f.type, data[f.name], f"{edit_cls.kind}.{f.name}")

    try:
        return edit_cls(**kwargs)
    except TypeError as e:
        raise ResultParseError(str(e)) from e


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------

@dataclass
class ScoreBreakdown:
    """Per-facet sub-scores, each 0-100"""
    keyword_match: int = 0
    formatting: int = 0
    experience: int = 0
    skills: int = 0
    education: int = 0
    summary: int = 0
    contact: int = 0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            setattr(self, f.name, max(0, min(100, int(value))))

    def boosted(self, section: str, amount: int) -> 'ScoreBreakdown':
        """New breakdown with one section raised, clamped to 100"""
        return replace(self, **{section: min(100, getattr(self, section) + amount)})

    def items(self) -> List[Tuple[str, int]]:
        return [(f.name, getattr(self, f.name)) for f in fields(self)]

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> 'ScoreBreakdown':
        if not isinstance(data, Mapping):
            raise ResultParseError("breakdown must be an object")
        try:
            return cls(**{f.name: int(data.get(f.name, 0)) for f in fields(cls)})
        except (TypeError, ValueError) as e:
            raise ResultParseError(f"Invalid breakdown: {e}") from e


@dataclass
class KeywordReport:
    """Keyword coverage of the resume"""
    found: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    recommended: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> 'KeywordReport':
        if not isinstance(data, Mapping):
            raise ResultParseError("keywords must be an object")
        return cls(
            found=_string_list(data.get('found') or [], "keywords.found"),
            missing=_string_list(data.get('missing') or [], "keywords.missing"),
            recommended=_string_list(data.get('recommended') or [], "keywords.recommended")
        )


@dataclass
class SectionScore:
    """Display entry for one breakdown facet"""
    section: str
    label: str
    score: int
    feedback: str
    max_potential: int = 100
    tips: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> 'SectionScore':
        if not isinstance(data, Mapping):
            raise ResultParseError("section score must be an object")
        try:
            return cls(
                section=data['section'],
                label=data.get('label', data['section']),
                score=int(data['score']),
                feedback=data.get('feedback', ''),
                max_potential=int(data.get('max_potential', 100)),
                tips=list(data.get('tips') or [])
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ResultParseError(f"Invalid section score: {e}") from e


# ---------------------------------------------------------------------------
# Improvements
# ---------------------------------------------------------------------------

@dataclass
class Improvement:
    """One suggested resume edit with its heuristic score impact"""
    id: str
    category: Category
    priority: Priority
    action: Action
    title: str
    description: str
    impact: int                    # expected score gain, always > 0
    edit: ResumeEdit
    current_value: Optional[str] = None
    suggested_value: Optional[str] = None
    applied: bool = False

    def __post_init__(self):
        if self.impact <= 0:
            raise ValueError(f"Improvement impact must be positive, got {self.impact}")

    @property
    def experience_id(self) -> Optional[str]:
        return getattr(self.edit, 'experience_id', None)

    @property
    def bullet_index(self) -> Optional[int]:
        return getattr(self.edit, 'bullet_index', None)

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.priority.rank, -self.impact)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'category': self.category.value,
            'priority': self.priority.value,
            'action': self.action.value,
            'title': self.title,
            'description': self.description,
            'impact': self.impact,
            'current_value': self.current_value,
            'suggested_value': self.suggested_value,
            'applied': self.applied,
            'experience_id': self.experience_id,
            'bullet_index': self.bullet_index,
            'edit': edit_to_dict(self.edit),
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'Improvement':
        if not isinstance(data, Mapping):
            raise ResultParseError("improvement must be an object")
        try:
            return cls(
                id=str(data['id']),
                category=Category(data['category']),
                priority=Priority(data['priority']),
                action=Action(data['action']),
                title=data.get('title', ''),
                description=data.get('description', ''),
                impact=int(data['impact']),
                edit=edit_from_dict(data.get('edit')),
                current_value=data.get('current_value'),
                suggested_value=data.get('suggested_value'),
                applied=bool(data.get('applied', False))
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ResultParseError(f"Invalid improvement: {e}") from e


@dataclass
class ATSResult:
    """Complete ATS analysis of one resume"""
    score: int
    breakdown: ScoreBreakdown
    keywords: KeywordReport
    improvements: List[Improvement] = field(default_factory=list)
    section_scores: List[SectionScore] = field(default_factory=list)

    # True once the apply engine has patched the score without recomputing
    score_is_estimate: bool = False

    def __post_init__(self):
        self.score = max(0, min(100, int(self.score)))

    def get_improvement(self, improvement_id: str) -> Optional[Improvement]:
        for improvement in self.improvements:
            if improvement.id == improvement_id:
                return improvement
        return None

    @property
    def pending_improvements(self) -> List[Improvement]:
        return [imp for imp in self.improvements if not imp.applied]

    @property
    def applied_count(self) -> int:
        return sum(1 for imp in self.improvements if imp.applied)

    @property
    def potential_score(self) -> int:
        """Score if every pending improvement delivered its full impact"""
        return min(100, self.score + sum(imp.impact for imp in self.pending_improvements))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'score': self.score,
            'breakdown': self.breakdown.to_dict(),
            'keywords': self.keywords.to_dict(),
            'improvements': [imp.to_dict() for imp in self.improvements],
            'section_scores': [s.to_dict() for s in self.section_scores],
            'score_is_estimate': self.score_is_estimate,
            'potential_score': self.potential_score,
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'ATSResult':
        """
        Rebuild a result sent back by a client

        Raises:
            ResultParseError: if the payload is not structurally a result
        """
        if not isinstance(data, Mapping):
            raise ResultParseError("Result must be an object")
        try:
            score = int(data['score'])
        except (KeyError, TypeError, ValueError) as e:
            raise ResultParseError(f"Invalid score: {e}") from e

        improvements = data.get('improvements') or []
        section_scores = data.get('section_scores') or []
        if not isinstance(improvements, list) or not isinstance(section_scores, list):
            raise ResultParseError("improvements and section_scores must be lists")

        return cls(
            score=score,
            breakdown=ScoreBreakdown.from_dict(data.get('breakdown')),
            keywords=KeywordReport.from_dict(data.get('keywords') or {}),
            improvements=[Improvement.from_dict(imp) for imp in improvements],
            section_scores=[SectionScore.from_dict(s) for s in section_scores],
            score_is_estimate=bool(data.get('score_is_estimate', False))
        )
