# resume/models.py
from dataclasses import dataclass, field, asdict, replace
from typing import Optional, List, Dict, Any, Iterable, Mapping

from resume.errors import ResumeParseError


PERSONAL_FIELDS = ('name', 'title', 'email', 'phone', 'location', 'linkedin')


def _text(value: Any, where: str) -> str:
    """Coerce an optional string field, rejecting non-string values"""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ResumeParseError(f"{where} must be a string, got {type(value).__name__}")
    return value


def _string_list(value: Any, where: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ResumeParseError(f"{where} must be a list")
    return [_text(item, f"{where}[{i}]") for i, item in enumerate(value)]


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ResumeParseError(f"{where} must be an object")
    return value


@dataclass
class PersonalInfo:
    """Personal information"""
    name: str = ""
    title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> 'PersonalInfo':
        data = _mapping(data, 'personal')
        return cls(**{
            name: _text(data.get(name), f"personal.{name}")
            for name in PERSONAL_FIELDS
        })


@dataclass
class SkillGroup:
    """Labelled group of skill items"""
    label: str
    items: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'label': self.label, 'items': list(self.items)}

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> 'SkillGroup':
        where = f"skills[{index}]"
        data = _mapping(data, where)
        return cls(
            label=_text(data.get('label'), f"{where}.label"),
            items=_string_list(data.get('items'), f"{where}.items")
        )


@dataclass
class ExperienceEntry:
    """Work experience entry"""
    id: str
    title: str = ""
    company: str = ""
    start_date: str = ""
    end_date: str = ""
    location: str = ""
    bullets: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Title, company and bullets as one string"""
        return ' '.join([self.title, self.company, *self.bullets])

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['bullets'] = list(self.bullets)
        return data

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> 'ExperienceEntry':
        where = f"experience[{index}]"
        data = _mapping(data, where)

        # Accept the camelCase date keys used by browser clients
        start = data.get('start_date', data.get('startDate'))
        end = data.get('end_date', data.get('endDate'))

        return cls(
            id=_text(data.get('id'), f"{where}.id") or f"exp-{index + 1}",
            title=_text(data.get('title'), f"{where}.title"),
            company=_text(data.get('company'), f"{where}.company"),
            start_date=_text(start, f"{where}.start_date"),
            end_date=_text(end, f"{where}.end_date"),
            location=_text(data.get('location'), f"{where}.location"),
            bullets=_string_list(data.get('bullets'), f"{where}.bullets")
        )


@dataclass
class ResumeSnapshot:
    """
    Structured resume as read by the ATS engine

    The engine never mutates a snapshot in place. The ``with_*`` helpers
    return a new snapshot that shares every sub-object they do not touch.
    """
    personal: PersonalInfo = field(default_factory=PersonalInfo)
    summary: str = ""
    skills: List[SkillGroup] = field(default_factory=list)
    experience: List[ExperienceEntry] = field(default_factory=list)

    @property
    def all_bullets(self) -> List[str]:
        bullets = []
        for exp in self.experience:
            bullets.extend(exp.bullets)
        return bullets

    @property
    def skill_items(self) -> List[str]:
        items = []
        for group in self.skills:
            items.extend(group.items)
        return items

    def find_experience(self, experience_id: str) -> Optional[ExperienceEntry]:
        for exp in self.experience:
            if exp.id == experience_id:
                return exp
        return None

    def corpus(self) -> str:
        """Lower-cased text the keyword scorer searches"""
        parts = [self.summary]
        parts.extend(self.skill_items)
        for exp in self.experience:
            parts.extend([exp.title, exp.company, *exp.bullets])
        return ' '.join(parts).lower()

    # ---- copy-on-write updates ----

    def with_summary(self, summary: str) -> 'ResumeSnapshot':
        return replace(self, summary=summary)

    def with_personal(self, field_name: str, value: str) -> 'ResumeSnapshot':
        if field_name not in PERSONAL_FIELDS:
            raise ValueError(f"Unknown personal field: {field_name}")
        return replace(self, personal=replace(self.personal, **{field_name: value}))

    def with_skill_items(
        self,
        items: Iterable[str],
        group_label: Optional[str] = None,
        default_label: str = "Key Skills"
    ) -> 'ResumeSnapshot':
        """
        Merge skill items into a group

        With ``group_label`` the items go to the group carrying that label
        (created when absent). Without it they go to the first group, or to a
        new ``default_label`` group when the resume has none. Existing items
        are kept and duplicates dropped.
        """
        items = list(items)
        groups = list(self.skills)

        if group_label is not None:
            target = next(
                (i for i, g in enumerate(groups) if g.label.lower() == group_label.lower()),
                None
            )
            label = group_label
        else:
            target = 0 if groups else None
            label = default_label

        if target is None:
            groups.append(SkillGroup(label=label, items=_dedupe(items)))
        else:
            group = groups[target]
            groups[target] = replace(group, items=_dedupe(group.items + items))

        return replace(self, skills=groups)

    def with_bullets(self, experience_id: str, bullets: List[str]) -> 'ResumeSnapshot':
        """Replace the bullet list of one experience entry"""
        experience = []
        found = False
        for exp in self.experience:
            if exp.id == experience_id and not found:
                exp = replace(exp, bullets=list(bullets))
                found = True
            experience.append(exp)

        if not found:
            raise KeyError(experience_id)
        return replace(self, experience=experience)

    # ---- serialization ----

    def to_dict(self) -> Dict[str, Any]:
        return {
            'personal': self.personal.to_dict(),
            'summary': self.summary,
            'skills': [g.to_dict() for g in self.skills],
            'experience': [e.to_dict() for e in self.experience],
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'ResumeSnapshot':
        """
        Build a snapshot from a JSON-like mapping

        Raises:
            ResumeParseError: if the payload is not structurally a resume
        """
        if not isinstance(data, Mapping):
            raise ResumeParseError("Resume must be an object")

        skills = data.get('skills')
        experience = data.get('experience')
        if skills is not None and not isinstance(skills, list):
            raise ResumeParseError("skills must be a list")
        if experience is not None and not isinstance(experience, list):
            raise ResumeParseError("experience must be a list")

        return cls(
            personal=PersonalInfo.from_dict(data.get('personal')),
            summary=_text(data.get('summary'), 'summary'),
            skills=[SkillGroup.from_dict(g, i) for i, g in enumerate(skills or [])],
            experience=[ExperienceEntry.from_dict(e, i) for i, e in enumerate(experience or [])]
        )

    def __repr__(self):
        return (
            f"<ResumeSnapshot: {self.personal.name or 'unnamed'} | "
            f"{len(self.experience)} roles | {len(self.all_bullets)} bullets>"
        )


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    unique = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique
