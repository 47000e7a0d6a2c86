# resume/ats/text_signals.py
"""
Pattern checks shared by the scorers and the improvement generator
"""

import math
import re

from resume.ats.vocabulary import ACTION_VERB_PREFIXES, METRIC_UNITS


QUANTIFIER_PATTERN = re.compile(
    r'\d+%|\$[\d,]+|\d+\+|\d+x|\d+ (?:' + '|'.join(METRIC_UNITS) + r')',
    re.IGNORECASE
)

# A standalone figure ("team of 5", "3 services") also quantifies a bullet
BARE_NUMBER_PATTERN = re.compile(r'\d')


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive scores"""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, int(value)))


def first_word(text: str) -> str:
    words = text.split()
    return words[0].lower() if words else ""


def has_action_verb(bullet: str) -> bool:
    """Does the bullet open with a recognized action verb?"""
    word = first_word(bullet)
    if not word:
        return False
    return any(word.startswith(prefix) for prefix in ACTION_VERB_PREFIXES)


def has_metrics(bullet: str) -> bool:
    """Does the bullet contain a quantifying figure?"""
    return bool(QUANTIFIER_PATTERN.search(bullet) or BARE_NUMBER_PATTERN.search(bullet))
