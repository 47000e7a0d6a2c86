# resume/ats/keyword_extractor.py
import re
import logging
from typing import List, Optional
from collections import Counter

from resume.config import ATSConfig
from resume.ats.vocabulary import TECH_SKILLS

logger = logging.getLogger(__name__)


TOKEN_SPLIT_PATTERN = re.compile(r'[^a-z0-9+.#/]+')


class KeywordExtractor:
    """
    Extract keywords from job descriptions

    Frequency-ranked tokens are unioned with hits against the curated
    technical vocabulary. No stemming or synonym resolution is done.
    """

    def __init__(self, config: Optional[ATSConfig] = None):
        self.config = config or ATSConfig()

    def extract_keywords(self, job_description: str) -> List[str]:
        """
        Extract ranked keywords from job description

        Args:
            job_description: Full JD text; empty means general mode

        Returns:
            Lower-cased keywords in first-occurrence order, capped at
            ``config.max_keywords``
        """
        if not job_description or not job_description.strip():
            return []

        text_lower = job_description.lower()

        frequent = self._extract_frequent_tokens(text_lower)
        technical = self._extract_technical_skills(text_lower)

        keywords = list(dict.fromkeys(frequent + technical))[:self.config.max_keywords]

        logger.info(f"Extracted {len(keywords)} unique keywords")
        logger.debug(f"{len(frequent)} frequent tokens, {len(technical)} vocabulary hits")
        return keywords

    def tokenize(self, text_lower: str) -> List[str]:
        """Split on anything outside [a-z0-9+.#/] and drop short tokens"""
        return [
            token for token in TOKEN_SPLIT_PATTERN.split(text_lower)
            if len(token) >= self.config.min_token_length
        ]

    def _extract_frequent_tokens(self, text_lower: str) -> List[str]:
        # most_common keeps first-seen order among equal counts
        counts = Counter(self.tokenize(text_lower))
        return [token for token, _ in counts.most_common(self.config.frequency_keywords)]

    def _extract_technical_skills(self, text_lower: str) -> List[str]:
        return [skill for skill in TECH_SKILLS if skill in text_lower]
