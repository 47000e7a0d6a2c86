# resume/config.py
import os
import logging
from dataclasses import dataclass, fields
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass
class ATSConfig:
    """Tunable limits for keyword extraction, reporting and apply pacing"""

    # Keyword extraction
    min_token_length: int = 4          # shorter tokens are discarded
    frequency_keywords: int = 40       # top-N tokens by frequency
    max_keywords: int = 50             # cap after the vocabulary union

    # Keyword report
    max_found_keywords: int = 30
    max_missing_keywords: int = 15
    max_recommended_skills: int = 10

    # Apply engine
    apply_delay_seconds: float = 0.2   # pause between async applications

    # Bullet templates; None means an unseeded random source
    rng_seed: Optional[int] = None

    def __post_init__(self):
        if self.min_token_length < 1:
            raise ValueError("min_token_length must be positive")
        if self.frequency_keywords < 0 or self.max_keywords < 0:
            raise ValueError("keyword limits must not be negative")
        if self.apply_delay_seconds < 0:
            raise ValueError("apply_delay_seconds must not be negative")

    @classmethod
    def from_yaml(cls, path: str) -> 'ATSConfig':
        """Load configuration from the ``ats`` section of a YAML file"""
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        section = data.get('ats', {}) or {}
        known = {f.name for f in fields(cls)}
        unknown = set(section) - known
        if unknown:
            logger.warning(f"Ignoring unknown ATS config keys: {', '.join(sorted(unknown))}")

        return cls(**{k: v for k, v in section.items() if k in known})


def get_config() -> ATSConfig:
    """Get ATS engine configuration"""
    config_path = os.getenv('RESUME_ATS_CONFIG', 'config/ats.yaml')

    if os.path.exists(config_path):
        logger.debug(f"Loading ATS config from {config_path}")
        return ATSConfig.from_yaml(config_path)
    return ATSConfig()
