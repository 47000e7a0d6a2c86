# service/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

from resume.config import ATSConfig, get_config


class Settings(BaseSettings):
    """ATS service configuration"""

    # App settings
    app_name: str = "Resume ATS Coach"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = ["http://localhost:3000"]

    # Engine overrides; None keeps the YAML/default value
    apply_delay_seconds: Optional[float] = None
    rng_seed: Optional[int] = None

    model_config = SettingsConfigDict(
        env_prefix="RESUME_ATS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def engine_config(self) -> ATSConfig:
        """Engine config from YAML with the service overrides applied"""
        config = get_config()
        if self.apply_delay_seconds is not None:
            config.apply_delay_seconds = self.apply_delay_seconds
        if self.rng_seed is not None:
            config.rng_seed = self.rng_seed
        return config


settings = Settings()
