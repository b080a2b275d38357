from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from splitstats.experiments.bayesian import CredibleIntervalMethod

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "splitstats"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Winner policy
    MINIMUM_SAMPLE_SIZE: int = Field(100, ge=0)
    CONFIDENCE_THRESHOLD: float = Field(95.0, gt=0, le=100)

    # Sample size planning
    MINIMUM_DETECTABLE_EFFECT: float = 0.10  # relative, 0.10 = +10%
    ALPHA: float = Field(0.05, gt=0, lt=1)
    POWER: float = Field(0.80, gt=0, lt=1)
    DAILY_TRAFFIC_PER_VARIANT: int = Field(1000, ge=1)

    # Bayesian
    PRIOR_ALPHA: float = Field(1.0, gt=0)
    PRIOR_BETA: float = Field(1.0, gt=0)
    CREDIBLE_INTERVAL_METHOD: CredibleIntervalMethod = CredibleIntervalMethod.NORMAL

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("MINIMUM_DETECTABLE_EFFECT")
    @classmethod
    def check_effect(cls, v):
        if v == 0 or v <= -1:
            raise ValueError("MINIMUM_DETECTABLE_EFFECT must be non-zero and greater than -1")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SPLITSTATS_",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
