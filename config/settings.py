"""Application configuration and settings management."""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Storage (":memory:" keeps everything in-process)
    database_path: str = "data/talentflow.db"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Simulated network latency
    latency_enabled: bool = True
    latency_scale: float = 1.0  # multiplier applied to every endpoint delay
    request_timeout_seconds: Optional[float] = None

    # Randomized failure rates per operation class
    create_job_failure_rate: float = 0.1
    update_job_failure_rate: float = 0.1
    reorder_job_failure_rate: float = 0.2
    create_candidate_failure_rate: float = 0.1
    update_candidate_failure_rate: float = 0.1
    random_seed: Optional[int] = None

    # Listing defaults
    default_page_size: int = 10
    candidate_page_size: int = 1000

    # Genesis timeline entries are backdated by this many minutes
    genesis_offset_minutes: int = 60

    @property
    def failure_rates(self) -> dict:
        """Failure probability keyed by endpoint name."""
        return {
            "create_job": self.create_job_failure_rate,
            "update_job": self.update_job_failure_rate,
            "reorder_job": self.reorder_job_failure_rate,
            "create_candidate": self.create_candidate_failure_rate,
            "update_candidate": self.update_candidate_failure_rate,
        }


# Global settings instance
settings = Settings()
