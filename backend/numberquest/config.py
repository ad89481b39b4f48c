from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    workers: int = 1
    debug: bool = False

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Logging
    log_level: str = "INFO"

    # Session
    initial_difficulty: int = 1
    difficulty_authority: Literal["engine", "generator"] = "engine"

    # Problem generator
    recent_problems_limit: int = 10
    max_operand_attempts: int = 20
    generator_history_limit: int = 20
    generator_sample_size: int = 5
    generator_increase_accuracy: float = 0.8
    generator_decrease_accuracy: float = 0.5
    generator_target_time_ratio: float = 0.7
    multiplication_max_first: int = 12
    multiplication_max_second: int = 10

    # Operation mix. Weights and unlock levels are independent tables.
    addition_weight: float = Field(default=0.7, ge=0)
    subtraction_weight: float = Field(default=0.2, ge=0)
    multiplication_weight: float = Field(default=0.1, ge=0)
    addition_min_level: int = 1
    subtraction_min_level: int = 2
    multiplication_min_level: int = 5

    # Difficulty engine
    engine_history_limit: int = 100
    performance_window_size: int = 10
    minimum_sample_size: int = 5
    streak_threshold: int = 3
    target_accuracy: float = 0.75
    target_response_time: float = 5.0
    increase_threshold: float = 0.85
    decrease_threshold: float = 0.60
    fast_response_threshold: float = 3.0
    slow_response_threshold: float = 8.0
    fatigue_sample_size: int = 5
    fatigue_factor: float = 1.5

    # Skill progression
    mastery_accuracy: float = 0.85
    mastery_min_attempts: int = 20
    struggle_accuracy: float = 0.60
    struggle_min_attempts: int = 10

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        env_prefix = ""


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
