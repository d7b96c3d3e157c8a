"""Engine configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from condition_engine.rules.context import CoercionPolicy, ComparisonOption


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CONDITION_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Runtime environment
    env: Literal["dev", "test", "staging", "prod"] = "dev"

    # Logging
    log_level: str = "INFO"

    # String comparison mode used when a caller does not pick one
    comparison_option: ComparisonOption = ComparisonOption.DEFAULT

    # Cross-kind coercion table
    coerce_numeric_strings: bool = True
    coerce_boolean_strings: bool = True
    absent_equals_absent: bool = False

    # Register int/double/string/bool transforms on new engines
    register_builtin_transforms: bool = True

    @property
    def coercion_policy(self) -> CoercionPolicy:
        """Build the coercion policy described by these settings."""
        return CoercionPolicy(
            numeric_strings=self.coerce_numeric_strings,
            boolean_strings=self.coerce_boolean_strings,
            absent_equals_absent=self.absent_equals_absent,
        )

    @property
    def is_dev(self) -> bool:
        """Check if running in development mode."""
        return self.env == "dev"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
