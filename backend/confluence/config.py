"""Environment-driven defaults for the convergence aggregator."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from confluence.convergence.models import ConvergenceConfig


class Settings(BaseSettings):
    """Settings loaded from CONFLUENCE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CONFLUENCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Aggregation
    required_convergence: float = 2.0
    use_weights: bool = True
    check_conflicts: bool = True
    conflict_penalty: float = 0.8

    # Fan-out
    max_workers: int = 1

    # Logging
    log_level: str = "INFO"

    def convergence_config(self, **overrides) -> ConvergenceConfig:
        """Aggregator config seeded from these settings."""
        values = {
            "required_convergence": self.required_convergence,
            "use_weights": self.use_weights,
            "check_conflicts": self.check_conflicts,
            "conflict_penalty": self.conflict_penalty,
            "max_workers": self.max_workers,
        }
        values.update(overrides)
        return ConvergenceConfig(**values)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
