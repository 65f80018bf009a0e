"""Engine configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Query bounds and thresholds. Explicit query arguments always take precedence."""

    model_config = SettingsConfigDict(
        env_prefix="FAMGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    kinship_max_depth: int = 12
    tree_max_depth: int = 13
    event_window_days: int = 5
    longest_lived_limit: int = 20
    longest_lived_min_age: int = 90
    min_parent_age: int = 12


settings = EngineSettings()
