"""Configuration and settings management using pydantic-settings."""
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable loading."""

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_DESIGNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Core settings
    env: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    # Execution / automations service
    execution_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the simulation and automations service",
    )
    simulate_path: str = Field(default="/simulate", description="Simulation endpoint path")
    automations_path: str = Field(
        default="/automations",
        description="Automations catalog endpoint path",
    )
    request_timeout_s: float = Field(
        default=10.0,
        description="Timeout for collaborator HTTP calls in seconds",
    )

    # Editor behaviour
    history_max: int = Field(default=50, description="Maximum undo history depth")
    max_graph_nodes: int = Field(
        default=10_000,
        description="Node-count ceiling for cycle detection",
    )
    export_prefix: str = Field(default="workflow", description="Export file name prefix")

    # Auto-layout defaults
    layout_direction: Literal["TB", "BT", "LR", "RL"] = Field(
        default="TB",
        description="Default auto-layout direction",
    )
    layout_rank_sep: float = Field(default=80, description="Separation between ranks")
    layout_node_sep: float = Field(default=50, description="Separation between nodes in a rank")

    @field_validator("history_max", "max_graph_nodes")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate that limits are positive."""
        if v <= 0:
            raise ValueError("limit must be positive")
        return v

    @field_validator("request_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate that the request timeout is positive."""
        if v <= 0:
            raise ValueError("request_timeout_s must be positive")
        return v


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
