"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Topology engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TOPOLOGY_",
        case_sensitive=False,
        extra="ignore",
    )

    # Canvas defaults
    default_width: int = 400
    default_height: int = 300

    # Above this node count the relationship matrix replaces the spatial view
    matrix_threshold: int = Field(
        default=50,
        description="Graphs with more nodes than this render as a relationship matrix"
    )

    # Force Parameters
    charge_strength: float = Field(
        default=-300.0,
        description="Many-body strength, negative values repel"
    )
    link_distance: float = 100.0
    cluster_strength: float = Field(
        default=0.15,
        description="Pull of each node towards its entity-type anchor"
    )
    drag_alpha_target: float = Field(
        default=0.35,
        description="Simulation energy kept while a node is dragged"
    )
    velocity_decay: float = 0.4
    alpha_min: float = 0.001
    jiggle_seed: int = 42

    # Zoom Parameters
    min_scale: float = 0.4
    max_scale: float = 3.2

    # Tooltip Parameters
    tooltip_margin: float = 8.0
    tooltip_max_attributes: int = 3

    # Scheduling
    frame_interval: float = Field(
        default=1 / 60,
        description="Seconds between frames for the asyncio scheduler"
    )
    settle_ticks: int = Field(
        default=300,
        description="Ticks run before snapshotting a scene for a one-shot render"
    )

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    log_level: str = "INFO"


def get_test_settings() -> Settings:
    """Get test environment settings."""
    return Settings(
        settle_ticks=50,
        api_debug=True,
        log_level="DEBUG",
    )


# Global settings instance
settings = Settings()
