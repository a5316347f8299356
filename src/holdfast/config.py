"""Configuration management using Pydantic settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Simulation settings loaded from environment variables.

    Every field maps to ``HOLDFAST_<FIELD>`` (case-insensitive).  These are
    the defaults used to build a fresh SimulationState and to fill in fields
    that are missing from older saved state.
    """

    model_config = SettingsConfigDict(
        env_prefix="holdfast_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Base
    base_max_hp: float = 100.0

    # Basic attack
    basic_attack_cooldown: float = 2.0
    basic_attack_damage: float = 4.0
    basic_attack_range: float = 35.0
    basic_attack_max_targets: int = 3

    # Big attack
    big_attack_cooldown: float = 10.0
    big_attack_damage: float = 30.0
    big_attack_range: float = 20.0
    big_attack_max_targets: int = 10

    # Enemy spawner
    spawn_period: float = 1.0
    enemy_max_hp: float = 10.0
    enemy_speed: float = 5.0
    enemy_damage: float = 2.0

    # Headless runner
    tick_delta: float = 1.0 / 60.0     # seconds per frame
    state_file: Path = Path("./holdfast_state.json")
    log_level: str = "INFO"


settings = Settings()
