"""Simulation subsystem — timers, enemies, attacks and the per-frame tick."""
from .combat import Attack, AttackResult
from .enemy import START_DISTANCE, Enemy, EnemyAfterTick
from .errors import ConfigurationError, SimulationError, StateLoadError
from .health import HitPoints
from .persistence import load_state, load_state_or_default, save_state, state_from_dict, state_to_dict
from .spawner import EnemySpawner
from .state import Base, SimulationState, default_state, tick
from .timer import Timer

__all__ = [
    "Attack",
    "AttackResult",
    "Base",
    "ConfigurationError",
    "Enemy",
    "EnemyAfterTick",
    "EnemySpawner",
    "HitPoints",
    "SimulationError",
    "SimulationState",
    "START_DISTANCE",
    "StateLoadError",
    "Timer",
    "default_state",
    "load_state",
    "load_state_or_default",
    "save_state",
    "state_from_dict",
    "state_to_dict",
    "tick",
]
