"""Exception types raised by the simulation core."""

from __future__ import annotations

import math


class SimulationError(Exception):
    """Base class for all holdfast simulation errors."""


class ConfigurationError(SimulationError, ValueError):
    """A value handed to the core can never produce a well-defined tick.

    Raised at construction or configuration time (and for a bad ``delta``
    at tick time) instead of letting NaN reach the enemy sort or a zero
    period fire on every frame.
    """


class StateLoadError(SimulationError):
    """Persisted state could not be turned back into a SimulationState."""


def require_finite(name: str, value: float) -> float:
    """Return *value* as a float, rejecting NaN and infinities."""
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value}")
    return value


def require_positive(name: str, value: float) -> float:
    value = require_finite(name, value)
    if value <= 0:
        raise ConfigurationError(f"{name} must be > 0, got {value}")
    return value


def require_bool(name: str, value: bool) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a bool, got {value!r}")
    return value
