"""Save and restore a SimulationState as JSON.

Every level of the state is rebuilt field by field with ``.get()`` against a
default state, so files written before a field existed still load: the
missing field takes the default (configured) value.

Usage:
    state = load_state_or_default("holdfast_state.json")
    ...
    save_state(state, "holdfast_state.json")
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from .errors import SimulationError, StateLoadError
from .state import SimulationState, default_state


def state_to_dict(state: SimulationState) -> dict[str, Any]:
    return state.to_dict()


def state_from_dict(data: dict[str, Any],
                    default: SimulationState | None = None) -> SimulationState:
    """Rebuild a state from *data*.

    Raises:
        StateLoadError: If *data* is not a mapping or holds values the
            simulation rejects (wrong types, NaN, non-positive periods).
    """
    if not isinstance(data, dict):
        raise StateLoadError(f"Saved state must be a JSON object, got {type(data).__name__}")
    try:
        return SimulationState.from_dict(data, default)
    except SimulationError as e:
        raise StateLoadError(f"Invalid saved state: {e}") from e
    except (AttributeError, KeyError, TypeError, IndexError) as e:
        raise StateLoadError(f"Malformed saved state: {e}") from e


def save_state(state: SimulationState, path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(state_to_dict(state), indent=2), encoding="utf-8")
    tmp.replace(path)
    logger.info(f"Saved simulation state to {path} ({len(state.enemies)} enemies)")


def load_state(path: str | Path,
               default: SimulationState | None = None) -> SimulationState:
    """Load a state from a JSON file.

    Raises:
        FileNotFoundError: If path does not exist.
        StateLoadError: If the file is not UTF-8 JSON or not a valid state.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise StateLoadError(f"{path} is not valid JSON: {e}") from e
    state = state_from_dict(data, default)
    logger.info(f"Loaded simulation state from {path} ({len(state.enemies)} enemies)")
    return state


def load_state_or_default(path: str | Path,
                          default: SimulationState | None = None) -> SimulationState:
    """Load *path*, falling back to a fresh state if it is missing or bad."""
    fallback = default if default is not None else default_state()
    try:
        return load_state(path, fallback)
    except FileNotFoundError:
        logger.info(f"No saved state at {path}, starting fresh")
    except (StateLoadError, OSError) as e:
        logger.warning(f"Saved state load failed, starting fresh: {e}")
    return fallback
