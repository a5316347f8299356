"""Headless runner — drive a SimulationState at a fixed frame delta.

Stands in for the GUI frame loop: load (or create) a state, tick it for a
number of simulated seconds, optionally save it back, and report what
happened.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from holdfast.comms.event_bus import EventBus
from holdfast.config import Settings
from holdfast.simulation.persistence import load_state_or_default, save_state
from holdfast.simulation.state import SimulationState, default_state

_COUNTED_EVENTS = (
    "enemy_spawned",
    "enemy_reached_base",
    "enemy_eliminated",
    "attack_fired",
    "base_defeated",
)


@dataclass
class RunSummary:
    """What happened during one headless run."""

    ticks: int = 0
    seconds: float = 0.0
    event_counts: dict[str, int] = field(default_factory=dict)
    max_enemies: int = 0
    min_base_hp: float = 0.0
    final_base_hp: float = 0.0
    final_enemies: int = 0

    def to_dict(self) -> dict:
        return {
            "ticks": self.ticks,
            "seconds": self.seconds,
            "event_counts": dict(self.event_counts),
            "max_enemies": self.max_enemies,
            "min_base_hp": self.min_base_hp,
            "final_base_hp": self.final_base_hp,
            "final_enemies": self.final_enemies,
        }


def run(state: SimulationState, seconds: float, delta: float) -> RunSummary:
    """Tick *state* in steps of *delta* until *seconds* have been simulated."""
    if delta <= 0:
        raise ValueError(f"delta must be > 0, got {delta}")

    bus = EventBus(maxsize=0)
    events = bus.subscribe()
    summary = RunSummary(min_base_hp=state.base.hp.current)
    counts = {name: 0 for name in _COUNTED_EVENTS}

    # Count ticks instead of accumulating floats so 40s / 0.5 is exactly 80
    n_ticks = int(round(seconds / delta))
    for _ in range(n_ticks):
        state.tick(delta, bus)
        summary.ticks += 1
        summary.max_enemies = max(summary.max_enemies, len(state.enemies))
        summary.min_base_hp = min(summary.min_base_hp, state.base.hp.current)
        while not events.empty():
            msg = events.get_nowait()
            counts[msg["type"]] = counts.get(msg["type"], 0) + 1

    summary.seconds = n_ticks * delta
    summary.event_counts = counts
    summary.final_base_hp = state.base.hp.current
    summary.final_enemies = len(state.enemies)
    return summary


def _print_summary(summary: RunSummary, state: SimulationState) -> None:
    print(f"\n{'='*60}")
    print(f"  HOLDFAST — {summary.seconds:.1f}s simulated in {summary.ticks} ticks")
    print(f"{'='*60}")
    print(f"  Base HP:        {summary.final_base_hp:.1f} / {state.base.hp.maximum:.1f}"
          f"  (low {summary.min_base_hp:.1f})")
    print(f"  Enemies alive:  {summary.final_enemies}  (peak {summary.max_enemies})")
    for name, count in summary.event_counts.items():
        print(f"  {name:<20s} {count}")
    for attack in state.base.attacks:
        t = attack.cooldown_timer
        print(f"  {attack.name:>6s} attack: {t.remaining:.1f}s / {t.total:.1f}s cooldown")


def main(argv: list[str] | None = None) -> int:
    settings = Settings()
    parser = argparse.ArgumentParser(
        description="Run the holdfast simulation headless at a fixed frame delta",
    )
    parser.add_argument("--seconds", type=float, default=40.0,
                        help="Simulated seconds to run")
    parser.add_argument("--delta", type=float, default=settings.tick_delta,
                        help="Seconds per tick")
    parser.add_argument("--state-file", type=Path, default=None,
                        help="Load state from this JSON file (fresh state if absent)")
    parser.add_argument("--save", action="store_true",
                        help="Write the final state back to --state-file")
    parser.add_argument("--reset-hp", action="store_true",
                        help="Reset the base HP before running")
    parser.add_argument("--log-level", default=settings.log_level,
                        help="loguru level for stderr output")
    args = parser.parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    state_file = args.state_file or settings.state_file
    if args.state_file is not None:
        state = load_state_or_default(state_file, default_state(settings))
    else:
        state = default_state(settings)

    if args.reset_hp:
        state.base.reset_hp()

    try:
        summary = run(state, args.seconds, args.delta)
    except ValueError as e:
        parser.error(str(e))

    _print_summary(summary, state)

    if args.save:
        save_state(state, state_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
