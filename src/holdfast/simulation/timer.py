"""Timer — countdown primitive behind every cooldown in the simulation.

A Timer counts ``remaining`` down by the frame delta.  When it reaches zero
(or overshoots below it) the ``has_just_finished`` edge flag is raised for
that tick and ``total`` is added back onto ``remaining``.  Adding instead of
resetting keeps the overshoot, so a 2.0s cooldown ticked with irregular
frame deltas still fires on average every 2.0s.

Only one fire is detected per tick: a delta spanning several periods still
raises the flag once and leaves ``remaining`` at ``remaining + total``.

One-shot timers pause themselves after their first fire.  While paused,
``tick()`` is a no-op, so the flag keeps the value it had when the timer
stopped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import require_bool, require_finite, require_positive


@dataclass
class Timer:
    """A repeating (or one-shot) countdown measured in seconds."""

    total: float
    remaining: float | None = None
    has_just_finished: bool = False
    one_shot: bool = False
    paused: bool = False

    def __post_init__(self) -> None:
        self.total = require_positive("Timer.total", self.total)
        if self.remaining is None:
            self.remaining = self.total
        self.remaining = require_finite("Timer.remaining", self.remaining)
        self.has_just_finished = require_bool("Timer.has_just_finished",
                                              self.has_just_finished)
        self.one_shot = require_bool("Timer.one_shot", self.one_shot)
        self.paused = require_bool("Timer.paused", self.paused)

    def tick(self, delta: float) -> None:
        if self.paused:
            return
        self.remaining -= delta
        if self.remaining <= 0.0:
            self.has_just_finished = True
            self.remaining += self.total
            if self.one_shot:
                self.paused = True
        else:
            self.has_just_finished = False

    def remaining_fraction(self) -> float:
        """Fraction of the period still to run, for cooldown bars."""
        return self.remaining / self.total

    def pause(self) -> None:
        self.paused = True

    def unpause(self) -> None:
        """Resume ticking.  The edge flag is cleared so a one-shot fire is
        not reported a second time."""
        self.paused = False
        self.has_just_finished = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "remaining": self.remaining,
            "has_just_finished": self.has_just_finished,
            "one_shot": self.one_shot,
            "paused": self.paused,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], default: Timer) -> Timer:
        total = data.get("total", default.total)
        return cls(
            total=total,
            remaining=data.get("remaining", total),
            has_just_finished=data.get("has_just_finished", False),
            one_shot=data.get("one_shot", default.one_shot),
            paused=data.get("paused", default.paused),
        )
