"""Enemy — a hostile walking the single lane toward the base.

Distance is a plain float: enemies spawn at START_DISTANCE and have reached
the base once it drops to zero or below.  There is no lateral position and
no pathfinding.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from .errors import require_finite
from .health import HitPoints

# Distance of a freshly spawned enemy.  0.0 is the base itself.
START_DISTANCE = 100.0


class EnemyAfterTick(enum.Enum):
    NORMAL = "normal"
    REACHED_BASE = "reached_base"


@dataclass
class Enemy:
    """A single enemy on the lane."""

    hp: HitPoints
    damage: float
    speed: float
    distance: float = START_DISTANCE
    id: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        self.damage = require_finite("Enemy.damage", self.damage)
        self.speed = require_finite("Enemy.speed", self.speed)
        self.distance = require_finite("Enemy.distance", self.distance)

    def tick(self, delta: float) -> EnemyAfterTick:
        self.distance -= self.speed * delta
        if self.distance > 0.0:
            return EnemyAfterTick.NORMAL
        return EnemyAfterTick.REACHED_BASE

    def progress_fraction(self) -> float:
        """Distance left as a fraction of the full lane, for distance bars."""
        return self.distance / START_DISTANCE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "hp": self.hp.to_dict(),
            "damage": self.damage,
            "speed": self.speed,
            "distance": self.distance,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], default: Enemy) -> Enemy:
        return cls(
            hp=HitPoints.from_dict(data.get("hp", {}), default.hp),
            damage=data.get("damage", default.damage),
            speed=data.get("speed", default.speed),
            distance=data.get("distance", default.distance),
            id=data.get("id", 0),
        )
