"""EnemySpawner — emits one enemy per spawn period.

Enemy stats are a straight copy of the spawner template; there is no
randomness, so a given delta sequence always produces the same stream of
enemies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from .enemy import START_DISTANCE, Enemy
from .errors import ConfigurationError, require_finite, require_positive
from .health import HitPoints
from .timer import Timer


def _require_non_negative(name: str, value: float) -> float:
    value = require_finite(name, value)
    if value < 0:
        raise ConfigurationError(f"{name} must be >= 0, got {value}")
    return value


def _require_next_id(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"EnemySpawner.next_id must be an int, got {value!r}")
    if value < 1:
        raise ConfigurationError(f"EnemySpawner.next_id must be >= 1, got {value}")
    return value


@dataclass
class EnemySpawner:
    """Spawn timer plus the template every new enemy is stamped from."""

    timer: Timer
    maximum_hp: float
    speed: float
    damage: float
    next_id: int = field(default=1)

    def __post_init__(self) -> None:
        self.maximum_hp = require_positive("EnemySpawner.maximum_hp", self.maximum_hp)
        self.speed = _require_non_negative("EnemySpawner.speed", self.speed)
        self.damage = _require_non_negative("EnemySpawner.damage", self.damage)
        self.next_id = _require_next_id(self.next_id)

    def configure(
        self,
        maximum_hp: float | None = None,
        speed: float | None = None,
        damage: float | None = None,
    ) -> None:
        """Apply tuning changes between ticks (e.g. from sliders).

        All values are validated before any is written, so a rejected call
        leaves the template untouched.
        """
        new_hp = self.maximum_hp if maximum_hp is None else require_positive(
            "EnemySpawner.maximum_hp", maximum_hp)
        new_speed = self.speed if speed is None else _require_non_negative(
            "EnemySpawner.speed", speed)
        new_damage = self.damage if damage is None else _require_non_negative(
            "EnemySpawner.damage", damage)
        self.maximum_hp, self.speed, self.damage = new_hp, new_speed, new_damage

    def template(self) -> Enemy:
        """A full-health enemy at the start of the lane, without an id."""
        return Enemy(
            hp=HitPoints.new_full(self.maximum_hp),
            damage=self.damage,
            speed=self.speed,
            distance=START_DISTANCE,
        )

    def make_enemy(self) -> Enemy:
        enemy = self.template()
        enemy.id = self.next_id
        self.next_id += 1
        return enemy

    def tick(self, delta: float) -> Enemy | None:
        """Advance the spawn timer; return the new enemy if it fired."""
        self.timer.tick(delta)
        if not self.timer.has_just_finished:
            return None
        enemy = self.make_enemy()
        logger.debug(
            f"Spawned enemy {enemy.id} (hp={enemy.hp.maximum}, "
            f"speed={enemy.speed}, damage={enemy.damage})"
        )
        return enemy

    def to_dict(self) -> dict[str, Any]:
        return {
            "timer": self.timer.to_dict(),
            "maximum_hp": self.maximum_hp,
            "speed": self.speed,
            "damage": self.damage,
            "next_id": self.next_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], default: EnemySpawner) -> EnemySpawner:
        return cls(
            timer=Timer.from_dict(data.get("timer", {}), default.timer),
            maximum_hp=data.get("maximum_hp", default.maximum_hp),
            speed=data.get("speed", default.speed),
            damage=data.get("damage", default.damage),
            next_id=data.get("next_id", default.next_id),
        )
