"""SimulationState — the aggregate the host mutates once per frame.

Architecture
------------
SimulationState owns the Base, the live enemy list and the EnemySpawner.
The host creates one instance (``default_state()`` or ``load_state()``),
keeps it, and calls ``tick(delta)`` once per displayed frame.  There is no
module-level state; everything a tick touches hangs off the instance.

Tick order (each stage consumes the previous stage's output):

  1. Move every enemy.  Enemies that reach distance <= 0 deal their damage
     to the base and are dropped.
  2. Advance the spawner; if it fired, append one fresh enemy.
  3. Stable-sort enemies by distance, closest first.
  4. Resolve the base's attacks in configured order (basic, then big),
     each against the list left by the previous one.
  5. Commit the resulting list as ``enemies``.

Base defeat is not terminal.  The simulation keeps running with the base at
zero or negative HP; ``Base.is_defeated`` reports it and a
``base_defeated`` event is published on the tick the HP first crosses zero.
``Base.reset_hp()`` clears the condition.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from loguru import logger

from .combat import Attack
from .enemy import Enemy, EnemyAfterTick
from .errors import ConfigurationError, require_finite
from .health import HitPoints
from .spawner import EnemySpawner
from .timer import Timer

if TYPE_CHECKING:
    from holdfast.comms.event_bus import EventBus
    from holdfast.config import Settings


@dataclass
class Base:
    """The defended point: a health pool plus its attacks."""

    hp: HitPoints
    attacks: list[Attack] = field(default_factory=list)

    def __post_init__(self) -> None:
        names = [a.name for a in self.attacks]
        if len(names) != len(set(names)):
            raise ConfigurationError(f"Attack names must be unique, got {names}")

    @property
    def is_defeated(self) -> bool:
        return self.hp.is_depleted

    def get_attack(self, name: str) -> Attack | None:
        for attack in self.attacks:
            if attack.name == name:
                return attack
        return None

    @property
    def basic_attack(self) -> Attack | None:
        return self.get_attack("basic")

    @property
    def big_attack(self) -> Attack | None:
        return self.get_attack("big")

    def reset_hp(self) -> None:
        """Manual "Reset HP" action.  Safe to call between any two ticks."""
        self.hp.reset()
        logger.info(f"Base HP reset to {self.hp.maximum}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "hp": self.hp.to_dict(),
            "attacks": [a.to_dict() for a in self.attacks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], default: Base) -> Base:
        hp = HitPoints.from_dict(data.get("hp", {}), default.hp)
        if "attacks" not in data:
            # Older saves stored each attack as a separate "<name>_attack" field;
            # an absent field takes the default attack.
            return cls(hp=hp, attacks=[
                Attack.from_dict({**data.get(f"{a.name}_attack", {}), "name": a.name}, a)
                for a in default.attacks
            ])

        attacks = []
        for raw in data["attacks"]:
            fallback = default.get_attack(raw.get("name", "")) or default.attacks[0]
            attacks.append(Attack.from_dict(raw, fallback))
        return cls(hp=hp, attacks=attacks)


@dataclass
class SimulationState:
    """Everything a tick reads and writes."""

    base: Base
    spawner: EnemySpawner
    enemies: list[Enemy] = field(default_factory=list)
    elapsed: float = 0.0

    def __post_init__(self) -> None:
        self.elapsed = require_finite("SimulationState.elapsed", self.elapsed)

    def tick(self, delta: float, event_bus: EventBus | None = None) -> None:
        """Advance the simulation by *delta* seconds.

        Raises ConfigurationError for a negative or non-finite delta; the
        state is left untouched in that case.
        """
        if not math.isfinite(delta) or delta < 0:
            raise ConfigurationError(f"tick delta must be finite and >= 0, got {delta}")

        was_defeated = self.base.is_defeated

        # 1. Movement and arrivals
        enemies: list[Enemy] = []
        for enemy in self.enemies:
            if enemy.tick(delta) is EnemyAfterTick.NORMAL:
                enemies.append(enemy)
                continue
            self.base.hp.take_damage(enemy.damage)
            logger.debug(
                f"Enemy {enemy.id} reached the base for {enemy.damage} damage "
                f"(base hp {self.base.hp.current})"
            )
            if event_bus is not None:
                event_bus.publish("enemy_reached_base", {
                    "id": enemy.id,
                    "damage": enemy.damage,
                    "base_hp": self.base.hp.current,
                })

        if not was_defeated and self.base.is_defeated:
            logger.info(f"Base defeated at t={self.elapsed + delta:.2f}s")
            if event_bus is not None:
                event_bus.publish("base_defeated", {
                    "elapsed": self.elapsed + delta,
                    "base_hp": self.base.hp.current,
                })

        # 2. Spawning
        spawned = self.spawner.tick(delta)
        if spawned is not None:
            enemies.append(spawned)
            if event_bus is not None:
                event_bus.publish("enemy_spawned", spawned.to_dict())

        # 3. Closest first; sorted() is stable so equal distances keep order
        enemies = sorted(enemies, key=lambda e: e.distance)

        # 4. Attacks, in configured order
        for attack in self.base.attacks:
            enemies = attack.tick(delta, enemies, event_bus).survivors

        # 5. Commit
        self.enemies = enemies
        self.elapsed += delta

    def snapshot(self) -> dict[str, Any]:
        """Display view: enemy rows plus base and attack status."""
        return {
            "elapsed": self.elapsed,
            "base": {
                "hp": self.base.hp.current,
                "max_hp": self.base.hp.maximum,
                "hp_fraction": self.base.hp.fraction(),
                "defeated": self.base.is_defeated,
                "attacks": [
                    {
                        "name": a.name,
                        "cooldown_remaining": a.cooldown_timer.remaining,
                        "cooldown_total": a.cooldown_timer.total,
                        "cooldown_fraction": a.cooldown_timer.remaining_fraction(),
                        "damage": a.damage,
                        "range": a.range,
                        "max_targets": a.max_targets,
                    }
                    for a in self.base.attacks
                ],
            },
            "spawner": {
                "maximum_hp": self.spawner.maximum_hp,
                "speed": self.spawner.speed,
                "damage": self.spawner.damage,
                "cooldown_fraction": self.spawner.timer.remaining_fraction(),
            },
            "enemies": [
                {
                    "id": e.id,
                    "distance": e.distance,
                    "distance_fraction": e.progress_fraction(),
                    "hp": e.hp.current,
                    "max_hp": e.hp.maximum,
                    "hp_fraction": e.hp.fraction(),
                    "damage": e.damage,
                    "speed": e.speed,
                }
                for e in self.enemies
            ],
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "base": self.base.to_dict(),
            "spawner": self.spawner.to_dict(),
            "enemies": [e.to_dict() for e in self.enemies],
            "elapsed": self.elapsed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any],
                  default: SimulationState | None = None) -> SimulationState:
        """Rebuild a state, taking any missing field from *default*."""
        if default is None:
            default = default_state()
        spawner = EnemySpawner.from_dict(data.get("spawner", {}), default.spawner)
        template = spawner.template()
        return cls(
            base=Base.from_dict(data.get("base", {}), default.base),
            spawner=spawner,
            enemies=[Enemy.from_dict(e, template) for e in data.get("enemies", [])],
            elapsed=data.get("elapsed", 0.0),
        )


def tick(state: SimulationState, delta: float,
         event_bus: EventBus | None = None) -> None:
    """Function form of ``SimulationState.tick`` for frame-loop callers."""
    state.tick(delta, event_bus)


def default_state(settings: Settings | None = None) -> SimulationState:
    """Build a fresh state from *settings* (the module settings by default)."""
    if settings is None:
        from holdfast.config import settings

    return SimulationState(
        base=Base(
            hp=HitPoints.new_full(settings.base_max_hp),
            attacks=[
                Attack(
                    name="basic",
                    cooldown_timer=Timer(settings.basic_attack_cooldown),
                    damage=settings.basic_attack_damage,
                    range=settings.basic_attack_range,
                    max_targets=settings.basic_attack_max_targets,
                ),
                Attack(
                    name="big",
                    cooldown_timer=Timer(settings.big_attack_cooldown),
                    damage=settings.big_attack_damage,
                    range=settings.big_attack_range,
                    max_targets=settings.big_attack_max_targets,
                ),
            ],
        ),
        spawner=EnemySpawner(
            timer=Timer(settings.spawn_period),
            maximum_hp=settings.enemy_max_hp,
            speed=settings.enemy_speed,
            damage=settings.enemy_damage,
        ),
    )
