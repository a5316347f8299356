"""Attack — cooldown-gated, ranged, target-capped damage from the base.

Architecture
------------
The base owns an ordered list of Attack instances ("basic" then "big" by
default).  Each tick, after the enemy list has been sorted closest-first,
every attack is resolved in that order:

  1. ``cooldown_timer.tick(delta)`` advances the cooldown.  Nothing else
     happens unless the timer fired this tick.

  2. ``resolve()`` walks the sorted enemies.  An enemy is struck when it is
     within ``range`` (``distance <= range``) and fewer than ``max_targets``
     enemies have already been struck by this activation.  Out-of-range
     enemies and everything past the cap are kept untouched.

  3. Struck enemies whose HP dropped to zero or below are left out of the
     returned list; survivors keep their position in the ordering.

Because attacks resolve sequentially against the list the previous attack
returned, the basic attack can finish off enemies before the big attack
picks its targets.

Events published on the EventBus (when one is supplied):
  - ``attack_fired``: attack name, targets hit, kills
  - ``enemy_eliminated``: one per enemy removed by an attack
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from loguru import logger

from .errors import ConfigurationError, require_finite
from .timer import Timer

if TYPE_CHECKING:
    from holdfast.comms.event_bus import EventBus
    from .enemy import Enemy


def _require_damage(name: str, value: float) -> float:
    value = require_finite(f"Attack[{name}].damage", value)
    if value < 0:
        raise ConfigurationError(f"Attack[{name}].damage must be >= 0, got {value}")
    return value


def _require_max_targets(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"Attack.max_targets must be an int, got {value!r}")
    if value < 0:
        raise ConfigurationError(f"Attack.max_targets must be >= 0, got {value}")
    return value


@dataclass
class AttackResult:
    """Outcome of one attack activation."""

    attack: str
    fired: bool
    survivors: list[Enemy] = field(default_factory=list)
    hit: list[Enemy] = field(default_factory=list)
    killed: list[Enemy] = field(default_factory=list)


@dataclass
class Attack:
    """One of the base's attacks."""

    name: str
    cooldown_timer: Timer
    damage: float
    range: float
    max_targets: int

    def __post_init__(self) -> None:
        self.damage = _require_damage(self.name, self.damage)
        self.range = require_finite(f"Attack[{self.name}].range", self.range)
        self.max_targets = _require_max_targets(self.max_targets)

    def configure(
        self,
        damage: float | None = None,
        range: float | None = None,
        max_targets: int | None = None,
    ) -> None:
        """Apply tuning changes between ticks; all-or-nothing."""
        new_damage = self.damage if damage is None else _require_damage(self.name, damage)
        new_range = self.range if range is None else require_finite(
            f"Attack[{self.name}].range", range)
        new_max = self.max_targets if max_targets is None else _require_max_targets(
            max_targets)
        self.damage, self.range, self.max_targets = new_damage, new_range, new_max

    def in_range(self, enemy: Enemy) -> bool:
        return enemy.distance <= self.range

    def resolve(self, enemies: list[Enemy]) -> AttackResult:
        """Apply one activation to *enemies* (already sorted closest-first).

        Returns the retained enemies in their incoming order.  Does not
        touch the cooldown timer.
        """
        result = AttackResult(attack=self.name, fired=True)
        for enemy in enemies:
            if len(result.hit) >= self.max_targets or not self.in_range(enemy):
                result.survivors.append(enemy)
                continue
            enemy.hp.take_damage(self.damage)
            result.hit.append(enemy)
            if enemy.hp.is_depleted:
                result.killed.append(enemy)
            else:
                result.survivors.append(enemy)
        return result

    def tick(self, delta: float, enemies: list[Enemy],
             event_bus: EventBus | None = None) -> AttackResult:
        """Advance the cooldown and, if it fired, resolve against *enemies*."""
        self.cooldown_timer.tick(delta)
        if not self.cooldown_timer.has_just_finished:
            return AttackResult(attack=self.name, fired=False, survivors=list(enemies))

        result = self.resolve(enemies)
        logger.debug(
            f"Attack {self.name} fired: {len(result.hit)} hit, "
            f"{len(result.killed)} killed"
        )
        if event_bus is not None:
            event_bus.publish("attack_fired", {
                "attack": self.name,
                "damage": self.damage,
                "hit": [e.id for e in result.hit],
                "killed": [e.id for e in result.killed],
            })
            for enemy in result.killed:
                event_bus.publish("enemy_eliminated", {
                    "id": enemy.id,
                    "attack": self.name,
                    "distance": enemy.distance,
                })
        return result

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "cooldown_timer": self.cooldown_timer.to_dict(),
            "damage": self.damage,
            "range": self.range,
            "max_targets": self.max_targets,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], default: Attack) -> Attack:
        return cls(
            name=data.get("name", default.name),
            cooldown_timer=Timer.from_dict(data.get("cooldown_timer", {}),
                                           default.cooldown_timer),
            damage=data.get("damage", default.damage),
            range=data.get("range", default.range),
            max_targets=data.get("max_targets", default.max_targets),
        )
