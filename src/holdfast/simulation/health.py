"""HitPoints — health pool shared by the Base and every enemy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import require_finite, require_positive


@dataclass
class HitPoints:
    """Health pool bounded above by ``maximum``.

    ``current`` is not clamped at zero: damage is plain subtraction and the
    owner decides what ``current <= 0`` means (enemy removal, base defeat).
    Only ``reset()`` writes ``maximum`` back into ``current``.
    """

    maximum: float
    current: float | None = None

    def __post_init__(self) -> None:
        self.maximum = require_positive("HitPoints.maximum", self.maximum)
        if self.current is None:
            self.current = self.maximum
        self.current = require_finite("HitPoints.current", self.current)

    @classmethod
    def new_full(cls, maximum: float) -> HitPoints:
        return cls(maximum=maximum)

    @property
    def is_depleted(self) -> bool:
        return self.current <= 0.0

    def take_damage(self, amount: float) -> None:
        self.current -= amount

    def reset(self) -> None:
        self.current = self.maximum

    def fraction(self) -> float:
        """current / maximum, for HP bars (negative once depleted)."""
        return self.current / self.maximum

    def to_dict(self) -> dict[str, Any]:
        return {"maximum": self.maximum, "current": self.current}

    @classmethod
    def from_dict(cls, data: dict[str, Any], default: HitPoints) -> HitPoints:
        maximum = data.get("maximum", default.maximum)
        return cls(maximum=maximum, current=data.get("current", maximum))
