"""Unit tests for Attack targeting, damage and removal."""

from __future__ import annotations

import math
import queue

import pytest

from holdfast.comms.event_bus import EventBus
from holdfast.simulation.combat import Attack
from holdfast.simulation.enemy import Enemy
from holdfast.simulation.errors import ConfigurationError
from holdfast.simulation.health import HitPoints
from holdfast.simulation.timer import Timer

pytestmark = pytest.mark.unit


def _enemy(distance: float, hp: float = 10.0, enemy_id: int = 0) -> Enemy:
    return Enemy(hp=HitPoints.new_full(hp), damage=2.0, speed=5.0,
                 distance=distance, id=enemy_id)


def _attack(damage=4.0, range=35.0, max_targets=3, period=2.0) -> Attack:
    return Attack(name="basic", cooldown_timer=Timer(period), damage=damage,
                  range=range, max_targets=max_targets)


def _drain(q: queue.Queue) -> list[dict]:
    out = []
    while not q.empty():
        out.append(q.get_nowait())
    return out


# --------------------------------------------------------------------------
# Target selection and removal
# --------------------------------------------------------------------------

class TestResolve:
    def test_target_cap_hits_closest(self):
        enemies = [_enemy(d, enemy_id=i) for i, d in enumerate([5.0, 10.0, 15.0, 20.0, 25.0])]
        result = _attack().resolve(enemies)
        assert [e.hp.current for e in enemies] == [6.0, 6.0, 6.0, 10.0, 10.0]
        assert result.hit == enemies[:3]
        assert result.survivors == enemies

    def test_out_of_range_untouched(self):
        enemies = [_enemy(10.0), _enemy(40.0), _enemy(50.0)]
        result = _attack().resolve(enemies)
        assert [e.hp.current for e in enemies] == [6.0, 10.0, 10.0]
        assert len(result.hit) == 1

    def test_range_is_inclusive(self):
        enemy = _enemy(35.0)
        _attack().resolve([enemy])
        assert enemy.hp.current == 6.0

    def test_kill_at_exactly_zero_removes(self):
        dead = _enemy(10.0, hp=4.0, enemy_id=1)
        alive = _enemy(12.0, hp=5.0, enemy_id=2)
        result = _attack().resolve([dead, alive])
        assert result.survivors == [alive]
        assert result.killed == [dead]
        assert alive.hp.current == 1.0

    def test_kills_count_toward_cap(self):
        enemies = [_enemy(5.0, hp=4.0), _enemy(6.0, hp=4.0),
                   _enemy(7.0), _enemy(8.0)]
        result = _attack().resolve(enemies)
        assert len(result.killed) == 2
        assert result.survivors == enemies[2:]
        assert enemies[2].hp.current == 6.0
        assert enemies[3].hp.current == 10.0

    def test_survivors_keep_order(self):
        enemies = [_enemy(5.0, hp=4.0, enemy_id=1), _enemy(6.0, enemy_id=2),
                   _enemy(50.0, enemy_id=3)]
        result = _attack().resolve(enemies)
        assert [e.id for e in result.survivors] == [2, 3]

    def test_zero_max_targets_hits_nothing(self):
        enemies = [_enemy(5.0)]
        result = _attack(max_targets=0).resolve(enemies)
        assert result.hit == []
        assert enemies[0].hp.current == 10.0

    def test_empty_collection(self):
        result = _attack().resolve([])
        assert result.survivors == []


# --------------------------------------------------------------------------
# Cooldown gating and events
# --------------------------------------------------------------------------

class TestAttackTick:
    def test_no_damage_while_cooling_down(self):
        enemies = [_enemy(5.0)]
        result = _attack(period=2.0).tick(1.0, enemies)
        assert result.fired is False
        assert result.survivors == enemies
        assert enemies[0].hp.current == 10.0

    def test_fires_when_cooldown_elapses(self):
        attack = _attack(period=2.0)
        enemies = [_enemy(5.0)]
        attack.tick(1.0, enemies)
        result = attack.tick(1.0, enemies)
        assert result.fired is True
        assert enemies[0].hp.current == 6.0
        assert attack.cooldown_timer.remaining == 2.0

    def test_publishes_events(self):
        bus = EventBus()
        q = bus.subscribe()
        enemies = [_enemy(5.0, hp=4.0, enemy_id=9), _enemy(6.0, enemy_id=10)]
        _attack(period=1.0).tick(1.0, enemies, bus)
        events = _drain(q)
        assert [e["type"] for e in events] == ["attack_fired", "enemy_eliminated"]
        assert events[0]["data"]["hit"] == [9, 10]
        assert events[0]["data"]["killed"] == [9]
        assert events[1]["data"]["id"] == 9
        assert events[1]["data"]["attack"] == "basic"


# --------------------------------------------------------------------------
# Tuning
# --------------------------------------------------------------------------

class TestAttackConfigure:
    def test_configure_updates(self):
        attack = _attack()
        attack.configure(damage=10.0, range=50.0, max_targets=5)
        assert (attack.damage, attack.range, attack.max_targets) == (10.0, 50.0, 5)

    @pytest.mark.parametrize("kwargs", [
        {"damage": math.nan},
        {"damage": -1.0},
        {"range": math.inf},
        {"max_targets": -1},
        {"max_targets": 2.5},
        {"max_targets": True},
    ])
    def test_configure_rejects(self, kwargs):
        attack = _attack()
        with pytest.raises(ConfigurationError):
            attack.configure(**kwargs)
        assert (attack.damage, attack.range, attack.max_targets) == (4.0, 35.0, 3)

    def test_constructor_rejects_negative_damage(self):
        with pytest.raises(ConfigurationError):
            _attack(damage=-4.0)

    def test_zero_damage_allowed(self):
        enemy = _enemy(5.0)
        _attack(damage=0.0).resolve([enemy])
        assert enemy.hp.current == 10.0

    def test_round_trip_dict(self):
        attack = _attack()
        attack.cooldown_timer.tick(0.5)
        assert Attack.from_dict(attack.to_dict(), _attack()) == attack
