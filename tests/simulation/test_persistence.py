"""Unit tests for saving and restoring SimulationState."""

from __future__ import annotations

import json

import pytest

from holdfast.config import Settings
from holdfast.simulation.errors import StateLoadError
from holdfast.simulation.persistence import (
    load_state,
    load_state_or_default,
    save_state,
    state_from_dict,
    state_to_dict,
)
from holdfast.simulation.state import default_state

pytestmark = pytest.mark.unit


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def played_state(settings):
    state = default_state(settings)
    for _ in range(60):
        state.tick(0.5)
    return state


class TestRoundTrip:
    def test_file_round_trip(self, tmp_path, played_state):
        path = tmp_path / "state.json"
        save_state(played_state, path)
        restored = load_state(path)
        assert state_to_dict(restored) == state_to_dict(played_state)
        assert restored.enemies == played_state.enemies

    def test_restored_state_keeps_ticking_identically(self, tmp_path, played_state):
        path = tmp_path / "state.json"
        save_state(played_state, path)
        restored = load_state(path)
        for _ in range(10):
            played_state.tick(0.5)
            restored.tick(0.5)
        assert state_to_dict(restored) == state_to_dict(played_state)

    def test_save_creates_parent_dirs(self, tmp_path, played_state):
        path = tmp_path / "nested" / "dir" / "state.json"
        save_state(played_state, path)
        assert path.exists()
        assert not path.with_suffix(".json.tmp").exists()


class TestDefaults:
    def test_empty_dict_is_default_state(self, settings):
        state = state_from_dict({}, default_state(settings))
        assert state_to_dict(state) == state_to_dict(default_state(settings))

    def test_missing_fields_take_defaults(self, settings):
        data = {
            "base": {"hp": {"current": 50.0}},
            "enemies": [{"distance": 42.0}],
        }
        state = state_from_dict(data, default_state(settings))
        assert state.base.hp.maximum == 100.0
        assert state.base.hp.current == 50.0
        assert [a.name for a in state.base.attacks] == ["basic", "big"]
        enemy = state.enemies[0]
        assert enemy.distance == 42.0
        assert enemy.hp.current == enemy.hp.maximum == 10.0
        assert enemy.speed == 5.0
        assert state.spawner.timer.total == 1.0

    def test_partial_attack_uses_matching_default(self, settings):
        data = {"base": {"attacks": [{"name": "big", "damage": 99.0}]}}
        state = state_from_dict(data, default_state(settings))
        big = state.base.big_attack
        assert big.damage == 99.0
        assert big.range == 20.0
        assert big.cooldown_timer.total == 10.0
        assert state.base.basic_attack is None

    def test_separate_attack_fields_load(self, settings):
        data = {"base": {
            "basic_attack": {"damage": 7.0},
            "big_attack": {"max_targets": 2},
        }}
        state = state_from_dict(data, default_state(settings))
        assert state.base.basic_attack.damage == 7.0
        assert state.base.basic_attack.range == 35.0
        assert state.base.big_attack.max_targets == 2

    def test_single_separate_attack_field_keeps_the_other(self, settings):
        data = {"base": {"basic_attack": {"damage": 7.0}}}
        state = state_from_dict(data, default_state(settings))
        assert [a.name for a in state.base.attacks] == ["basic", "big"]
        assert state.base.basic_attack.damage == 7.0
        big = state.base.big_attack
        assert (big.damage, big.range, big.max_targets) == (30.0, 20.0, 10)
        assert big.cooldown_timer.total == 10.0

    def test_only_big_separate_field(self, settings):
        data = {"base": {"hp": {"current": 60.0}, "big_attack": {"range": 25.0}}}
        state = state_from_dict(data, default_state(settings))
        assert state.base.basic_attack.damage == 4.0
        assert state.base.big_attack.range == 25.0
        assert state.base.hp.current == 60.0


class TestBadData:
    @pytest.mark.parametrize("data", [
        [],
        {"spawner": 5},
        {"enemies": 3},
        {"spawner": {"timer": {"total": 0}}},
        {"base": {"hp": {"maximum": "lots"}}},
        {"elapsed": float("nan")},
        {"spawner": {"next_id": "7"}},
        {"spawner": {"next_id": 0}},
        {"spawner": {"next_id": True}},
        {"spawner": {"timer": {"paused": "yes"}}},
        {"base": {"attacks": [{"name": "basic", "cooldown_timer": {"one_shot": 1}}]}},
        {"base": {"basic_attack": 5}},
        {"base": {"attacks": [{"name": "big", "damage": -5.0}]}},
    ])
    def test_state_from_dict_rejects(self, data):
        with pytest.raises(StateLoadError):
            state_from_dict(data)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json")
        with pytest.raises(StateLoadError):
            load_state(path)

    def test_nan_in_file(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"enemies": [{"distance": float("nan")}]}))
        with pytest.raises(StateLoadError):
            load_state(path)

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(StateLoadError):
            load_state(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_state(tmp_path / "absent.json")


class TestLoadOrDefault:
    def test_missing_file_gives_default(self, tmp_path, settings):
        state = load_state_or_default(tmp_path / "absent.json", default_state(settings))
        assert state.enemies == []
        assert state.base.hp.current == 100.0

    def test_corrupt_file_gives_default(self, tmp_path, settings):
        path = tmp_path / "state.json"
        path.write_text("garbage")
        state = load_state_or_default(path, default_state(settings))
        assert state_to_dict(state) == state_to_dict(default_state(settings))

    def test_non_utf8_file_gives_default(self, tmp_path, settings):
        path = tmp_path / "state.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        state = load_state_or_default(path, default_state(settings))
        assert state_to_dict(state) == state_to_dict(default_state(settings))

    def test_loaded_spawner_id_survives_a_spawn(self, tmp_path, settings):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"spawner": {"next_id": 7}}))
        state = load_state_or_default(path, default_state(settings))
        state.tick(1.0)
        assert [e.id for e in state.enemies] == [7]
        assert state.spawner.next_id == 8

    def test_good_file_loads(self, tmp_path, played_state):
        path = tmp_path / "state.json"
        save_state(played_state, path)
        state = load_state_or_default(path)
        assert state_to_dict(state) == state_to_dict(played_state)
