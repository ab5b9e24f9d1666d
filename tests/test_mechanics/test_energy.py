"""Tests for src/creature_battle/mechanics/energy.py."""
from __future__ import annotations

import pytest

from creature_battle.mechanics.energy import (
    calculate_creature_power,
    calculate_energy_efficiency,
    calculate_energy_regen,
    get_max_energy,
    get_max_hand_size,
    process_energy_momentum,
)
from creature_battle.models.game_state import Difficulty


class TestMaxEnergy:
    def test_base_by_difficulty(self):
        assert get_max_energy([], "medium") == 12
        assert get_max_energy([], Difficulty.EXPERT) == 18

    def test_grows_with_field(self, make_creature):
        assert get_max_energy([make_creature() for _ in range(4)], "hard") == 16
        assert get_max_energy([make_creature() for _ in range(3)], "hard") == 15

    def test_unknown_difficulty(self):
        assert get_max_energy([], "nightmare") == 15


class TestRegen:
    def test_empty_field(self):
        assert calculate_energy_regen([], "easy") == 2

    def test_boosted_creature(self, make_creature):
        creature = make_creature(
            rarity="Legendary",
            form=2,
            stats={"energy": 10},
            specialty_stats=["energy"],
        )
        assert calculate_energy_regen([creature], "medium") == 5

    def test_rounded_once(self, make_creature):
        # 3 + 0.5 + 0.5 + 0.5
        field = [make_creature(stats={"energy": 5}) for _ in range(3)]
        assert calculate_energy_regen(field, "medium") == 5

    def test_skips_missing(self, make_creature):
        assert calculate_energy_regen([None, make_creature(stats={})], "hard") == 4


class TestHandSize:
    @pytest.mark.parametrize("difficulty, size", [
        ("easy", 5), ("medium", 4), ("hard", 3), ("expert", 3), (None, 4),
    ])
    def test_sizes(self, difficulty, size):
        assert get_max_hand_size(difficulty) == size


class TestMomentum:
    def test_partial(self):
        status = process_energy_momentum(25)
        assert status.bonus_regen == 2
        assert status.next_threshold == 5
        assert status.total_bonus_earned == 2

    def test_empty(self):
        status = process_energy_momentum(0)
        assert status.bonus_regen == 0
        assert status.next_threshold == 10


class TestScoring:
    def test_creature_power(self, make_creature):
        assert calculate_creature_power(make_creature()) == 178

    def test_power_rewards_rarity(self, make_creature):
        assert calculate_creature_power(make_creature(rarity="Legendary")) == 208

    def test_power_without_stats(self, make_creature):
        assert calculate_creature_power(make_creature(battle_stats={})) == 0

    @pytest.mark.parametrize("action, cost, expected", [
        ("attack", 4, 12.5),
        ("defend", 8, 10.0),
        ("deploy", 3, 5.9),
        ("taunt", 4, 2.5),
        ("attack", 0, 0),
    ])
    def test_efficiency(self, make_creature, action, cost, expected):
        assert calculate_energy_efficiency(action, make_creature(), cost) == pytest.approx(expected)

    def test_efficiency_needs_creature(self):
        assert calculate_energy_efficiency("attack", None, 4) == 0
