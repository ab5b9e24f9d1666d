"""Shared fixtures for the creature battle test suite."""
from __future__ import annotations

import random
from dataclasses import replace
from typing import Any, Callable

import pytest

from creature_battle.mechanics.formulas import BattleFormulas
from creature_battle.models.creature import Creature
from creature_battle.models.results import DamageRoll


BASE_BATTLE_STATS = {
    "physicalAttack": 50,
    "magicalAttack": 30,
    "physicalDefense": 40,
    "magicalDefense": 30,
    "maxHealth": 100,
    "initiative": 20,
    "criticalChance": 10,
    "dodgeChance": 5,
    "energyCost": 4,
}

BASE_STATS = {"energy": 5, "strength": 5, "magic": 5, "stamina": 5, "speed": 5}


class StubFormulas(BattleFormulas):
    """Fixed derived stats and a scripted damage roll."""

    def __init__(self, stats: dict | None = None, roll: DamageRoll | None = None):
        self.stats = dict(stats or BASE_BATTLE_STATS)
        self.roll = roll or DamageRoll(damage=30)
        self.calls: list[dict[str, Any]] = []

    def derive_battle_stats(self, creature):
        return dict(self.stats)

    def calculate_damage(self, attacker, defender, attack_type, combo_multiplier, rng=None):
        self.calls.append({
            "attack": dict(attacker.battle_stats),
            "attack_type": attack_type,
            "combo": combo_multiplier,
        })
        return replace(self.roll, combo_multiplier=combo_multiplier)


class ScriptedRng:
    """Stands in for random.Random; yields queued values, then never procs."""

    def __init__(self, *values: float):
        self.values = list(values)

    def random(self) -> float:
        return self.values.pop(0) if self.values else 0.999

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.random()


def build_creature(
    name: str = "Testmon",
    rarity: str = "Common",
    health: int | None = None,
    stats: dict | None = None,
    battle_stats: dict | None = None,
    **kwargs: Any,
) -> Creature:
    battle = dict(BASE_BATTLE_STATS) if battle_stats is None else battle_stats
    if health is None:
        health = battle.get("maxHealth", 0) if battle else 0
    return Creature(
        species_name=name,
        rarity=rarity,
        stats=dict(BASE_STATS) if stats is None else stats,
        battle_stats=battle,
        current_health=health,
        **kwargs,
    )


@pytest.fixture
def stub_formulas() -> StubFormulas:
    return StubFormulas()


@pytest.fixture
def make_formulas() -> Callable[..., StubFormulas]:
    return StubFormulas


@pytest.fixture
def scripted_rng() -> Callable[..., ScriptedRng]:
    return ScriptedRng


@pytest.fixture
def make_creature() -> Callable[..., Creature]:
    return build_creature


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(42)
