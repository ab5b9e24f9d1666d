"""Energy economy, hand limits and creature scoring — pure functions, no I/O."""
from __future__ import annotations

from dataclasses import dataclass

from creature_battle.models.creature import Creature
from creature_battle.utils import round_half_up, safe_number

BASE_MAX_ENERGY: dict[str, int] = {"easy": 10, "medium": 12, "hard": 15, "expert": 18}
DEFAULT_MAX_ENERGY = 15

BASE_REGEN: dict[str, int] = {"easy": 2, "medium": 3, "hard": 4, "expert": 5}
DEFAULT_REGEN = 3

REGEN_RARITY_BOOST: dict[str, float] = {"Legendary": 1.3, "Epic": 1.2, "Rare": 1.1}

MAX_HAND_SIZE: dict[str, int] = {"easy": 5, "medium": 4, "hard": 3, "expert": 3}
DEFAULT_HAND_SIZE = 4

RARITY_VALUE: dict[str, int] = {"Legendary": 4, "Epic": 3, "Rare": 2}

MOMENTUM_PER_BONUS = 10


def _key(value) -> str:
    return str(getattr(value, "value", value))


def get_max_energy(creatures: list[Creature], difficulty: str = "medium") -> int:
    """Energy cap: difficulty base plus one per four fielded creatures."""
    base = BASE_MAX_ENERGY.get(_key(difficulty), DEFAULT_MAX_ENERGY)
    return base + int(len(creatures) * 0.25)


def calculate_energy_regen(creatures: list[Creature], difficulty: str = "medium") -> int:
    """Energy gained per turn by a field.

    Each creature contributes a tenth of its energy stat, boosted by rarity and
    form. Energy specialists add half a point each. The total is rounded once.
    """
    total = BASE_REGEN.get(_key(difficulty), DEFAULT_REGEN)
    for creature in creatures:
        if creature is None:
            continue
        energy = safe_number((creature.stats or {}).get("energy"))
        if energy:
            contribution = energy * 0.1
            contribution *= REGEN_RARITY_BOOST.get(_key(creature.rarity), 1.0)
            contribution *= 1 + (creature.form or 0) * 0.05
            total += contribution
        if creature.has_specialty("energy"):
            total += 0.5
    return round_half_up(total)


def get_max_hand_size(difficulty: str | None) -> int:
    return MAX_HAND_SIZE.get(_key(difficulty), DEFAULT_HAND_SIZE)


@dataclass
class MomentumStatus:
    current_momentum: int
    bonus_regen: int
    next_threshold: int

    @property
    def total_bonus_earned(self) -> int:
        return self.bonus_regen


def process_energy_momentum(momentum: int) -> MomentumStatus:
    """One bonus regen point per 10 momentum."""
    return MomentumStatus(
        current_momentum=momentum,
        bonus_regen=momentum // MOMENTUM_PER_BONUS,
        next_threshold=MOMENTUM_PER_BONUS - momentum % MOMENTUM_PER_BONUS,
    )


def calculate_creature_power(creature: Creature) -> int:
    """Single power score for ranking creatures; 0 without battle stats."""
    if creature is None or not creature.battle_stats:
        return 0
    stats = creature.battle_stats

    def stat(name: str) -> float:
        return safe_number(stats.get(name))

    attack = max(stat("physicalAttack"), stat("magicalAttack"))
    defense = max(stat("physicalDefense"), stat("magicalDefense"))
    utility = stat("initiative") + stat("criticalChance") + stat("dodgeChance")
    rarity_value = RARITY_VALUE.get(_key(creature.rarity), 1)

    return round_half_up(
        attack * 2
        + defense
        + stat("maxHealth") * 0.1
        + utility * 0.5
        + (creature.form or 0) * 5
        + rarity_value * 10
    )


def calculate_energy_efficiency(action: str, creature: Creature, energy_cost: float) -> float:
    """Value per energy point of an action, to one decimal place.

    Zero when the action, creature or cost is missing.
    """
    if not action or creature is None or not energy_cost or energy_cost <= 0:
        return 0
    stats = creature.battle_stats or {}

    if action == "attack":
        value = max(safe_number(stats.get("physicalAttack")), safe_number(stats.get("magicalAttack")))
    elif action == "defend":
        value = max(safe_number(stats.get("physicalDefense")), safe_number(stats.get("magicalDefense"))) * 2
    elif action == "deploy":
        value = calculate_creature_power(creature) / 10
    else:
        value = 10

    return round_half_up(value / energy_cost * 10) / 10
