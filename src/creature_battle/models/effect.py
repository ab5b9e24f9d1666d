"""Active, timed modifiers attached to creatures."""
from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from creature_battle.models.item import EffectTag, Number


class EffectKind(str, Enum):
    STAT = "stat"
    CHARGE = "charge"
    ECHO = "echo"
    LEGENDARY_BLESSING = "legendary_blessing"
    ENERGY_BURST = "energy_burst"
    EPIC_BLESSING = "epic_blessing"
    DEBUFF = "debuff"
    DEFENSE = "defense"
    ENHANCEMENT = "enhancement"
    MAGIC = "magic"


class PowerLevel(str, Enum):
    WEAK = "weak"
    NORMAL = "normal"
    STRONG = "strong"


class ChargeEffect(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    target_stat: str = "physicalAttack"
    per_turn_bonus: Number = 0
    max_turns: int = 3
    final_burst: Number = 0
    current_bonus: int = 0
    released: bool = False


class PrepareEffect(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str = "Charging Spell"
    turns: int = 1
    damage: int = 0
    area_effect: bool = False
    stun_chance: float = 0.0


class Effect(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    icon: str = ""
    kind: EffectKind = EffectKind.STAT
    description: str = ""
    duration: int = 1
    start_turn: int = 0
    stat_modifications: dict[str, Number] = Field(default_factory=dict)
    health_over_time: int = 0
    base_health_over_time: Optional[int] = None
    charge_effect: Optional[ChargeEffect] = None
    prepare_effect: Optional[PrepareEffect] = None
    power_level: Optional[PowerLevel] = None
    effect_tag: Optional[EffectTag] = None
    caster_magic: Optional[Number] = None
    damage_reduction: Optional[float] = None

    def active_modifications(self) -> dict[str, Number]:
        """Stat deltas this effect contributes right now, ramp bonus included."""
        mods = dict(self.stat_modifications)
        charge = self.charge_effect
        if self.kind == EffectKind.CHARGE and charge is not None and charge.current_bonus:
            mods[charge.target_stat] = mods.get(charge.target_stat, 0) + charge.current_bonus
        return mods
