"""Tool and spell definitions plus the effect shapes their tables produce."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


class EffectTag(str, Enum):
    SURGE = "Surge"
    SHIELD = "Shield"
    ECHO = "Echo"
    DRAIN = "Drain"
    CHARGE = "Charge"


class ItemCategory(str, Enum):
    ENERGY = "energy"
    STRENGTH = "strength"
    MAGIC = "magic"
    STAMINA = "stamina"
    SPEED = "speed"


class ToolDef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    tool_type: ItemCategory | None = None
    tool_effect: EffectTag | None = None
    description: str = ""


class SpellDef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    spell_type: ItemCategory | None = None
    spell_effect: EffectTag | None = None
    energy_cost: int = 0
    description: str = ""


@dataclass(frozen=True)
class ChargeSpec:
    """Linear ramp toward a one-shot attack bonus."""
    target_stat: str
    per_turn_bonus: Number
    max_turns: int
    final_burst: Number


@dataclass(frozen=True)
class PrepareSpec:
    """Delayed payload carried by charge spells."""
    name: str
    turns: int
    damage: Number
    area_effect: bool = False
    stun_chance: float = 0.0


@dataclass(frozen=True)
class ToolEffect:
    stat_changes: dict[str, Number] = field(default_factory=dict)
    health_change: Number = 0
    health_over_time: Number = 0
    duration: int = 0
    charge_effect: ChargeSpec | None = None
    energy_gain: int = 0


@dataclass(frozen=True)
class SpellEffect:
    damage: Number = 0
    healing: Number = 0
    self_heal: Number = 0
    health_over_time: Number = 0
    stat_changes: dict[str, Number] = field(default_factory=dict)
    stat_drain: dict[str, Number] = field(default_factory=dict)
    stat_gain: dict[str, Number] = field(default_factory=dict)
    critical_chance: int = 0
    armor_piercing: bool = False
    damage_reduction: float = 0.0
    duration: int = 0
    prepare_effect: PrepareSpec | None = None
    charge_bonus: Number = 0
    actual_damage: int = 0
    was_critical: bool = False
