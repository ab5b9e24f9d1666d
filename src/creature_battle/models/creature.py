from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from creature_battle.models.effect import Effect
from creature_battle.models.item import Number

CATEGORY_STATS = ("energy", "strength", "magic", "stamina", "speed")


class Rarity(str, Enum):
    COMMON = "Common"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"


class Creature(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    species_name: str
    element: str = "neutral"
    rarity: Rarity = Rarity.COMMON
    form: int = Field(default=0, ge=0)
    combination_level: int = Field(default=0, ge=0)
    stats: Optional[dict[str, Number]] = Field(default_factory=dict)
    specialty_stats: list[str] = Field(default_factory=list)
    battle_stats: Optional[dict[str, Number]] = None
    current_health: int = 0
    active_effects: list[Optional[Effect]] = Field(default_factory=list)
    is_defending: bool = False
    next_attack_bonus: Optional[Number] = None
    permanent_modifications: dict[str, Number] = Field(default_factory=dict)

    @property
    def max_health(self) -> int:
        if not self.battle_stats:
            return 0
        return int(self.battle_stats.get("maxHealth", 0))

    @property
    def is_alive(self) -> bool:
        return self.current_health > 0

    def has_specialty(self, stat: str) -> bool:
        return stat in self.specialty_stats
