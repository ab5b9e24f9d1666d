from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from creature_battle.models.creature import Creature
from creature_battle.models.item import SpellDef, ToolDef

Card = Union[Creature, ToolDef, SpellDef]


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


class Side(str, Enum):
    PLAYER = "player"
    ENEMY = "enemy"

    @property
    def opponent(self) -> "Side":
        return Side.ENEMY if self is Side.PLAYER else Side.PLAYER


class GameState(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player_field: list[Creature] = Field(default_factory=list)
    enemy_field: list[Creature] = Field(default_factory=list)
    player_hand: list[Card] = Field(default_factory=list)
    enemy_hand: list[Card] = Field(default_factory=list)
    player_deck: list[Card] = Field(default_factory=list)
    enemy_deck: list[Card] = Field(default_factory=list)
    player_energy: int = Field(default=0, ge=0)
    enemy_energy: int = Field(default=0, ge=0)
    turn: int = 0
    difficulty: Difficulty = Difficulty.MEDIUM

    def field_for(self, side: Side) -> list[Creature]:
        return self.player_field if side is Side.PLAYER else self.enemy_field

    def set_field(self, side: Side, creatures: list[Creature]) -> None:
        if side is Side.PLAYER:
            self.player_field = creatures
        else:
            self.enemy_field = creatures
