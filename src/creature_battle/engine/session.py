"""Stateful battle facade.

The resolvers return new creature snapshots and never touch the state they
were given. ``BattleSession`` owns one ``GameState`` and swaps those snapshots
back into the fields, keeping a running battle log.
"""
from __future__ import annotations

import logging
import random

from creature_battle.engine.turn import TurnResult, run_turn
from creature_battle.mechanics.combat import INVALID_ATTACK_LOG, defend_creature, process_attack
from creature_battle.mechanics.formulas import BattleFormulas, get_formulas
from creature_battle.mechanics.items import apply_spell, apply_tool
from creature_battle.mechanics.stats import refresh_battle_stats
from creature_battle.mechanics.synergy import Synergy, check_field_synergies
from creature_battle.models.creature import Creature
from creature_battle.models.game_state import GameState, Side
from creature_battle.models.item import SpellDef, ToolDef
from creature_battle.models.results import AttackResult, SpellResult, ToolResult

logger = logging.getLogger(__name__)


class BattleSession:
    def __init__(
        self,
        state: GameState,
        rng: random.Random | None = None,
        formulas: BattleFormulas | None = None,
    ):
        self.state = state.model_copy(deep=True)
        self.rng = rng
        self.formulas = get_formulas(formulas)
        self.log: list[str] = []
        self.combo: dict[Side, int] = {Side.PLAYER: 0, Side.ENEMY: 0}

    @classmethod
    def start(
        cls,
        player: list[Creature],
        enemy: list[Creature],
        difficulty: str = "medium",
        rng: random.Random | None = None,
        formulas: BattleFormulas | None = None,
    ) -> BattleSession:
        """Field both rosters at full health with freshly derived stats."""
        session = cls(GameState(difficulty=difficulty), rng=rng, formulas=formulas)
        for side, roster in ((Side.PLAYER, player), (Side.ENEMY, enemy)):
            fielded = []
            for creature in roster:
                ready = refresh_battle_stats(creature.model_copy(deep=True), session.formulas)
                ready.current_health = ready.max_health
                fielded.append(ready)
            session.state.set_field(side, fielded)
        return session

    @property
    def difficulty(self) -> str:
        return self.state.difficulty.value

    @property
    def turn(self) -> int:
        return self.state.turn

    def _replace(self, side: Side, index: int, creature: Creature) -> None:
        creatures = list(self.state.field_for(side))
        creatures[index] = creature
        self.state.set_field(side, creatures)

    def _record(self, line: str) -> None:
        if line:
            self.log.append(line)

    def attack(
        self,
        side: Side,
        attacker_index: int,
        defender_index: int,
        attack_type: str = "auto",
        combo_level: int | None = None,
    ) -> AttackResult:
        """Attack from ``side`` into the opposing field.

        Without an explicit ``combo_level`` the session counts consecutive
        attacks made by the same side this turn.
        """
        attacker = self.state.field_for(side)[attacker_index]
        defender = self.state.field_for(side.opponent)[defender_index]
        if not attacker.is_alive:
            logger.warning(f"{attacker.species_name} cannot attack at 0 health")
            return AttackResult(
                updated_attacker=attacker,
                updated_defender=defender,
                battle_log=INVALID_ATTACK_LOG,
                is_valid=False,
            )
        if combo_level is None:
            self.combo[side] += 1
            combo_level = self.combo[side]

        result = process_attack(
            attacker,
            defender,
            attack_type,
            combo_level,
            turn=self.turn,
            rng=self.rng,
            formulas=self.formulas,
        )
        if result.is_valid:
            self._replace(side, attacker_index, result.updated_attacker)
            self._replace(side.opponent, defender_index, result.updated_defender)
        self._record(result.battle_log)
        return result

    def use_tool(self, side: Side, index: int, tool: ToolDef) -> ToolResult:
        creature = self.state.field_for(side)[index]
        result = apply_tool(creature, tool, self.difficulty, self.turn, formulas=self.formulas)
        if result.effect is not None:
            self._replace(side, index, result.updated_creature)
        self._record(result.battle_log)
        return result

    def cast_spell(
        self,
        side: Side,
        caster_index: int,
        target_side: Side,
        target_index: int,
        spell: SpellDef,
    ) -> SpellResult:
        caster = self.state.field_for(side)[caster_index]
        target = self.state.field_for(target_side)[target_index]

        energy_attr = f"{side.value}_energy"
        energy = getattr(self.state, energy_attr)
        if spell.energy_cost > energy:
            logger.warning(f"{side.value} cannot afford {spell.name} ({spell.energy_cost} > {energy})")
            return SpellResult(updated_caster=caster, updated_target=target)

        result = apply_spell(
            caster,
            target,
            spell,
            self.difficulty,
            self.turn,
            rng=self.rng,
            formulas=self.formulas,
        )
        if result.effect is None:
            return result

        setattr(self.state, energy_attr, energy - spell.energy_cost)
        self._replace(target_side, target_index, result.updated_target)
        if not (target_side is side and target_index == caster_index):
            self._replace(side, caster_index, result.updated_caster)
        self._record(result.battle_log)
        return result

    def defend(self, side: Side, index: int) -> Creature:
        creature = self.state.field_for(side)[index]
        updated = defend_creature(creature, self.difficulty, self.turn, self.formulas)
        if updated is not creature:
            self._replace(side, index, updated)
            self._record(f"{updated.species_name} takes a defensive stance.")
        return updated

    def end_turn(self) -> TurnResult:
        result = run_turn(self.state, formulas=self.formulas)
        self.state = result.state
        self.combo = {Side.PLAYER: 0, Side.ENEMY: 0}
        for line in result.log:
            self._record(line)
        return result

    def synergies(self, side: Side) -> list[Synergy]:
        return check_field_synergies(self.state.field_for(side))

    @property
    def winner(self) -> Side | None:
        """The side still standing once the other field is empty."""
        player_alive = any(c.is_alive for c in self.state.player_field)
        enemy_alive = any(c.is_alive for c in self.state.enemy_field)
        if player_alive and not enemy_alive:
            return Side.PLAYER
        if enemy_alive and not player_alive:
            return Side.ENEMY
        return None
