"""Turn orchestrator — energy, ongoing effects, death sweep, draw."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from creature_battle.mechanics.death import process_defeated_creatures
from creature_battle.mechanics.effects import advance, charge_burst, purge_expired, tick_duration
from creature_battle.mechanics.energy import calculate_energy_regen, get_max_energy, get_max_hand_size
from creature_battle.mechanics.formulas import BattleFormulas
from creature_battle.mechanics.stats import refresh_battle_stats
from creature_battle.models.creature import Creature
from creature_battle.models.effect import Effect
from creature_battle.models.game_state import Card, GameState
from creature_battle.utils import round_half_up

logger = logging.getLogger(__name__)

DIFFICULTY_HEALTH_SCALING: dict[str, float] = {"hard": 1.15, "expert": 1.25}
RARITY_HEALTH_SCALING: dict[str, float] = {"Legendary": 1.2, "Epic": 1.15, "Rare": 1.1}
SIGNIFICANT_HEALTH_CHANGE = 5


@dataclass
class TurnResult:
    state: GameState
    log: list[str] = field(default_factory=list)
    defeated: list[Creature] = field(default_factory=list)
    player_drew: Card | None = None
    enemy_drew: Card | None = None


def _key(value) -> str:
    return str(getattr(value, "value", value))


def scale_health_over_time(amount: int, difficulty: str, rarity: str) -> int:
    """Difficulty scaling then rarity scaling, each step rounded."""
    factor = DIFFICULTY_HEALTH_SCALING.get(_key(difficulty))
    if factor:
        amount = round_half_up(amount * factor)
    factor = RARITY_HEALTH_SCALING.get(_key(rarity))
    if factor:
        amount = round_half_up(amount * factor)
    return amount


def _tick_creature(
    creature: Creature,
    difficulty: str,
    current_turn: int,
    formulas: BattleFormulas | None,
) -> Creature:
    updated = creature.model_copy(deep=True)
    stats_modified = False
    ticked: list[Effect] = []
    max_health = (updated.battle_stats or {}).get("maxHealth")

    for effect in creature.active_effects:
        if not isinstance(effect, Effect):
            stats_modified = True
            continue

        advanced = advance(effect, current_turn)

        if advanced.active_modifications():
            stats_modified = True

        if advanced.health_over_time:
            change = scale_health_over_time(advanced.health_over_time, difficulty, updated.rarity)
            before = updated.current_health
            updated.current_health = max(0, before + change)
            if max_health is not None:
                updated.current_health = min(updated.current_health, max_health)
            delta = updated.current_health - before
            if abs(delta) >= SIGNIFICANT_HEALTH_CHANGE:
                verb = "healed" if delta > 0 else "damaged"
                logger.info(f"{updated.species_name} {verb} for {abs(delta)} ({advanced.name})")

        burst = charge_burst(advanced)
        if burst:
            updated.next_attack_bonus = (updated.next_attack_bonus or 0) + burst
            logger.info(f"{updated.species_name} charge ready: next attack gains {burst}")

        ticked.append(tick_duration(advanced))

    updated.active_effects = purge_expired(ticked)
    if len(updated.active_effects) < len(ticked):
        stats_modified = True
    if stats_modified:
        refresh_battle_stats(updated, formulas)

    updated.is_defending = False
    max_health = (updated.battle_stats or {}).get("maxHealth")
    updated.current_health = max(0, updated.current_health)
    if max_health is not None:
        updated.current_health = min(updated.current_health, max_health)
    return updated


def apply_ongoing_effects(
    creatures: list[Creature],
    difficulty: str = "medium",
    current_turn: int = 0,
    formulas: BattleFormulas | None = None,
) -> list[Creature]:
    """Advance every active effect on a field by one tick.

    Health-over-time lands first, charges that complete grant their burst to
    the creature's next attack, and durations count down. Creatures without
    battle stats pass through untouched.
    """
    if creatures is None:
        logger.warning("apply_ongoing_effects called without a field")
        return []
    ticked: list[Creature] = []
    for creature in creatures:
        if creature is None or not creature.battle_stats:
            ticked.append(creature)
            continue
        ticked.append(_tick_creature(creature, difficulty, current_turn, formulas))
    return ticked


def draw_card(hand: list[Card], deck: list[Card], max_hand_size: int) -> tuple[list[Card], list[Card], Card | None]:
    """Move the front card of the deck into the hand when there is room."""
    if len(hand) >= max_hand_size or not deck:
        return hand, deck, None
    card = deck[0]
    return [*hand, card], deck[1:], card


def run_turn(state: GameState, difficulty: str | None = None, *, formulas: BattleFormulas | None = None) -> TurnResult:
    """Advance the battle by one turn and report what happened."""
    difficulty = _key(difficulty or state.difficulty)
    new = state.model_copy(deep=True)
    new.turn += 1
    log: list[str] = []

    new.player_energy = min(
        new.player_energy + calculate_energy_regen(new.player_field, difficulty),
        get_max_energy(new.player_field, difficulty),
    )
    new.enemy_energy = min(
        new.enemy_energy + calculate_energy_regen(new.enemy_field, difficulty),
        get_max_energy(new.enemy_field, difficulty),
    )

    new.player_field = apply_ongoing_effects(new.player_field, difficulty, new.turn, formulas)
    new.enemy_field = apply_ongoing_effects(new.enemy_field, difficulty, new.turn, formulas)

    player_outcome = process_defeated_creatures(new.player_field, new.enemy_field, turn=new.turn, formulas=formulas)
    new.player_field = player_outcome.survivors
    new.enemy_field = player_outcome.opponents
    enemy_outcome = process_defeated_creatures(new.enemy_field, new.player_field, turn=new.turn, formulas=formulas)
    new.enemy_field = enemy_outcome.survivors
    new.player_field = enemy_outcome.opponents
    log.extend(player_outcome.log)
    log.extend(enemy_outcome.log)

    max_hand = get_max_hand_size(difficulty)
    new.player_hand, new.player_deck, player_card = draw_card(new.player_hand, new.player_deck, max_hand)
    new.enemy_hand, new.enemy_deck, enemy_card = draw_card(new.enemy_hand, new.enemy_deck, max_hand)

    logger.debug(f"Turn {new.turn} processed: energy {new.player_energy}/{new.enemy_energy}")
    return TurnResult(
        state=new,
        log=log,
        defeated=[*player_outcome.defeated, *enemy_outcome.defeated],
        player_drew=player_card,
        enemy_drew=enemy_card,
    )


def process_turn(state: GameState, difficulty: str | None = None, *, formulas: BattleFormulas | None = None) -> GameState:
    """Return the state after one full turn; ``state`` itself is left untouched."""
    return run_turn(state, difficulty, formulas=formulas).state
