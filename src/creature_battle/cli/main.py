"""Typer CLI application."""
from __future__ import annotations

import random
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="creature-battle",
    help="Turn-based creature battle simulator",
    no_args_is_help=False,
)


def _pick_target(creatures) -> int | None:
    """Index of the weakest living creature, or None when the field is empty."""
    living = [(c.current_health, i) for i, c in enumerate(creatures) if c.is_alive]
    if not living:
        return None
    return min(living)[1]


def _play_side(session, side, tools: list, spells: list, rng: random.Random) -> None:
    from creature_battle.models.game_state import Side

    own = session.state.field_for(side)
    for index in range(len(own)):
        creature = session.state.field_for(side)[index]
        if not creature.is_alive:
            continue
        target = _pick_target(session.state.field_for(side.opponent))
        if target is None:
            return

        roll = rng.random()
        energy = session.state.player_energy if side is Side.PLAYER else session.state.enemy_energy
        affordable = [s for s in spells if s.energy_cost <= energy]
        if affordable and roll < 0.25:
            spell = rng.choice(affordable)
            if spell.spell_effect in ("Shield", "Echo"):
                session.cast_spell(side, index, side, index, spell)
            else:
                session.cast_spell(side, index, side.opponent, target, spell)
        elif tools and roll < 0.35:
            session.use_tool(side, index, rng.choice(tools))
        elif creature.current_health < creature.max_health * 0.25 and roll < 0.5:
            session.defend(side, index)
        else:
            session.attack(side, index, target)


@app.command()
def simulate(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
    difficulty: Optional[str] = typer.Option(None, "--difficulty", "-d", help="easy, medium, hard or expert"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    turns: Optional[int] = typer.Option(None, "--turns", "-t", help="Maximum number of turns"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show the result"),
) -> None:
    """Auto-play a battle between the demo rosters."""
    from creature_battle.cli.display import BattleDisplay
    from creature_battle.config import configure_logging, load_config
    from creature_battle.content.loader import load_rosters, load_spells, load_tools
    from creature_battle.engine.session import BattleSession
    from creature_battle.mechanics.dice import seed_shared_rng
    from creature_battle.models.game_state import Difficulty, Side

    settings = load_config(config)
    configure_logging(settings.log_level)

    try:
        level = Difficulty(difficulty) if difficulty else settings.difficulty
    except ValueError:
        raise typer.BadParameter(f"Unknown difficulty: {difficulty}")
    seed = seed if seed is not None else settings.seed
    max_turns = turns or settings.turns

    seed_shared_rng(seed)
    rng = random.Random(seed)
    rosters = load_rosters(settings.roster_file)
    tools = list(load_tools(settings.roster_file).values())
    spells = list(load_spells(settings.roster_file).values())

    session = BattleSession.start(rosters["player"], rosters["enemy"], level.value, rng=rng)
    display = BattleDisplay()

    while session.turn < max_turns and session.winner is None:
        result = session.end_turn()
        log_start = len(session.log) - len(result.log)
        for side in (Side.PLAYER, Side.ENEMY):
            _play_side(session, side, tools, spells, rng)
        if not quiet:
            display.show_turn_header(session.state)
            display.show_synergies(session.synergies(Side.PLAYER))
            display.show_fields(session.state)
            display.show_log(session.log[log_start:])

    winner = session.winner
    display.show_result(winner.value if winner else None, session.turn)


@app.command()
def items(
    magic: float = typer.Option(5, "--magic", "-m", help="Caster magic used to size spells"),
) -> None:
    """Show the base tool and spell effect tables."""
    from creature_battle.cli.display import BattleDisplay
    from creature_battle.mechanics.item_tables import SPELL_EFFECTS, TOOL_EFFECTS, magic_power
    from creature_battle.mechanics.items import describe_item
    from creature_battle.models.item import SpellDef, ToolDef

    display = BattleDisplay()

    tool_rows = []
    for (category, tag), effect in TOOL_EFFECTS.items():
        summary = ", ".join(f"{k} {v:+g}" for k, v in effect.stat_changes.items())
        if effect.health_change:
            summary += f" heal {effect.health_change:g}"
        if effect.health_over_time:
            summary += f" hot {effect.health_over_time:g}"
        if effect.charge_effect:
            summary += f" charge {effect.charge_effect.target_stat}"
        summary += f" ({effect.duration}t)"
        tool = ToolDef(tool_type=category, tool_effect=tag)
        tool_rows.append((category.value, tag.value, summary.strip(), describe_item(tool)))
    display.show_item_table("Tools", tool_rows)

    power = magic_power(magic)
    spell_rows = []
    for (category, tag), build in SPELL_EFFECTS.items():
        effect = build(power)
        parts = []
        if effect.damage:
            parts.append(f"damage {effect.damage:.0f}")
        if effect.healing:
            parts.append(f"heal {effect.healing:.0f}")
        if effect.self_heal:
            parts.append(f"drain {effect.self_heal:.0f}")
        if effect.health_over_time:
            parts.append(f"hot {effect.health_over_time:+g}")
        if effect.prepare_effect:
            parts.append(f"charged {effect.prepare_effect.damage:.0f}")
        parts.append(f"({effect.duration}t)")
        spell = SpellDef(spell_type=category, spell_effect=tag)
        spell_rows.append((category.value, tag.value, " ".join(parts), describe_item(spell)))
    display.show_item_table("Spells", spell_rows)


if __name__ == "__main__":
    app()
