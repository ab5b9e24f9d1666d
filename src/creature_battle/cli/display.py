"""Battle display helpers — fields, effects, synergies and the battle log."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from creature_battle.mechanics.energy import calculate_creature_power
from creature_battle.mechanics.synergy import Synergy, create_synergy_effect_data
from creature_battle.models.creature import Creature
from creature_battle.models.game_state import GameState

console = Console()

RARITY_COLORS = {
    "Common": "white",
    "Rare": "cyan",
    "Epic": "magenta",
    "Legendary": "yellow",
}


def _health_bar(current: int, maximum: int, width: int = 12) -> str:
    pct = max(0.0, current / maximum) if maximum > 0 else 0.0
    filled = int(pct * width)
    color = "green" if pct > 0.5 else ("yellow" if pct > 0.2 else "red")
    return f"[{color}]{'█' * filled}[/{color}][dim]{'░' * (width - filled)}[/dim]"


class BattleDisplay:
    def __init__(self, target: Console | None = None) -> None:
        self.console = target or console

    def show_turn_header(self, state: GameState) -> None:
        self.console.print(Panel(
            f"[bold]Turn {state.turn}[/bold]  "
            f"[green]Player energy {state.player_energy}[/green]  "
            f"[red]Enemy energy {state.enemy_energy}[/red]",
            box=box.HEAVY,
            border_style="blue",
        ))

    def field_table(self, title: str, creatures: list[Creature], style: str = "green") -> Table:
        table = Table(title=title, box=box.ROUNDED, title_style=f"bold {style}")
        table.add_column("Creature")
        table.add_column("HP")
        table.add_column("Atk P/M", justify="right")
        table.add_column("Def P/M", justify="right")
        table.add_column("Power", justify="right")
        table.add_column("Effects")

        for creature in creatures:
            stats = creature.battle_stats or {}
            rarity = str(getattr(creature.rarity, "value", creature.rarity))
            color = RARITY_COLORS.get(rarity, "white")
            effects = " ".join(
                f"{e.icon}{e.name}({e.duration})" for e in creature.active_effects if e is not None
            )
            if creature.is_defending:
                effects = f"[bold]DEF[/bold] {effects}"
            if creature.next_attack_bonus:
                effects = f"[yellow]+{creature.next_attack_bonus} charged[/yellow] {effects}"
            table.add_row(
                f"[{color}]{creature.species_name}[/{color}]",
                f"{_health_bar(creature.current_health, creature.max_health)} {creature.current_health}/{creature.max_health}",
                f"{stats.get('physicalAttack', 0)}/{stats.get('magicalAttack', 0)}",
                f"{stats.get('physicalDefense', 0)}/{stats.get('magicalDefense', 0)}",
                str(calculate_creature_power(creature)),
                effects,
            )
        return table

    def show_fields(self, state: GameState) -> None:
        self.console.print(self.field_table("Player", state.player_field, "green"))
        self.console.print(self.field_table("Enemy", state.enemy_field, "red"))

    def show_synergies(self, synergies: list[Synergy]) -> None:
        if not synergies:
            return
        text = Text()
        for data in create_synergy_effect_data(synergies):
            text.append(f"  {data['message']}\n", style=data["color"])
        self.console.print(Panel(text, title="Synergies", border_style="cyan", box=box.ROUNDED))

    def show_log(self, lines: list[str]) -> None:
        for line in lines:
            self.console.print(f"  [dim]>[/dim] {line}")

    def show_result(self, winner: str | None, turns: int) -> None:
        if winner is None:
            message = f"[bold yellow]No victor after {turns} turns.[/bold yellow]"
        else:
            message = f"[bold green]{winner.capitalize()} side wins on turn {turns}![/bold green]"
        self.console.print(Panel(message, box=box.DOUBLE, border_style="yellow"))

    def show_item_table(self, title: str, rows: list[tuple[str, str, str, str]]) -> None:
        table = Table(title=title, box=box.SIMPLE_HEAVY)
        table.add_column("Category")
        table.add_column("Effect")
        table.add_column("Summary")
        table.add_column("Description")
        for row in rows:
            table.add_row(*row)
        self.console.print(table)
