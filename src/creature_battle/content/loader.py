from __future__ import annotations
import tomllib
from pathlib import Path
from typing import Any

from creature_battle.models.creature import Creature
from creature_battle.models.item import SpellDef, ToolDef

CONTENT_DIR = Path(__file__).parent
DEFAULT_ROSTER_FILE = CONTENT_DIR / "rosters.toml"


def load_toml(filepath: Path) -> dict[str, Any]:
    with open(filepath, "rb") as f:
        return tomllib.load(f)


def _roster_path(path: str | Path | None) -> Path:
    if not path:
        return DEFAULT_ROSTER_FILE
    return Path(path)


def load_rosters(path: str | Path | None = None) -> dict[str, list[Creature]]:
    """Player and enemy rosters, keyed by side."""
    data = load_toml(_roster_path(path))
    return {
        "player": [Creature.model_validate(c) for c in data.get("player", [])],
        "enemy": [Creature.model_validate(c) for c in data.get("enemy", [])],
    }


def load_tools(path: str | Path | None = None) -> dict[str, ToolDef]:
    data = load_toml(_roster_path(path))
    tools = {}
    for entry in data.get("tools", []):
        tool = ToolDef.model_validate(entry)
        tools[tool.id] = tool
    return tools


def load_spells(path: str | Path | None = None) -> dict[str, SpellDef]:
    data = load_toml(_roster_path(path))
    spells = {}
    for entry in data.get("spells", []):
        spell = SpellDef.model_validate(entry)
        spells[spell.id] = spell
    return spells
