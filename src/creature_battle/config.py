"""Runtime configuration loaded from config.toml."""
from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from creature_battle.models.game_state import Difficulty

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config.toml"


class BattleSettings(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    difficulty: Difficulty = Difficulty.MEDIUM
    seed: Optional[int] = None
    turns: int = Field(default=12, ge=1)
    log_level: str = "WARNING"
    roster_file: str = ""


def _load_config(path: Path | None = None) -> dict[str, Any]:
    """Raw config.toml contents, or an empty dict when the file is missing."""
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    return {}


def load_config(path: Path | None = None) -> BattleSettings:
    raw = _load_config(path)
    battle = raw.get("battle", {})
    return BattleSettings(
        difficulty=battle.get("difficulty", Difficulty.MEDIUM),
        seed=battle.get("seed"),
        turns=battle.get("turns", 12),
        log_level=raw.get("logging", {}).get("level", "WARNING"),
        roster_file=raw.get("content", {}).get("roster_file", ""),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
