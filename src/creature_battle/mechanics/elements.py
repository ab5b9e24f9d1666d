"""Elemental matchups used by the default damage formula.

Pure mechanics — no I/O.
"""
from __future__ import annotations

# Attacker element -> defender elements it hits for extra damage.
ELEMENTAL_ADVANTAGES: dict[str, list[str]] = {
    "water": ["fire"],
    "fire": ["earth"],
    "earth": ["air"],
    "air": ["water"],
    "light": ["dark"],
    "dark": ["light"],
}

EFFECTIVENESS_MULTIPLIERS: dict[str, float] = {
    "very effective": 1.5,
    "effective": 1.25,
    "normal": 1.0,
    "not very effective": 0.75,
}


def get_effectiveness(attacker_element: str, defender_element: str) -> str:
    """Classify an elemental matchup.

    Light and dark are mutually very effective. The four-element cycle
    (water > fire > earth > air > water) is effective forward and not very
    effective in reverse. Everything else, including neutral, is normal.
    """
    a = (attacker_element or "neutral").lower()
    d = (defender_element or "neutral").lower()
    if d in ELEMENTAL_ADVANTAGES.get(a, []):
        if a in ("light", "dark"):
            return "very effective"
        return "effective"
    if a in ELEMENTAL_ADVANTAGES.get(d, []) and a not in ("light", "dark"):
        return "not very effective"
    return "normal"


def effectiveness_multiplier(effectiveness: str) -> float:
    return EFFECTIVENESS_MULTIPLIERS.get(effectiveness, 1.0)
