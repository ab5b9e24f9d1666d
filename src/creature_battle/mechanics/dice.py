"""Random rolls for crits, dodges and proc chances — pure math, no I/O.

Every roll draws from an injected ``random.Random`` so battles can be replayed
from a seed. Callers that pass nothing share the module-level source.
"""
from __future__ import annotations

import random

_shared_rng = random.Random()


def get_rng(rng: random.Random | None = None) -> random.Random:
    """Return the given source, or the shared module-level one."""
    return rng if rng is not None else _shared_rng


def seed_shared_rng(seed: int | None) -> None:
    _shared_rng.seed(seed)


def roll_chance(probability: float, rng: random.Random | None = None) -> bool:
    """True with the given probability in [0, 1]."""
    return get_rng(rng).random() < probability


def roll_percent(chance: float, rng: random.Random | None = None) -> bool:
    """Percentile check, inclusive: succeeds when d100 <= chance."""
    return get_rng(rng).random() * 100 <= chance


def roll_variance(low: float, high: float, rng: random.Random | None = None) -> float:
    """Uniform multiplier in [low, high]."""
    return get_rng(rng).uniform(low, high)
