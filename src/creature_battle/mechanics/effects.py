"""Timed progression of active effects — pure functions, no I/O.

Charge effects ramp a stat bonus linearly over ``max_turns`` and then release a
one-shot attack bonus. Echo effects pulse their health-over-time in a wave
instead of ticking for a constant amount. Every other kind is static apart from
the duration countdown, which the turn processor performs after ``advance``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from creature_battle.models.effect import Effect, EffectKind
from creature_battle.utils import round_half_up

DEFAULT_CHARGE_TURNS = 3


def elapsed_turns(effect: Effect, current_turn: int) -> int:
    return current_turn - (effect.start_turn or 0)


def charge_progress(effect: Effect, current_turn: int) -> float:
    """Fraction of the charge completed, in [0, 1]."""
    charge = effect.charge_effect
    if charge is None:
        return 0.0
    max_turns = charge.max_turns or DEFAULT_CHARGE_TURNS
    return min(elapsed_turns(effect, current_turn) / max_turns, 1.0)


def echo_intensity(elapsed: int) -> float:
    """Oscillating multiplier: 0.8 + 0.3 * sin(elapsed * pi / 3)."""
    return 0.8 + math.sin(elapsed * math.pi / 3) * 0.3


def advance(effect: Effect, current_turn: int) -> Effect:
    """Recompute the time-dependent fields of an effect for ``current_turn``.

    Returns a new Effect; the input is never modified. A charge that reaches
    full progress with a burst to release comes back with duration 0.
    """
    if effect.kind == EffectKind.CHARGE and effect.charge_effect is not None:
        charge = effect.charge_effect
        progress = charge_progress(effect, current_turn)
        if progress >= 1.0 and charge.final_burst:
            done = charge.model_copy(update={"current_bonus": 0, "released": True}, deep=True)
            return effect.model_copy(update={"charge_effect": done, "duration": 0}, deep=True)
        bonus = math.floor(charge.per_turn_bonus * progress)
        ramped = charge.model_copy(update={"current_bonus": max(0, bonus)}, deep=True)
        return effect.model_copy(update={"charge_effect": ramped}, deep=True)

    if effect.kind == EffectKind.ECHO:
        base = effect.base_health_over_time
        if base is None:
            base = effect.health_over_time
        if not base:
            return effect.model_copy(deep=True)
        pulse = round_half_up(base * echo_intensity(elapsed_turns(effect, current_turn)))
        return effect.model_copy(update={"health_over_time": pulse, "base_health_over_time": base}, deep=True)

    return effect.model_copy(deep=True)


def charge_burst(effect: Effect) -> int | float:
    """Attack bonus released by a charge that ``advance`` just completed, else 0."""
    charge = effect.charge_effect
    if effect.kind != EffectKind.CHARGE or charge is None:
        return 0
    if not charge.released:
        return 0
    return charge.final_burst


def is_expired(effect: Effect | None) -> bool:
    if effect is None or not isinstance(effect, Effect):
        return True
    return effect.duration <= 0


def purge_expired(effects: list[Effect | None]) -> list[Effect]:
    return [e for e in effects if not is_expired(e)]


def tick_duration(effect: Effect) -> Effect:
    return effect.model_copy(update={"duration": effect.duration - 1}, deep=True)


@dataclass
class ChargeStatus:
    effect_id: str
    progress: float
    turns_remaining: int
    is_ready: bool


def charge_status(effect: Effect, current_turn: int) -> ChargeStatus | None:
    """Progress report for a charging effect, as a percentage."""
    charge = effect.charge_effect
    if effect.kind != EffectKind.CHARGE or charge is None:
        return None
    max_turns = charge.max_turns or DEFAULT_CHARGE_TURNS
    progress = charge_progress(effect, current_turn) * 100
    return ChargeStatus(
        effect_id=effect.id,
        progress=progress,
        turns_remaining=max(0, max_turns - elapsed_turns(effect, current_turn)),
        is_ready=progress >= 100,
    )
