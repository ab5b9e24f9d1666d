"""Tests for src/creature_battle/mechanics/effects.py."""
from __future__ import annotations

import pytest

from creature_battle.mechanics.effects import (
    advance,
    charge_burst,
    charge_status,
    echo_intensity,
    is_expired,
    purge_expired,
    tick_duration,
)
from creature_battle.models.effect import ChargeEffect, Effect, EffectKind


def _charge(start_turn: int = 0, **overrides) -> Effect:
    spec = {"target_stat": "physicalAttack", "per_turn_bonus": 3, "max_turns": 3, "final_burst": 15}
    spec.update(overrides)
    return Effect(
        name="War Drum Effect",
        kind=EffectKind.CHARGE,
        duration=3,
        start_turn=start_turn,
        charge_effect=ChargeEffect(**spec),
    )


def _echo(amount: int = 10) -> Effect:
    return Effect(name="Echo Bell Effect", kind=EffectKind.ECHO, duration=5, health_over_time=amount)


class TestChargeAdvance:
    @pytest.mark.parametrize("turn, bonus", [(0, 0), (1, 1), (2, 2)])
    def test_ramp_floors_progress(self, turn, bonus):
        advanced = advance(_charge(), turn)
        assert advanced.charge_effect.current_bonus == bonus
        assert advanced.active_modifications().get("physicalAttack", 0) == bonus
        assert advanced.duration == 3

    def test_completion_releases_burst_once(self):
        advanced = advance(_charge(), 3)
        assert advanced.duration == 0
        assert advanced.charge_effect.released
        assert advanced.charge_effect.current_bonus == 0
        assert charge_burst(advanced) == 15

    def test_ramp_does_not_accumulate(self):
        effect = _charge()
        twice = advance(advance(effect, 1), 1)
        assert twice.charge_effect.current_bonus == 1

    def test_no_burst_while_charging(self):
        assert charge_burst(advance(_charge(), 2)) == 0

    def test_zero_burst_never_completes(self):
        advanced = advance(_charge(final_burst=0), 5)
        assert advanced.duration == 3
        assert advanced.charge_effect.current_bonus == 3

    def test_input_untouched(self):
        effect = _charge()
        advance(effect, 3)
        assert effect.duration == 3
        assert effect.charge_effect.current_bonus == 0
        assert not effect.charge_effect.released


class TestEchoAdvance:
    def test_intensity_wave(self):
        assert echo_intensity(0) == pytest.approx(0.8)
        assert echo_intensity(1) == pytest.approx(0.8 + 0.3 * 0.8660254)
        assert echo_intensity(3) == pytest.approx(0.8)
        assert echo_intensity(4) < 0.8

    @pytest.mark.parametrize("turn, expected", [(0, 8), (1, 11), (3, 8), (4, 5)])
    def test_pulse(self, turn, expected):
        assert advance(_echo(10), turn).health_over_time == expected

    def test_amplitude_does_not_compound(self):
        once = advance(_echo(10), 1)
        again = advance(once, 2)
        assert again.base_health_over_time == 10
        assert again.health_over_time == 11

    def test_negative_echo_pulses_damage(self):
        assert advance(_echo(-20), 0).health_over_time == -16

    def test_other_kinds_pass_through(self):
        effect = Effect(name="Plain", duration=2, stat_modifications={"initiative": 3}, health_over_time=4)
        advanced = advance(effect, 7)
        assert advanced.model_dump() == effect.model_dump()
        assert advanced is not effect


class TestExpiry:
    def test_tick_duration(self):
        assert tick_duration(Effect(name="x", duration=2)).duration == 1

    def test_is_expired(self):
        assert is_expired(None)
        assert is_expired(Effect(name="x", duration=0))
        assert not is_expired(Effect(name="x", duration=1))

    def test_purge(self):
        keep = Effect(name="keep", duration=1)
        effects = [None, Effect(name="gone", duration=0), keep]
        assert purge_expired(effects) == [keep]


class TestChargeStatus:
    def test_progress_report(self):
        status = charge_status(_charge(), 1)
        assert status.progress == pytest.approx(100 / 3)
        assert status.turns_remaining == 2
        assert not status.is_ready

    def test_ready(self):
        status = charge_status(_charge(start_turn=2), 5)
        assert status.progress == 100
        assert status.turns_remaining == 0
        assert status.is_ready

    def test_not_a_charge(self):
        assert charge_status(_echo(), 1) is None
