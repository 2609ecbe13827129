"""
Tests for dice rolling and skill checks.
"""

import random

import pytest

from das.tools.dice import CheckResult, roll, roll_d10, skill_check


class TestRoll:
    """Tests for the uniform roll primitive."""

    def test_range(self):
        rng = random.Random(7)
        results = {roll_d10(rng) for _ in range(500)}
        assert results == set(range(1, 11))

    def test_one_sided_die(self):
        assert roll(1) == 1

    @pytest.mark.parametrize("sides", [0, -4])
    def test_needs_a_side(self, sides):
        with pytest.raises(ValueError):
            roll(sides)

    def test_seeded_rolls_repeat(self):
        first = [roll(100, random.Random(42)) for _ in range(3)]
        second = [roll(100, random.Random(42)) for _ in range(3)]
        assert first == second


class TestSkillCheck:
    """Tests for the d100 roll-under check."""

    def test_success_is_roll_under(self):
        rng = random.Random(3)
        for _ in range(50):
            result = skill_check("Firearms", 40, rng=rng)
            assert result.success == (result.roll <= 40)
            assert result.margin == abs(40 - result.roll)

    def test_skill_zero_never_succeeds(self):
        rng = random.Random(11)
        assert not any(skill_check("Occult", 0, rng=rng).success for _ in range(50))

    @pytest.mark.parametrize("value,expected", [
        (1, "critical success"),
        (100, "critical failure"),
    ])
    def test_criticals(self, value, expected):
        result = CheckResult(
            skill="Alertness", skill_value=50, roll=value, difficulty=50,
            success=value <= 50, margin=abs(50 - value),
        )
        assert result.narrative == expected

    def test_narrow_and_solid(self):
        solid = CheckResult("Search", 70, 30, 50, True, 40)
        narrow = CheckResult("Search", 70, 65, 50, True, 5)
        assert solid.narrative == "solid success"
        assert narrow.narrative == "narrow success"

    def test_difficulty_is_reported_only(self):
        result = CheckResult("HUMINT", 30, 10, 50, True, 20)
        assert result.success
        assert not result.difficulty_met

    def test_to_dict(self):
        data = skill_check("Firearms", 60, 40, rng=random.Random(1)).to_dict()
        assert data["skill"] == "Firearms"
        assert data["difficulty"] == 40
        assert data["difficultyMet"] is True
        assert set(data) >= {"roll", "success", "criticalSuccess", "criticalFailure", "narrative"}
