"""
Dice rolling for DAS.

One uniform primitive, ``roll(sides)``, plus the d100 roll-under skill
check used by field agents. Pass a seeded ``random.Random`` for
reproducible rolls.
"""

import random
from dataclasses import dataclass


def roll(sides: int, rng: random.Random | None = None) -> int:
    """Roll a single die with the given number of sides (1..sides)."""
    if sides < 1:
        raise ValueError(f"A die needs at least one side, got {sides}")
    return (rng or random).randint(1, sides)


def roll_d10(rng: random.Random | None = None) -> int:
    return roll(10, rng)


def roll_d100(rng: random.Random | None = None) -> int:
    return roll(100, rng)


@dataclass
class CheckResult:
    """Result of a d100 roll-under check."""
    skill: str
    skill_value: int
    roll: int
    difficulty: int
    success: bool
    margin: int  # Distance between roll and skill value

    @property
    def critical_success(self) -> bool:
        return self.roll == 1

    @property
    def critical_failure(self) -> bool:
        return self.roll == 100

    @property
    def difficulty_met(self) -> bool:
        return self.skill_value >= self.difficulty

    @property
    def narrative(self) -> str:
        """Narrative description of the result."""
        if self.critical_success:
            return "critical success"
        if self.critical_failure:
            return "critical failure"
        if self.success:
            return "solid success" if self.margin >= 20 else "narrow success"
        return "clear failure" if self.margin >= 20 else "near miss"

    def to_dict(self) -> dict:
        return {
            "skill": self.skill,
            "skillValue": self.skill_value,
            "roll": self.roll,
            "difficulty": self.difficulty,
            "success": self.success,
            "criticalSuccess": self.critical_success,
            "criticalFailure": self.critical_failure,
            "difficultyMet": self.difficulty_met,
            "margin": self.margin,
            "narrative": self.narrative,
        }


def skill_check(
    skill: str,
    skill_value: int,
    difficulty: int = 50,
    rng: random.Random | None = None,
) -> CheckResult:
    """
    Roll a d100 skill check.

    Args:
        skill: The skill being used (for display)
        skill_value: The agent's rating, 0-100
        difficulty: Rating the task calls for (reported, not rolled against)
        rng: Optional seeded generator

    Returns:
        CheckResult; success when the roll is at or under the skill value
    """
    result = roll_d100(rng)
    success = result <= skill_value
    margin = skill_value - result if success else result - skill_value

    return CheckResult(
        skill=skill,
        skill_value=skill_value,
        roll=result,
        difficulty=difficulty,
        success=success,
        margin=margin,
    )
