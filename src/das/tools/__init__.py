"""Tools for DAS."""

from .dice import roll, roll_d10, roll_d100, skill_check, CheckResult

__all__ = ["roll", "roll_d10", "roll_d100", "skill_check", "CheckResult"]
