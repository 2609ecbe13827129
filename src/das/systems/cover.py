"""
Cover identity stress and consistency checks.

Stress grows with time spent under cover and with the number of legends
an agent has to keep straight:

    total = 10 + days // 30 + 2 * legends

Risk is high above 50 and moderate above 30.
"""

from dataclasses import dataclass, field

from ..state.schema import CoverIdentity, RiskLevel, clamp


BASE_STRESS = 10
DAYS_PER_STRESS_POINT = 30
STRESS_PER_LEGEND = 2
HIGH_RISK_ABOVE = 50
MODERATE_RISK_ABOVE = 30


@dataclass
class CoverStressReport:
    base_stress: int
    time_stress: int
    legend_stress: int

    @property
    def total_stress(self) -> int:
        return self.base_stress + self.time_stress + self.legend_stress

    @property
    def stress_level(self) -> int:
        """Total clamped to the agent stress scale."""
        return clamp(self.total_stress, 0, 100)

    @property
    def risk_level(self) -> RiskLevel:
        if self.total_stress > HIGH_RISK_ABOVE:
            return RiskLevel.HIGH
        if self.total_stress > MODERATE_RISK_ABOVE:
            return RiskLevel.MODERATE
        return RiskLevel.LOW

    def to_dict(self) -> dict:
        return {
            "totalStress": self.total_stress,
            "baseStress": self.base_stress,
            "timeStress": self.time_stress,
            "legendStress": self.legend_stress,
            "riskLevel": self.risk_level.value,
        }


def cover_stress(cover: CoverIdentity, days_under_cover: int) -> CoverStressReport:
    if days_under_cover < 0:
        raise ValueError("Days under cover cannot be negative")
    return CoverStressReport(
        base_stress=BASE_STRESS,
        time_stress=days_under_cover // DAYS_PER_STRESS_POINT,
        legend_stress=len(cover.legends) * STRESS_PER_LEGEND,
    )


@dataclass
class CoverValidation:
    issues: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues


def validate_cover(cover: CoverIdentity) -> CoverValidation:
    """List the gaps in a cover identity."""
    result = CoverValidation()
    if not cover.identity.strip():
        result.issues.append("Cover identity must have a name.")
    if not cover.occupation.strip():
        result.issues.append("Cover identity must have a profession.")
    if not cover.legends:
        result.issues.append("Cover identity should have supporting legends.")
    if not cover.safe_houses:
        result.issues.append("Consider establishing safe houses for this cover.")
    return result
