"""
Tests for cover identities, cover stress scoring, bonds and resources.
"""

import pytest

from das.state.schema import CoverIdentity, RiskLevel, TrustLevel
from das.systems.cover import cover_stress, validate_cover


class TestCoverStress:
    """Tests for the stress formula: 10 + days//30 + 2*legends."""

    def _cover(self, legends: int) -> CoverIdentity:
        cover = CoverIdentity(active=True, identity="Dale Cooper", occupation="Insurance adjuster")
        for i in range(legends):
            cover.add_legend(f"legend-{i}", "backstopped")
        return cover

    def test_fresh_cover(self):
        report = cover_stress(self._cover(0), 0)
        assert report.total_stress == 10
        assert report.risk_level == RiskLevel.LOW

    def test_components(self):
        report = cover_stress(self._cover(3), 95)
        assert (report.base_stress, report.time_stress, report.legend_stress) == (10, 3, 6)
        assert report.total_stress == 19

    @pytest.mark.parametrize("days,legends,risk", [
        (600, 0, RiskLevel.LOW),        # 30
        (630, 0, RiskLevel.MODERATE),   # 31
        (900, 5, RiskLevel.MODERATE),   # 50
        (930, 5, RiskLevel.HIGH),       # 51
    ])
    def test_risk_thresholds(self, days, legends, risk):
        assert cover_stress(self._cover(legends), days).risk_level == risk

    def test_negative_days_rejected(self):
        with pytest.raises(ValueError):
            cover_stress(self._cover(0), -1)

    def test_stress_level_clamped(self):
        report = cover_stress(self._cover(0), 30 * 200)
        assert report.total_stress == 210
        assert report.stress_level == 100


class TestCoverIdentity:
    """Tests for cover attachments and validation."""

    def test_inactive_cover_rejects_attachments(self):
        cover = CoverIdentity()
        assert not cover.add_legend("college", "Miskatonic alumnus")
        assert not cover.add_safe_house("Arkham")
        assert cover.legends == {}

    def test_safe_house_security_clamped(self):
        cover = CoverIdentity(active=True)
        cover.add_safe_house("Dunwich", security=15)
        cover.add_safe_house("Innsmouth", security=0)
        assert [h.security for h in cover.safe_houses] == [10, 1]

    def test_validation_flags_gaps(self):
        result = validate_cover(CoverIdentity(active=True, identity=" ", occupation="clerk"))

        assert not result.valid
        assert "Cover identity must have a name." in result.issues
        assert len(result.issues) == 3

    def test_complete_cover_validates(self):
        cover = CoverIdentity(active=True, identity="Dale", occupation="Adjuster")
        cover.add_legend("employer", "Twin Peaks Mutual")
        cover.add_safe_house("Great Northern")
        assert validate_cover(cover).valid


class TestManagerCover:
    """Tests for cover, bonds and resources through the manager."""

    def test_create_and_stress(self, manager, agent):
        manager.create_cover_identity(agent.id, "Dale", "Adjuster")
        assert manager.add_legend(agent.id, "employer", "Twin Peaks Mutual")
        manager.add_field_expertise(agent.id, "Insurance law", "advanced")

        report = manager.apply_cover_stress(agent.id, 60)

        assert report.total_stress == 14
        assert manager.get_agent(agent.id).stress_level == 14

    def test_deactivated_cover_refuses_legends(self, manager, agent):
        manager.create_cover_identity(agent.id, "Dale", "Adjuster")
        manager.deactivate_cover(agent.id)
        assert not manager.add_legend(agent.id, "employer", "Twin Peaks Mutual")

    @pytest.mark.parametrize("strength,clamped,trust", [
        (12, 10, TrustLevel.HIGH),
        (8, 8, TrustLevel.HIGH),
        (5, 5, TrustLevel.MODERATE),
        (3, 3, TrustLevel.LOW),
        (-2, 0, TrustLevel.LOW),
    ])
    def test_bond_strength_and_trust(self, manager, agent, strength, clamped, trust):
        bond = manager.add_or_update_bond(agent.id, "Sister", "family", strength)
        assert bond.strength == clamped
        assert bond.trust_level == trust

    def test_bond_update_in_place(self, manager, agent):
        manager.add_or_update_bond(agent.id, "Sister", "family", 5)
        manager.add_or_update_bond(agent.id, "Sister", "estranged", 2)

        bonds = manager.get_agent(agent.id).bonds
        assert len(bonds) == 1
        assert (bonds[0].relationship, bonds[0].strength) == ("estranged", 2)

    def test_bond_update_rederives_trust(self, manager, agent):
        manager.add_or_update_bond(agent.id, "Sister", "family", 5)
        bond = manager.add_or_update_bond(agent.id, "Sister", "family", 9)

        assert bond.trust_level == TrustLevel.HIGH
        bond = manager.add_or_update_bond(agent.id, "Sister", "estranged", 1)
        assert bond.trust_level == TrustLevel.LOW

    def test_resources(self, manager, agent):
        assert manager.allocate_resource(agent.id, "funding", 500) == 500
        assert manager.use_resource(agent.id, "funding", 200)
        assert not manager.use_resource(agent.id, "funding", 1000)
        assert manager.get_agent(agent.id).resources.funding == 300

    def test_unknown_resource(self, manager, agent):
        with pytest.raises(ValueError):
            manager.allocate_resource(agent.id, "nukes", 1)
