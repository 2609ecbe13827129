"""
Tests for the command registry.
"""

from das.interface.command_registry import CommandCategory, CommandRegistry, fuzzy_match
from das.interface.commands import build_registry


class TestFuzzyMatch:
    def test_prefix_beats_scattered(self):
        _, prefix = fuzzy_match("inv", "INVESTIGATE")
        _, scattered = fuzzy_match("ivt", "INVESTIGATE")
        assert prefix > scattered

    def test_no_match(self):
        assert fuzzy_match("xyz", "STATUS")[0] is False


class TestCommandRegistry:
    """Lookup, ordering and help text."""

    def test_directive_order(self):
        assert build_registry().names() == [
            "INVESTIGATE", "ENGAGE", "RETREAT", "CONTAIN", "RESEARCH",
            "STATUS", "DEBRIEF", "REPORT", "ALERT", "ESCALATE", "SANITIZE",
            "HELP", "CONFIG",
            "AGENT", "SANITY", "RECOVER", "WOUND", "HEAL", "TEAM", "DYNAMICS", "ROLL",
            "THREAT", "BRIEF", "NARRATE", "CONTEXT",
        ]

    def test_lookup_ignores_case(self):
        registry = build_registry()
        assert registry.get("sanitize").name == "SANITIZE"
        assert "Escalate" in registry
        assert registry.get("TELEPORT") is None

    def test_register_upper_cases(self):
        registry = CommandRegistry()

        @registry.add("ping", "", "Ping", CommandCategory.SYSTEM)
        def cmd_ping(dispatcher, args):
            return None

        assert registry.names() == ["PING"]
        assert registry.get("ping").help_line == "PING - Ping"

    def test_by_category(self):
        grouped = build_registry().by_category()
        assert [c.name for c in grouped[CommandCategory.SYSTEM]] == ["HELP", "CONFIG"]

    def test_search(self):
        results = build_registry().search("san")
        assert results[0][0].name in ("SANITY", "SANITIZE")
