"""Tests for commit attribution and change classification."""

from types import SimpleNamespace

import pytest

from tracker.core.attribution import (
    attribute_commit,
    classify_change,
    describe_touched_files,
    is_merge_commit,
)
from tracker.models import ChangeType, DeveloperTag

ASTRO = SimpleNamespace(username="astro", developer_type=DeveloperTag.ASTRO)
BUNGEE = SimpleNamespace(username="bungee", developer_type=DeveloperTag.BUNGEE)
PROFILES = [ASTRO, BUNGEE]
ALIASES = {"astro": ["astro", "mauro"], "bungee": ["bungee", "raggy"]}


class TestAttributeCommit:
    """Tests for matching commit authors to developers."""

    def test_matches_author_name(self):
        assert attribute_commit("Astro Dev", None, PROFILES, ALIASES) is ASTRO

    def test_matches_login(self):
        assert attribute_commit("Someone", "bungee-gh", PROFILES, ALIASES) is BUNGEE

    def test_matches_alias(self):
        assert attribute_commit("Mauro Rossi", None, PROFILES, ALIASES) is ASTRO
        assert attribute_commit("RAGGY", None, PROFILES, ALIASES) is BUNGEE

    def test_no_match(self):
        assert attribute_commit("Jaina", "proudmoore", PROFILES, ALIASES) is None

    def test_first_profile_wins(self):
        """An author matching both developers goes to the first profile."""
        assert attribute_commit("astro and bungee", None, PROFILES, ALIASES) is ASTRO
        assert attribute_commit("astro and bungee", None, [BUNGEE, ASTRO], ALIASES) is BUNGEE

    def test_no_profiles(self):
        assert attribute_commit("Astro", None, [], ALIASES) is None

    def test_missing_aliases(self):
        assert attribute_commit("Mauro", None, PROFILES, {}) is None

    def test_blank_alias_matches_nothing(self):
        aliases = {"astro": ["", "   "], "bungee": ["raggy"]}

        assert attribute_commit("Jaina Proudmoore", None, PROFILES, aliases) is None
        assert attribute_commit("Raggy", None, PROFILES, aliases) is BUNGEE


class TestClassifyChange:
    """Tests for deriving change types from commit messages."""

    @pytest.mark.parametrize(
        "message,expected",
        [
            ("Fix crash on login", ChangeType.FIX),
            ("Squash a bug in targeting", ChangeType.FIX),
            ("feat: aspect swapping", ChangeType.FEATURE),
            ("Add interrupt whitelist", ChangeType.FEATURE),
            ("Remove dead code", ChangeType.DELETE),
            ("Initial commit", ChangeType.CREATE),
            ("Tweak cooldown timings", ChangeType.UPDATE),
            ("", ChangeType.UPDATE),
        ],
    )
    def test_classify(self, message, expected):
        assert classify_change(message) == expected

    def test_rules_are_ordered(self):
        """A fix that also adds something is still a fix."""
        assert classify_change("Fix and add tests") == ChangeType.FIX

    def test_case_insensitive(self):
        assert classify_change("REMOVE old files") == ChangeType.DELETE


class TestHelpers:
    """Tests for merge detection and file descriptions."""

    def test_merge_commit(self):
        assert is_merge_commit("Merge branch 'main' into dev") is True
        assert is_merge_commit("Merge pull request #4") is False
        assert is_merge_commit(None) is False

    def test_single_file(self):
        assert describe_touched_files(modified=["core.lua"]) == "core.lua"

    def test_duplicates_counted_once(self):
        assert describe_touched_files(["a.lua"], ["a.lua", "b.lua"], ["c.lua"]) == "Multiple files (3)"

    def test_no_files(self):
        assert describe_touched_files() == "Unknown file"
