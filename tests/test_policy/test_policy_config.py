"""Tests for policy loading and per-type resolution."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from repo_lockdown.github_client.models import ItemType
from repo_lockdown.policy.config import (
    ConfigResolver,
    Policy,
    PolicyError,
    load_policy,
    load_policy_file,
)


class TestLoadPolicy:
    """Test YAML policy parsing and validation."""

    def test_empty_document_uses_defaults(self) -> None:
        """Test that an empty file yields the documented defaults."""
        policy = load_policy("")

        assert policy.skip_created_before is None
        assert policy.exempt_labels == ()
        assert policy.comment is None
        assert policy.label is None
        assert policy.close is True
        assert policy.lock is True
        assert policy.only is None

    def test_camel_case_options(self) -> None:
        """Test options written the way the config file documents them."""
        policy = load_policy(
            """
skipCreatedBefore: 2020-01-01
exemptLabels:
  - keep-open
  - help wanted
comment: Closing, this repository is a mirror.
label: wontfix
close: false
only: pulls
"""
        )

        assert policy.skip_created_before == datetime(2020, 1, 1, tzinfo=timezone.utc)
        assert policy.exempt_labels == ("keep-open", "help wanted")
        assert policy.comment == "Closing, this repository is a mirror."
        assert policy.label == "wontfix"
        assert policy.close is False
        assert policy.lock is True
        assert policy.only is ItemType.PULLS

    def test_false_disables_options(self) -> None:
        """Test that false turns text, timestamp and label options off."""
        policy = load_policy(
            "skipCreatedBefore: false\nexemptLabels: false\n"
            "comment: false\nlabel: false\nonly: false\n"
        )

        assert policy.skip_created_before is None
        assert policy.exempt_labels == ()
        assert policy.comment is None
        assert policy.label is None
        assert policy.only is None

    def test_timestamp_with_offset_kept_aware(self) -> None:
        """Test that a full timestamp keeps its instant."""
        policy = load_policy('skipCreatedBefore: "2020-01-01T10:00:00+02:00"')

        assert policy.skip_created_before == datetime(
            2020, 1, 1, 8, 0, tzinfo=timezone.utc
        )

    def test_naive_timestamp_is_utc(self) -> None:
        """Test that a timestamp without offset is read as UTC."""
        policy = load_policy('skipCreatedBefore: "2020-01-01T10:00:00"')

        assert policy.skip_created_before == datetime(
            2020, 1, 1, 10, 0, tzinfo=timezone.utc
        )

    def test_invalid_only(self) -> None:
        """Test that only accepts issues or pulls."""
        with pytest.raises(PolicyError, match="Invalid policy"):
            load_policy("only: discussions")

    def test_unknown_option(self) -> None:
        """Test that typos in option names are reported."""
        with pytest.raises(PolicyError, match="Invalid policy"):
            load_policy("lokc: true")

    def test_invalid_yaml(self) -> None:
        """Test malformed YAML."""
        with pytest.raises(PolicyError, match="Invalid YAML"):
            load_policy("comment: [unclosed")

    def test_non_mapping_document(self) -> None:
        """Test a document that is not a mapping."""
        with pytest.raises(PolicyError, match="mapping"):
            load_policy("- close\n- lock\n")

    def test_policy_error_is_value_error(self) -> None:
        """Test PolicyError can be handled as ValueError."""
        with pytest.raises(ValueError):
            load_policy("close: maybe-later")

    def test_load_policy_file(self, tmp_path: Path) -> None:
        """Test loading from disk."""
        config = tmp_path / "lockdown.yml"
        config.write_text("lock: false\n")

        assert load_policy_file(config).lock is False

    def test_load_policy_file_missing(self, tmp_path: Path) -> None:
        """Test loading a file that does not exist."""
        with pytest.raises(PolicyError, match="does not exist"):
            load_policy_file(tmp_path / "missing.yml")


class TestConfigResolver:
    """Test per-type overlay resolution."""

    def test_default_when_type_has_no_overrides(self) -> None:
        """Test fallback to top-level values."""
        resolver = ConfigResolver(Policy(comment="Closing"))

        assert resolver.resolve(ItemType.ISSUES, "comment") == "Closing"
        assert resolver.resolve(ItemType.PULLS, "comment") == "Closing"

    def test_type_value_wins(self) -> None:
        """Test that a type-specific value overrides the default."""
        policy = load_policy(
            "comment: Default\nissues:\n  comment: Issues are disabled\n"
        )
        resolver = ConfigResolver(policy)

        assert resolver.resolve(ItemType.ISSUES, "comment") == "Issues are disabled"
        assert resolver.resolve(ItemType.PULLS, "comment") == "Default"

    def test_explicit_false_wins_over_default(self) -> None:
        """Test that false in an overlay is not treated as unset."""
        policy = load_policy(
            "close: true\nlock: true\ncomment: Default\n"
            "pulls:\n  close: false\n  comment: false\n"
        )
        resolver = ConfigResolver(policy)

        assert resolver.resolve(ItemType.PULLS, "close") is False
        assert resolver.resolve(ItemType.PULLS, "comment") is None
        assert resolver.resolve(ItemType.PULLS, "lock") is True
        assert resolver.resolve(ItemType.ISSUES, "close") is True

    def test_explicit_empty_labels_win_over_default(self) -> None:
        """Test that an empty exempt list in an overlay is honoured."""
        policy = load_policy("exemptLabels: [keep]\nissues:\n  exemptLabels: []\n")
        resolver = ConfigResolver(policy)

        assert resolver.resolve(ItemType.ISSUES, "exempt_labels") == ()
        assert resolver.resolve(ItemType.PULLS, "exempt_labels") == ("keep",)

    def test_overlay_defaults_do_not_leak(self) -> None:
        """Test that unset overlay fields fall through even though they have
        model defaults."""
        policy = load_policy("close: true\nlock: true\nissues:\n  label: mirror\n")
        resolver = ConfigResolver(policy)

        assert resolver.resolve(ItemType.ISSUES, "label") == "mirror"
        assert resolver.resolve(ItemType.ISSUES, "close") is True
        assert resolver.resolve(ItemType.ISSUES, "lock") is True

    def test_unknown_key_is_disabled(self) -> None:
        """Test that a key without any value resolves to None."""
        resolver = ConfigResolver(Policy())

        assert resolver.resolve(ItemType.ISSUES, "perform") is None
