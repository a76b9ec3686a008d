"""Tests for error trail rendering."""

from docmapper.services.error_trail import ErrorTrail, truncate_message


def test_entries_joined_in_order():
    trail = ErrorTrail()
    trail.add("first")
    trail.add("  ")
    trail.add(None)
    trail.add("second ")
    assert trail.render() == "first; second"
    assert len(trail) == 2


def test_empty_trail_renders_nothing():
    trail = ErrorTrail()
    assert not trail
    assert trail.render() is None


def test_truncation_keeps_prefix():
    message = "x" * 1500
    truncated = truncate_message(message)
    assert len(truncated) == 1000
    assert truncated == "x" * 997 + "..."


def test_short_message_untouched():
    assert truncate_message("ok") == "ok"
    assert truncate_message("y" * 1000) == "y" * 1000
    assert truncate_message(None) is None
