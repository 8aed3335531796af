"""Tests for preset and property validation."""

import pytest

from davrelay.presets.models import PropertyDefinition
from davrelay.presets.validator import (
    MAX_PROPERTIES_PER_PRESET,
    Rejected,
    Valid,
    is_valid_namespace,
    validate_preset,
    validate_property,
)


def _props(count, namespace="DAV:"):
    return [{"namespace": namespace, "name": f"prop{i}"} for i in range(count)]


class TestNamespace:

    @pytest.mark.parametrize("namespace", [
        "DAV:",
        "http://owncloud.org/ns",
        "https://example.com/ns?a=b&c=d",
        "urn:ietf:params:xml:ns:caldav",
    ])
    def test_accepted(self, namespace):
        assert is_valid_namespace(namespace)

    @pytest.mark.parametrize("namespace", [
        "",
        "DAV",
        "example.com/ns",
        "not a uri",
        "http://exa mple.com",
    ])
    def test_rejected(self, namespace):
        assert not is_valid_namespace(namespace)


class TestValidateProperty:

    def test_valid_property(self):
        prop = validate_property({"namespace": "DAV:", "name": "getetag"})
        assert prop == PropertyDefinition("DAV:", "getetag")

    def test_name_allows_colons_and_dots(self):
        assert validate_property({"namespace": "http://x.org/ns", "name": "a.b:c-d_e"}) is not None

    @pytest.mark.parametrize("raw", [
        None,
        "DAV:getetag",
        ["DAV:", "getetag"],
        {"namespace": "DAV:"},
        {"name": "getetag"},
        {"namespace": "", "name": "getetag"},
        {"namespace": "DAV:", "name": ""},
        {"namespace": "DAV:", "name": 5},
        {"namespace": "nope", "name": "getetag"},
        {"namespace": "DAV:", "name": "bad name"},
        {"namespace": "DAV:", "name": "x/><evil"},
        {"namespace": "DAV:", "name": "resourcetype\n"},
        {"namespace": "DAV:\n", "name": "resourcetype"},
    ])
    def test_invalid_property_dropped(self, raw):
        assert validate_property(raw) is None


class TestValidatePreset:

    def test_minimal_valid_preset(self):
        outcome = validate_preset({"name": "m", "properties": [{"namespace": "DAV:", "name": "resourcetype"}]})
        assert isinstance(outcome, Valid)
        assert outcome.preset.name == "m"
        assert outcome.preset.properties == (PropertyDefinition("DAV:", "resourcetype"),)
        assert outcome.preset.description is None
        assert outcome.preset.builtin is False

    def test_name_is_trimmed(self):
        outcome = validate_preset({"name": "  spaced  ", "properties": _props(1)})
        assert isinstance(outcome, Valid)
        assert outcome.preset.name == "spaced"

    @pytest.mark.parametrize("raw", [
        None,
        42,
        "basic",
        [],
        {"properties": _props(1)},
        {"name": "", "properties": _props(1)},
        {"name": "   ", "properties": _props(1)},
        {"name": 7, "properties": _props(1)},
        {"name": "has space", "properties": _props(1)},
        {"name": "dots.not.allowed", "properties": _props(1)},
        {"name": "two\nlines", "properties": _props(1)},
        {"name": "p"},
        {"name": "p", "properties": {"namespace": "DAV:", "name": "x"}},
        {"name": "p", "properties": []},
    ])
    def test_rejected(self, raw):
        outcome = validate_preset(raw)
        assert isinstance(outcome, Rejected)
        assert outcome.reason

    def test_invalid_properties_are_filtered(self):
        raw = {
            "name": "mixed",
            "properties": [
                {"namespace": "DAV:", "name": "displayname"},
                {"namespace": "bogus", "name": "x"},
                "junk",
                {"namespace": "http://owncloud.org/ns", "name": "fileid"},
            ],
        }
        outcome = validate_preset(raw)
        assert isinstance(outcome, Valid)
        assert [p.name for p in outcome.preset.properties] == ["displayname", "fileid"]

    def test_rejected_when_all_properties_invalid(self):
        outcome = validate_preset({"name": "p", "properties": [{"namespace": "x", "name": "y"}, None]})
        assert isinstance(outcome, Rejected)

    def test_exactly_max_properties_accepted(self):
        outcome = validate_preset({"name": "big", "properties": _props(MAX_PROPERTIES_PER_PRESET)})
        assert isinstance(outcome, Valid)
        assert len(outcome.preset.properties) == 100

    def test_too_many_properties_rejected(self):
        outcome = validate_preset({"name": "huge", "properties": _props(MAX_PROPERTIES_PER_PRESET + 1)})
        assert isinstance(outcome, Rejected)

    def test_limit_counts_properties_after_filtering(self):
        properties = _props(MAX_PROPERTIES_PER_PRESET) + [{"namespace": "bad", "name": "x"}] * 5
        outcome = validate_preset({"name": "p", "properties": properties})
        assert isinstance(outcome, Valid)

    def test_non_string_description_dropped(self):
        outcome = validate_preset({"name": "p", "description": 12, "properties": _props(1)})
        assert isinstance(outcome, Valid)
        assert outcome.preset.description is None

    def test_string_description_kept(self):
        outcome = validate_preset({"name": "p", "description": "Mine", "properties": _props(1)})
        assert outcome.preset.description == "Mine"

    def test_builtin_flag_ignored(self):
        outcome = validate_preset({"name": "p", "builtin": True, "properties": _props(1)})
        assert isinstance(outcome, Valid)
        assert outcome.preset.builtin is False
