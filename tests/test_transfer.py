import json
from datetime import datetime, timezone

import pytest

from coaching_tracker.errors import ImportFileError
from coaching_tracker.transfer import export_filename, export_json, export_payload, parse_import

NOW = datetime(2026, 2, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)


def test_export_payload(roster):
    payload = export_payload(roster, NOW)
    assert payload["version"] == 1
    assert payload["exportedAt"] == "2026-02-01T12:30:45.123Z"
    assert payload["agents"][0]["followUps"] == [{"id": "f1", "text": "check hold times"}]


def test_export_import_round_trip(roster):
    text = export_json(roster, NOW)
    assert tuple(parse_import(text)) == roster


def test_import_bare_array():
    agents = parse_import(json.dumps([{"name": "Ann", "sides": ["2/2: shadow"]}]))
    assert agents[0].name == "Ann"
    assert agents[0].sides[0].notes == "shadow"


def test_import_object_without_agents_is_empty():
    assert parse_import(json.dumps({"version": 1})) == []
    assert parse_import("null") == []


def test_bad_json_raises():
    with pytest.raises(ImportFileError):
        parse_import("not json at all")


def test_export_filename():
    assert export_filename(NOW) == "agent-tracker_2026-02-01.json"
