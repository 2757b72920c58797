import json

import pytest

from coaching_tracker.migration import looks_legacy, migrate_agents
from coaching_tracker.models import roster_to_list

LEGACY_BLOB = [
    {
        "name": "John Smith",
        "requirement": 3,
        "coachings": ["2/1/2026: good call", "no colon here"],
        "sides": [{"date": "2/2/2026", "notes": "queue review"}, "2/5/2026: second"],
        "techs": ["Score: 88", "Pass"],
    },
    {
        "id": "keep-me",
        "name": 42,
        "requirement": "5",
        "notes": None,
        "followUps": ["call back", "   ", {"id": "f9", "text": "review QA"}, {"text": ""}],
    },
]


def dumps(agents):
    return json.dumps(roster_to_list(agents), sort_keys=True)


class TestMigrateAgents:
    def test_legacy_strings_are_split(self):
        john = migrate_agents(LEGACY_BLOB)[0]
        assert [(c.date, c.notes) for c in john.coachings] == [("2/1/2026", "good call"), ("", "no colon here")]
        assert [(s.date, s.notes) for s in john.sides] == [("2/2/2026", "queue review"), ("2/5/2026", "second")]

    def test_tech_prefix_stripped(self):
        john = migrate_agents(LEGACY_BLOB)[0]
        assert [t.score for t in john.techs] == ["88", "Pass"]
        assert all(t.date == "" for t in john.techs)

    def test_defaults_for_missing_and_mistyped_fields(self):
        john, other = migrate_agents(LEGACY_BLOB)
        assert john.id and john.notes == "" and john.follow_ups == ()
        assert other.id == "keep-me"
        assert other.name == "Unnamed"
        assert other.requirement == 2
        assert other.notes == ""

    def test_blank_follow_ups_dropped(self):
        other = migrate_agents(LEGACY_BLOB)[1]
        assert [f.text for f in other.follow_ups] == ["call back", "review QA"]
        assert other.follow_ups[1].id == "f9"

    def test_generated_ids_are_unique(self):
        john = migrate_agents(LEGACY_BLOB)[0]
        ids = [r.id for r in john.coachings + john.sides + john.techs]
        assert len(set(ids)) == len(ids)

    @pytest.mark.parametrize("requirement,expected", [
        (150, 99), (-4, 0), (3.9, 3), (float("nan"), 2), (float("inf"), 2), (True, 2), (None, 2),
    ])
    def test_requirement_coercion(self, requirement, expected):
        assert migrate_agents([{"requirement": requirement}])[0].requirement == expected

    def test_order_preserved(self):
        agents = migrate_agents([{"id": "a", "coachings": [
            {"id": "3", "notes": "newest"}, {"id": "2", "notes": "middle"}, {"id": "1", "notes": "oldest"}]}])
        assert [c.id for c in agents[0].coachings] == ["3", "2", "1"]


class TestTotality:
    @pytest.mark.parametrize("raw", [
        None, 0, "agents", {}, {"agents": []}, True,
        [None, 1, "text", [], {"coachings": "nope", "techs": {"a": 1}, "followUps": "x"}],
        [{"coachings": [None, 5, [], {"id": 3, "date": 4, "notes": None}]}],
    ])
    def test_never_raises(self, raw):
        agents = migrate_agents(raw)
        assert isinstance(agents, list)

    def test_non_list_is_empty(self):
        assert migrate_agents({"agents": [{"name": "x"}]}) == []

    def test_non_object_elements_become_default_agents(self):
        agents = migrate_agents([None, "x"])
        assert [a.name for a in agents] == ["Unnamed", "Unnamed"]


class TestIdempotence:
    @pytest.mark.parametrize("raw", [
        LEGACY_BLOB,
        [],
        [None, {"followUps": [" spaced "]}],
        [{"id": "", "name": "", "coachings": [{"id": "", "notes": ""}]}],
    ])
    def test_second_pass_is_identical(self, raw):
        once = migrate_agents(raw)
        twice = migrate_agents(roster_to_list(once))
        assert dumps(twice) == dumps(once)

    def test_accepts_its_own_output(self):
        once = migrate_agents(LEGACY_BLOB)
        assert migrate_agents(once) == once


class TestLooksLegacy:
    def test_canonical_is_not_legacy(self):
        canonical = roster_to_list(migrate_agents(LEGACY_BLOB))
        assert looks_legacy(canonical) is False

    def test_missing_id(self):
        assert looks_legacy([{"name": "x", "notes": "", "followUps": []}])

    def test_string_record(self):
        assert looks_legacy([{"id": "a", "notes": "", "followUps": [], "techs": ["Score: 9"]}])

    def test_missing_notes_or_follow_ups(self):
        assert looks_legacy([{"id": "a", "followUps": []}])
        assert looks_legacy([{"id": "a", "notes": ""}])

    def test_non_list_is_not_legacy(self):
        assert looks_legacy(None) is False
        assert looks_legacy({"agents": []}) is False
