"""Shared fixtures: in-memory key-value store, a small roster, BPA report rows."""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from coaching_tracker.models import Agent, FollowUpItem, InteractionRecord, ScoreRecord  # noqa: E402
from coaching_tracker.persistence import MemoryKeyValueStore  # noqa: E402


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def roster():
    return (
        Agent(id="a1", name="John Smith", requirement=2,
              coachings=(InteractionRecord("c1", "2/1/2026", "good call"),),
              sides=(InteractionRecord("s1", "2/3/2026", "shadowed queue"),),
              techs=(ScoreRecord("t1", "2/4/2026", "88"),),
              notes="prefers mornings",
              follow_ups=(FollowUpItem("f1", "check hold times"),)),
        Agent(id="a2", name="alice Jones", requirement=0),
        Agent(id="a3", name="Bob Lane", requirement=5,
              coachings=(InteractionRecord("c2", "", "intro"),)),
    )


def bpa_row(row_id, agent, form, when="2/1/2026 9:00 AM", created_by="Pat Lee", tl="Dana Ray"):
    return {
        "Id": row_id,
        "Agent Name": agent,
        "Coaching Form Name": form,
        "Date Time": when,
        "Created By Name": created_by,
        "Team Leader": tl,
    }


@pytest.fixture
def bpa_rows():
    return [
        bpa_row("101", "Smith, John", "Scheduled Coaching"),
        bpa_row("102", "Smith, John", "Side by Side Observation"),
        bpa_row("103", "Jane Doe", "Coaching Session"),
        bpa_row("", "Jane Doe", "Coaching Session"),
        bpa_row("105", "Jane Doe", "Quality Audit"),
        bpa_row("106", "", "Coaching Session"),
    ]
