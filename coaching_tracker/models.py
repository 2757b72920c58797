"""Canonical roster records.

All records are frozen; collections are tuples. Mutations build a new Agent
with ``dataclasses.replace`` so a half-updated agent is never observable.
JSON keys keep the camelCase names used by stored and exported files.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple


@dataclass(frozen=True)
class InteractionRecord:
    """A coaching session or side-by-side."""

    id: str
    date: str
    notes: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "date": self.date, "notes": self.notes}


@dataclass(frozen=True)
class ScoreRecord:
    """A tech-monitor result."""

    id: str
    date: str
    score: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "date": self.date, "score": self.score}


@dataclass(frozen=True)
class FollowUpItem:
    id: str
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text}


@dataclass(frozen=True)
class Agent:
    id: str
    name: str
    requirement: int
    coachings: Tuple[InteractionRecord, ...] = ()
    sides: Tuple[InteractionRecord, ...] = ()
    techs: Tuple[ScoreRecord, ...] = ()
    notes: str = ""
    follow_ups: Tuple[FollowUpItem, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "requirement": self.requirement,
            "coachings": [r.to_dict() for r in self.coachings],
            "sides": [r.to_dict() for r in self.sides],
            "techs": [r.to_dict() for r in self.techs],
            "notes": self.notes,
            "followUps": [f.to_dict() for f in self.follow_ups],
        }


# record kind -> Agent attribute
RECORD_FIELDS = {"coaching": "coachings", "side": "sides", "tech": "techs"}
INTERACTION_KINDS = ("coaching", "side")


def roster_to_list(agents: Sequence[Agent]) -> List[Dict[str, Any]]:
    return [a.to_dict() for a in agents]
