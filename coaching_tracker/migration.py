"""Schema migration for stored and imported rosters.

Three historical shapes are recognised for every record list:

* legacy string entries (``"2/1/2026: good call"`` / ``"Score: 88"``),
* partial objects with missing or mistyped fields,
* fully canonical objects.

``migrate_agents`` folds all of them into canonical :class:`Agent` values.
It never raises, and running it on its own output changes nothing.
"""

import logging
from typing import Any, Dict, List

from .config import DEFAULT_REQUIREMENT, REQUIREMENT_MAX, REQUIREMENT_MIN, UNNAMED_AGENT
from .identity import clamp_int, is_finite_number, parse_legacy_line, strip_score_prefix, uid
from .models import Agent, FollowUpItem, InteractionRecord, ScoreRecord

logger = logging.getLogger(__name__)

_RECORD_LISTS = ("coachings", "sides", "techs")


def _obj(x: Any) -> Dict[str, Any]:
    return x if isinstance(x, dict) else {}


def _str(obj: Dict[str, Any], key: str, default: str = "") -> str:
    v = obj.get(key)
    return v if isinstance(v, str) else default


def _id(obj: Dict[str, Any]) -> str:
    v = obj.get("id")
    return v if isinstance(v, str) else uid()


def _list(obj: Dict[str, Any], key: str) -> List[Any]:
    v = obj.get(key)
    return v if isinstance(v, list) else []


def _interaction(x: Any) -> InteractionRecord:
    if isinstance(x, str):
        date, notes = parse_legacy_line(x)
        return InteractionRecord(id=uid(), date=date, notes=notes)
    o = _obj(x)
    return InteractionRecord(id=_id(o), date=_str(o, "date"), notes=_str(o, "notes"))


def _score(x: Any) -> ScoreRecord:
    if isinstance(x, str):
        return ScoreRecord(id=uid(), date="", score=strip_score_prefix(x))
    o = _obj(x)
    return ScoreRecord(id=_id(o), date=_str(o, "date"), score=_str(o, "score"))


def _follow_up(x: Any) -> FollowUpItem:
    if isinstance(x, str):
        return FollowUpItem(id=uid(), text=x)
    o = _obj(x)
    return FollowUpItem(id=_id(o), text=_str(o, "text"))


def _requirement(v: Any) -> int:
    if not is_finite_number(v):
        return DEFAULT_REQUIREMENT
    return clamp_int(int(v), REQUIREMENT_MIN, REQUIREMENT_MAX)


def migrate_agent(raw: Any) -> Agent:
    if isinstance(raw, Agent):
        raw = raw.to_dict()
    a = _obj(raw)
    follow_ups = tuple(f for f in map(_follow_up, _list(a, "followUps")) if f.text.strip())
    return Agent(
        id=_id(a),
        name=_str(a, "name", UNNAMED_AGENT),
        requirement=_requirement(a.get("requirement")),
        coachings=tuple(_interaction(x) for x in _list(a, "coachings")),
        sides=tuple(_interaction(x) for x in _list(a, "sides")),
        techs=tuple(_score(x) for x in _list(a, "techs")),
        notes=_str(a, "notes"),
        follow_ups=follow_ups,
    )


def migrate_agents(raw: Any) -> List[Agent]:
    """Coerce any stored/imported value into a canonical roster (never raises)."""
    if not isinstance(raw, list):
        if raw is not None:
            logger.info("Roster blob is a %s, not a list; starting empty", type(raw).__name__)
        return []
    return [migrate_agent(x) for x in raw]


def looks_legacy(raw: Any) -> bool:
    """True if a stored blob predates the canonical shape (backup before overwrite)."""
    if not isinstance(raw, list):
        return False
    for x in raw:
        a = _obj(x)
        if not isinstance(a.get("id"), str):
            return True
        for key in _RECORD_LISTS:
            if any(isinstance(r, str) for r in _list(a, key)):
                return True
        if not isinstance(a.get("notes"), str) or not isinstance(a.get("followUps"), list):
            return True
    return False
