"""Roster mutations.

Module-level functions are pure: they take a roster tuple and return the next
one, or the very same object when the call is a no-op (unknown id, blank
required text). ``RosterStore`` owns the current roster and swaps in the
result of each call in one assignment.
"""

import logging
from dataclasses import replace
from typing import Callable, Iterable, Optional, Tuple

from .config import DEFAULT_REQUIREMENT, REQUIREMENT_MAX, REQUIREMENT_MIN
from .identity import clamp_int, uid
from .models import (
    INTERACTION_KINDS,
    RECORD_FIELDS,
    Agent,
    FollowUpItem,
    InteractionRecord,
    ScoreRecord,
)

logger = logging.getLogger(__name__)

Roster = Tuple[Agent, ...]


def _clamp_requirement(requirement) -> int:
    try:
        n = int(requirement)
    except (TypeError, ValueError, OverflowError):
        n = DEFAULT_REQUIREMENT
    return clamp_int(n, REQUIREMENT_MIN, REQUIREMENT_MAX)


def _update_agent(agents: Roster, agent_id: str, fn: Callable[[Agent], Agent]) -> Roster:
    for i, a in enumerate(agents):
        if a.id == agent_id:
            nxt = fn(a)
            if nxt is a:
                return agents
            return agents[:i] + (nxt,) + agents[i + 1:]
    return agents


def _upsert(items: tuple, item) -> tuple:
    """Replace the entry with the same id in place, else prepend."""
    for i, x in enumerate(items):
        if x.id == item.id:
            return items[:i] + (item,) + items[i + 1:]
    return (item,) + items


def _without(items: tuple, item_id: str) -> tuple:
    kept = tuple(x for x in items if x.id != item_id)
    return items if len(kept) == len(items) else kept


def _field_for(kind: str, allowed: Iterable[str]) -> str:
    if kind not in allowed:
        raise ValueError(f"Unknown record kind: {kind!r}")
    return RECORD_FIELDS[kind]


# ---------------------------- Agents -------------------------------------------
def add_agent(agents: Roster, name: str, requirement: int) -> Roster:
    name = (name or "").strip()
    if not name:
        return agents
    agent = Agent(id=uid(), name=name, requirement=_clamp_requirement(requirement))
    return agents + (agent,)


def edit_agent(agents: Roster, agent_id: str, name: str, requirement: int) -> Roster:
    name = (name or "").strip()
    if not name:
        return agents
    req = _clamp_requirement(requirement)
    return _update_agent(agents, agent_id, lambda a: replace(a, name=name, requirement=req))


def delete_agent(agents: Roster, agent_id: str) -> Roster:
    return _without(agents, agent_id)


# ---------------------------- Records ------------------------------------------
def upsert_interaction(agents: Roster, agent_id: str, kind: str, record_id: Optional[str],
                       date: str, notes: str) -> Roster:
    attr = _field_for(kind, INTERACTION_KINDS)
    notes = (notes or "").strip()
    if not notes:
        return agents
    rec = InteractionRecord(id=record_id or uid(), date=(date or "").strip(), notes=notes)
    return _update_agent(agents, agent_id, lambda a: replace(a, **{attr: _upsert(getattr(a, attr), rec)}))


def upsert_score(agents: Roster, agent_id: str, record_id: Optional[str], date: str, score: str) -> Roster:
    score = (score or "").strip()
    if not score:
        return agents
    rec = ScoreRecord(id=record_id or uid(), date=(date or "").strip(), score=score)
    return _update_agent(agents, agent_id, lambda a: replace(a, techs=_upsert(a.techs, rec)))


def delete_record(agents: Roster, agent_id: str, kind: str, record_id: str) -> Roster:
    attr = _field_for(kind, RECORD_FIELDS)

    def drop(a: Agent) -> Agent:
        kept = _without(getattr(a, attr), record_id)
        return a if kept is getattr(a, attr) else replace(a, **{attr: kept})

    return _update_agent(agents, agent_id, drop)


# ---------------------------- Notes & follow ups -------------------------------
def set_notes(agents: Roster, agent_id: str, text: str) -> Roster:
    text = "" if text is None else str(text)
    return _update_agent(agents, agent_id, lambda a: a if a.notes == text else replace(a, notes=text))


def upsert_follow_up(agents: Roster, agent_id: str, item_id: Optional[str], text: str) -> Roster:
    text = (text or "").strip()
    if not text:
        return agents
    item = FollowUpItem(id=item_id or uid(), text=text)
    return _update_agent(agents, agent_id, lambda a: replace(a, follow_ups=_upsert(a.follow_ups, item)))


def delete_follow_up(agents: Roster, agent_id: str, item_id: str) -> Roster:
    def drop(a: Agent) -> Agent:
        kept = _without(a.follow_ups, item_id)
        return a if kept is a.follow_ups else replace(a, follow_ups=kept)

    return _update_agent(agents, agent_id, drop)


# ---------------------------- Whole roster -------------------------------------
def reset_period(agents: Roster) -> Roster:
    """New month: wipe coachings/sides/techs, keep names, requirements, notes, follow ups."""
    if not any(a.coachings or a.sides or a.techs for a in agents):
        return agents
    return tuple(replace(a, coachings=(), sides=(), techs=()) for a in agents)


def clear_all(agents: Roster) -> Roster:
    return agents if not agents else ()


# ---------------------------- Store --------------------------------------------
class RosterStore:
    """Single owner of the in-memory roster. Mutators return True when state changed."""

    def __init__(self, agents: Iterable[Agent] = ()):
        self._agents: Roster = tuple(agents)

    @property
    def agents(self) -> Roster:
        return self._agents

    def __len__(self) -> int:
        return len(self._agents)

    def _apply(self, op: str, nxt: Roster) -> bool:
        if nxt is self._agents:
            logger.debug("%s: no change", op)
            return False
        self._agents = nxt
        return True

    def find(self, agent_id: str) -> Optional[Agent]:
        return next((a for a in self._agents if a.id == agent_id), None)

    def has_name(self, name: str) -> bool:
        key = (name or "").strip().lower()
        return any(a.name.lower() == key for a in self._agents)

    def replace_all(self, agents: Iterable[Agent]) -> bool:
        return self._apply("replace_all", tuple(agents))

    def add_agent(self, name: str, requirement: int) -> bool:
        return self._apply("add_agent", add_agent(self._agents, name, requirement))

    def edit_agent(self, agent_id: str, name: str, requirement: int) -> bool:
        return self._apply("edit_agent", edit_agent(self._agents, agent_id, name, requirement))

    def delete_agent(self, agent_id: str) -> bool:
        return self._apply("delete_agent", delete_agent(self._agents, agent_id))

    def upsert_interaction(self, agent_id: str, kind: str, record_id: Optional[str],
                           date: str, notes: str) -> bool:
        return self._apply("upsert_interaction",
                           upsert_interaction(self._agents, agent_id, kind, record_id, date, notes))

    def upsert_score(self, agent_id: str, record_id: Optional[str], date: str, score: str) -> bool:
        return self._apply("upsert_score", upsert_score(self._agents, agent_id, record_id, date, score))

    def delete_record(self, agent_id: str, kind: str, record_id: str) -> bool:
        return self._apply("delete_record", delete_record(self._agents, agent_id, kind, record_id))

    def set_notes(self, agent_id: str, text: str) -> bool:
        return self._apply("set_notes", set_notes(self._agents, agent_id, text))

    def upsert_follow_up(self, agent_id: str, item_id: Optional[str], text: str) -> bool:
        return self._apply("upsert_follow_up", upsert_follow_up(self._agents, agent_id, item_id, text))

    def delete_follow_up(self, agent_id: str, item_id: str) -> bool:
        return self._apply("delete_follow_up", delete_follow_up(self._agents, agent_id, item_id))

    def reset_period(self) -> bool:
        return self._apply("reset_period", reset_period(self._agents))

    def clear_all(self) -> bool:
        return self._apply("clear_all", clear_all(self._agents))
