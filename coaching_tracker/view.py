from typing import Callable, Dict, List, Sequence

import pandas as pd

from .models import Agent
from .scoring import agent_tier, completion_pct, score_value

SORT_KEYS: Dict[str, Callable[[Agent], float]] = {
    "completion": completion_pct,
    "coachings": lambda a: len(a.coachings),
    "sides": lambda a: len(a.sides),
    "techs": lambda a: len(a.techs),
    "requirement": lambda a: a.requirement,
    "score": score_value,
    "followups": lambda a: len(a.follow_ups),
}
SORT_LABELS = {
    "name": "Name",
    "completion": "Completion %",
    "coachings": "Coachings",
    "sides": "Sides",
    "techs": "Techs",
    "requirement": "Requirement",
    "score": "Score",
    "followups": "Follow Ups",
}


def name_key(a: Agent):
    return a.name.casefold(), a.name


def filter_and_sort(agents: Sequence[Agent], query: str = "", sort_key: str = "name",
                    direction: str = "asc") -> List[Agent]:
    """Filtered, ordered copy of the roster; ties always fall back to name ascending."""
    if sort_key != "name" and sort_key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_key!r}")
    desc = direction == "desc"
    q = (query or "").strip().lower()
    out = [a for a in agents if q in a.name.lower()] if q else list(agents)

    out.sort(key=name_key)
    if sort_key == "name":
        if desc:
            out.reverse()
        return out
    # stable sort: equal primary values keep the name-ascending order, even reversed
    out.sort(key=SORT_KEYS[sort_key], reverse=desc)
    return out


def roster_table(agents: Sequence[Agent]) -> pd.DataFrame:
    rows = []
    for a in agents:
        label, _ = agent_tier(a)
        rows.append({
            "Agent": a.name,
            "Requirement": a.requirement,
            "Coachings": len(a.coachings),
            "Sides": len(a.sides),
            "Techs": len(a.techs),
            "Completion %": round(completion_pct(a), 2),
            "Score": round(score_value(a), 2),
            "Tier": label,
            "Follow Ups": len(a.follow_ups),
        })
    return pd.DataFrame(rows, columns=["Agent", "Requirement", "Coachings", "Sides", "Techs",
                                       "Completion %", "Score", "Tier", "Follow Ups"])
