from bisect import bisect_right
from dataclasses import dataclass
from typing import Sequence, Tuple

from .config import DEFAULT_TIER, SCORE_TIERS, TECH_BONUS
from .models import Agent

_THRESHOLDS = [t for t, _, _ in SCORE_TIERS]


# ---------------------------- Per-agent metrics --------------------------------
def completion_pct(a: Agent) -> float:
    return (len(a.coachings) + len(a.sides)) / (a.requirement + 1) * 100


def score_value(a: Agent) -> float:
    return completion_pct(a) + (TECH_BONUS if a.techs else 0.0)


def score_tier(score: float) -> Tuple[str, str]:
    """(label, colour) of the highest threshold <= score."""
    i = bisect_right(_THRESHOLDS, score)
    if i == 0:
        return DEFAULT_TIER
    _, label, colour = SCORE_TIERS[i - 1]
    return label, colour


def agent_tier(a: Agent) -> Tuple[str, str]:
    return score_tier(score_value(a))


# ---------------------------- Roster totals ------------------------------------
@dataclass(frozen=True)
class RosterTotals:
    coachings: int
    sides: int
    techs: int
    pct: float


def roster_totals(agents: Sequence[Agent]) -> RosterTotals:
    coach = sum(len(a.coachings) for a in agents)
    sides = sum(len(a.sides) for a in agents)
    techs = sum(len(a.techs) for a in agents)
    denom = len(agents) + sum(a.requirement for a in agents)
    pct = (coach + sides) / denom * 100 if denom else 0.0
    return RosterTotals(coachings=coach, sides=sides, techs=techs, pct=pct)
