"""Merge a BPA coaching report into the roster.

Every report row carries an opaque ``Id``. The record created for a row gets
the id ``bpa_<Id>``, so importing the same report again finds the existing
record and skips it. Reconciliation only ever prepends records and creates
agents; it never edits or deletes anything already in the roster.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .config import BPA_HEADERS, BPA_RECORD_PREFIX, DEFAULT_REQUIREMENT
from .identity import normalize_agent_name, normalize_header, uid
from .models import Agent, InteractionRecord
from .report_reader import read_report_rows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    agents: Tuple[Agent, ...]
    imported: int
    skipped: int
    rows_read: int
    created: int = 0


@dataclass(frozen=True)
class ReportImport:
    """Outcome of importing a report file: 'no_data' when the sheet had no rows."""

    status: str
    sheet_name: str
    result: Optional[ReconcileResult] = None

    @property
    def imported(self) -> int:
        return self.result.imported if self.result else 0

    @property
    def skipped(self) -> int:
        return self.result.skipped if self.result else 0

    @property
    def rows_read(self) -> int:
        return self.result.rows_read if self.result else 0


# ---------------------------- Row helpers --------------------------------------
def pick(row: Mapping[str, Any], key: str) -> str:
    """Header lookup: exact key first, then NBSP/whitespace/case-normalized match."""
    v = row.get(key)
    if v:
        return str(v)
    want = normalize_header(key)
    for k, v in row.items():
        if normalize_header(k) == want:
            return "" if v is None else str(v)
    return ""


def classify_form(form_name: str) -> Optional[str]:
    """'side' wins over 'coaching'; anything else is not a tracked interaction."""
    f = (form_name or "").lower()
    if "side" in f:
        return "sides"
    if "coaching" in f:
        return "coachings"
    return None


def record_id_for(external_id: str) -> str:
    return f"{BPA_RECORD_PREFIX}{str(external_id).strip()}"


def import_notes(form: str, team_leader: str, created_by: str, external_id: str) -> str:
    return (f"BPA import • {form.strip()} • TL: {team_leader.strip()} • "
            f"By: {created_by.strip()} • ID {external_id.strip()}")


# ---------------------------- Reconcile ----------------------------------------
def reconcile(agents: Sequence[Agent], rows: Iterable[Mapping[str, Any]]) -> ReconcileResult:
    roster: List[Agent] = list(agents)
    index_by_name: Dict[str, int] = {}
    for i, a in enumerate(roster):
        index_by_name[a.name.lower()] = i  # last one wins on a case-insensitive clash

    imported = skipped = created = rows_read = 0
    for row in rows:
        rows_read += 1
        ext_id = pick(row, BPA_HEADERS["id"]).strip()
        if not ext_id:
            continue
        raw_name = pick(row, BPA_HEADERS["agent"])
        if not raw_name.strip():
            continue
        form = pick(row, BPA_HEADERS["form"])
        attr = classify_form(form)
        if attr is None:
            continue

        name = normalize_agent_name(raw_name)
        key = name.lower()
        idx = index_by_name.get(key)
        if idx is None:
            roster.append(Agent(id=uid(), name=name, requirement=DEFAULT_REQUIREMENT))
            idx = index_by_name[key] = len(roster) - 1
            created += 1
        agent = roster[idx]

        rec_id = record_id_for(ext_id)
        existing = getattr(agent, attr)
        if any(r.id == rec_id for r in existing):
            skipped += 1
            continue

        rec = InteractionRecord(
            id=rec_id,
            date=pick(row, BPA_HEADERS["date"]).strip(),
            notes=import_notes(form, pick(row, BPA_HEADERS["team_leader"]),
                               pick(row, BPA_HEADERS["created_by"]), ext_id),
        )
        roster[idx] = replace(agent, **{attr: (rec,) + existing})
        imported += 1

    logger.info("Reconciled %d row(s): imported=%d skipped=%d new agents=%d",
                rows_read, imported, skipped, created)
    return ReconcileResult(agents=tuple(roster), imported=imported, skipped=skipped,
                           rows_read=rows_read, created=created)


def import_report(agents: Sequence[Agent], content: bytes) -> ReportImport:
    """Read report bytes and reconcile them. Raises ReportReadError for unreadable files."""
    sheet = read_report_rows(content)
    if not sheet.rows:
        logger.warning("Report %r has no data rows", sheet.sheet_name)
        return ReportImport(status="no_data", sheet_name=sheet.sheet_name)
    return ReportImport(status="ok", sheet_name=sheet.sheet_name, result=reconcile(agents, sheet.rows))
