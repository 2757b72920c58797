import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from .config import EXPORT_VERSION
from .errors import ImportFileError
from .migration import migrate_agents
from .models import Agent, roster_to_list

logger = logging.getLogger(__name__)


def _iso_utc(now: datetime) -> str:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def export_payload(agents: Sequence[Agent], now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    return {"version": EXPORT_VERSION, "exportedAt": _iso_utc(now), "agents": roster_to_list(agents)}


def export_json(agents: Sequence[Agent], now: Optional[datetime] = None) -> str:
    return json.dumps(export_payload(agents, now), indent=2, ensure_ascii=False)


def export_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"agent-tracker_{now.strftime('%Y-%m-%d')}.json"


def parse_import(text: str) -> List[Agent]:
    """Bare array or {"agents": [...]} -> migrated roster. Non-JSON raises ImportFileError."""
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise ImportFileError("Import failed. (Bad JSON?)") from exc
    maybe_agents = parsed if isinstance(parsed, list) else (
        parsed.get("agents") if isinstance(parsed, dict) else None)
    agents = migrate_agents(maybe_agents)
    logger.info("Parsed import file with %d agent(s)", len(agents))
    return agents
