import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

# ---------------------------- Storage keys -------------------------------------
STORAGE_KEY = "agents"
BACKUP_KEY = "agents_backup_pre_migration"
INSTRUCTIONS_DISMISSED_KEY = "agent_tracker_instructions_dismissed"

# ---------------------------- Roster defaults ----------------------------------
DEFAULT_REQUIREMENT = 2
REQUIREMENT_MIN, REQUIREMENT_MAX = 0, 99
UNNAMED_AGENT = "Unnamed"
TECH_BONUS = 10.0

# (threshold, label, colour) — ascending
SCORE_TIERS = (
    (0, "Behind", "#6b0f1a"),
    (25, "Started", "#7a2e0e"),
    (66, "On Track", "#6e6a00"),
    (100, "Complete", "#0f6b3a"),
    (110, "Exceeding", "#0b5ed7"),
)
DEFAULT_TIER = ("None", "#111827")

# ---------------------------- BPA report ---------------------------------------
BPA_RECORD_PREFIX = "bpa_"
BPA_HEADERS = {
    "id": "Id",
    "agent": "Agent Name",
    "form": "Coaching Form Name",
    "date": "Date Time",
    "created_by": "Created By Name",
    "team_leader": "Team Leader",
}

EXPORT_VERSION = 1


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    log_level: str = "INFO"


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment (AGENT_TRACKER_DATA_DIR / AGENT_TRACKER_LOG_LEVEL)."""
    env = os.environ if env is None else env
    data_dir = Path(env.get("AGENT_TRACKER_DATA_DIR") or ".agent_tracker").expanduser()
    level = (env.get("AGENT_TRACKER_LOG_LEVEL") or "INFO").strip().upper()
    return Settings(data_dir=data_dir, log_level=level)
