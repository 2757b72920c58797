"""Key-value persistence for the roster.

The roster is stored as one JSON array under ``STORAGE_KEY``. When a stored
blob predates the canonical shape, the raw text is copied once to
``BACKUP_KEY`` before the migrated roster overwrites it; an existing backup
is never replaced.
"""

import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .config import BACKUP_KEY, INSTRUCTIONS_DISMISSED_KEY, STORAGE_KEY
from .identity import safe_json_parse
from .migration import looks_legacy, migrate_agents
from .models import Agent, roster_to_list

logger = logging.getLogger(__name__)


# ---------------------------- Key-value stores ---------------------------------
class MemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileKeyValueStore:
    """One file per key under ``directory``; writes go through a temp file + rename."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / (re.sub(r"[^A-Za-z0-9_.-]+", "_", key) + ".json")

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=".tmp_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, self._path(key))
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


# ---------------------------- Roster repository --------------------------------
@dataclass(frozen=True)
class LoadResult:
    agents: List[Agent]
    migrated: bool = False
    backup_written: bool = False


class RosterRepository:
    def __init__(self, kv, storage_key: str = STORAGE_KEY, backup_key: str = BACKUP_KEY):
        self.kv = kv
        self.storage_key = storage_key
        self.backup_key = backup_key

    def load(self) -> LoadResult:
        saved = self.kv.get(self.storage_key)
        parsed = safe_json_parse(saved)
        if saved and parsed is None:
            logger.warning("Stored roster under %r is not valid JSON; starting empty", self.storage_key)
        agents = migrate_agents(parsed)
        if not (saved and looks_legacy(parsed)):
            return LoadResult(agents=agents)

        backup_written = False
        if self.kv.get(self.backup_key) is None:
            self.kv.set(self.backup_key, saved)
            backup_written = True
            logger.info("Backed up legacy roster to %r", self.backup_key)
        self.save(agents)
        logger.info("Migrated %d legacy agent(s)", len(agents))
        return LoadResult(agents=agents, migrated=True, backup_written=backup_written)

    def save(self, agents: Sequence[Agent]) -> None:
        payload = json.dumps(roster_to_list(agents))
        self.kv.set(self.storage_key, payload)

    def clear(self) -> None:
        self.kv.delete(self.storage_key)

    def has_backup(self) -> bool:
        return self.kv.get(self.backup_key) is not None

    # instructions panel
    def instructions_dismissed(self) -> bool:
        return self.kv.get(INSTRUCTIONS_DISMISSED_KEY) == "1"

    def set_instructions_dismissed(self, dismissed: bool) -> None:
        if dismissed:
            self.kv.set(INSTRUCTIONS_DISMISSED_KEY, "1")
        else:
            self.kv.delete(INSTRUCTIONS_DISMISSED_KEY)
