from .errors import ImportFileError, ReportReadError, TrackerError
from .migration import looks_legacy, migrate_agents
from .models import Agent, FollowUpItem, InteractionRecord, ScoreRecord
from .persistence import FileKeyValueStore, MemoryKeyValueStore, RosterRepository
from .reconcile import ReconcileResult, import_report, reconcile
from .roster import RosterStore
from .scoring import completion_pct, roster_totals, score_tier, score_value
from .view import filter_and_sort, roster_table

__version__ = "0.1.0"
