import json
import math
import random
import re
import string
import time
from typing import Any, Optional, Tuple

# ---------------------------- Identity -----------------------------------------
_B36 = string.digits + string.ascii_lowercase
_rng = random.SystemRandom()


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_B36[r])
    return "".join(reversed(out))


def uid() -> str:
    """Opaque record id: base-36 epoch millis + '_' + 7 random base-36 chars."""
    stamp = _to_base36(int(time.time() * 1000))
    tail = "".join(_rng.choice(_B36) for _ in range(7))
    return f"{stamp}_{tail}"


# ---------------------------- Coercion -----------------------------------------
def clamp_int(n: int, lo: int, hi: int) -> int:
    return min(hi, max(lo, n))


def is_finite_number(x: Any) -> bool:
    # bool is an int subclass; JSON true/false are not numbers here
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        return False
    return math.isfinite(x)


def safe_json_parse(s: Optional[str]) -> Any:
    if not s:
        return None
    try:
        return json.loads(s)
    except ValueError:
        return None


# ---------------------------- Legacy text formats ------------------------------
def parse_legacy_line(line: str) -> Tuple[str, str]:
    """Split a legacy ``"<date>: <notes>"`` line on its first colon -> (date, notes)."""
    line = "" if line is None else str(line)
    idx = line.find(":")
    if idx == -1:
        return "", line.strip()
    return line[:idx].strip(), line[idx + 1:].strip()


def strip_score_prefix(s: str) -> str:
    s = str(s or "").strip()
    if s.lower().startswith("score:"):
        return s[len("score:"):].strip()
    return s


# ---------------------------- Report normalization -----------------------------
_LAST_FIRST_RE = re.compile(r"^([^,]+),\s*(.+)$")


def normalize_header(key: Any) -> str:
    return str(key).replace("\u00a0", " ").strip().lower()


def normalize_agent_name(raw: Any) -> str:
    """'Smith, John' -> 'John Smith'; anything else is only trimmed."""
    s = str(raw or "").strip()
    m = _LAST_FIRST_RE.match(s)
    if not m:
        return s
    return f"{m.group(2)} {m.group(1)}".strip()
