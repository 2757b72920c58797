import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List

import pandas as pd

from .errors import ReportReadError

logger = logging.getLogger(__name__)

ZIP_MAGIC = b"PK\x03\x04"     # xlsx
OLE_MAGIC = b"\xd0\xcf\x11\xe0"  # legacy xls


@dataclass
class ReportSheet:
    sheet_name: str
    rows: List[Dict[str, str]] = field(default_factory=list)


# ---------------------------- SAFE CSV/XLSX READER -----------------------------
def _read_excel_first_sheet(content: bytes) -> ReportSheet:
    try:
        with pd.ExcelFile(io.BytesIO(content)) as book:
            if not book.sheet_names:
                raise ReportReadError("Workbook has no worksheets.")
            name = str(book.sheet_names[0])
            df = book.parse(name, dtype=object)
    except ReportReadError:
        raise
    except Exception as exc:
        raise ReportReadError(f"Could not read workbook: {exc}") from exc
    return ReportSheet(sheet_name=name, rows=_frame_to_rows(df))


def _read_delimited(content: bytes) -> pd.DataFrame:
    """UTF-16 (TSV), UTF-8-SIG, then utf-8 / latin-1 / cp1252 fallbacks."""
    head = content[:4]

    # UTF-16 BOM (often Excel Unicode Text TSV)
    if head.startswith(b"\xff\xfe") or head.startswith(b"\xfe\xff"):
        try:
            return pd.read_csv(io.BytesIO(content), encoding="utf-16", sep="\t",
                               engine="python", dtype=str)
        except Exception:
            return pd.read_csv(io.BytesIO(content), encoding="utf-16", engine="python", dtype=str)

    # UTF-8 with BOM
    if head.startswith(b"\xef\xbb\xbf"):
        return pd.read_csv(io.BytesIO(content), encoding="utf-8-sig", engine="python", dtype=str)

    # No BOM: try utf-8 then fallbacks
    last_exc: Exception = ValueError("no encoding attempted")
    for enc in ("utf-8", "latin-1", "cp1252"):
        try:
            return pd.read_csv(io.BytesIO(content), encoding=enc, engine="python", dtype=str)
        except pd.errors.EmptyDataError:
            return pd.DataFrame()
        except Exception as exc:
            last_exc = exc
            continue
    raise last_exc


def _cell_text(value: Any) -> str:
    """Spreadsheet cell as the text a user sees (dates as M/D/YYYY H:MM)."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    if isinstance(value, datetime):
        return f"{value.month}/{value.day}/{value.year} {value.hour}:{value.minute:02d}"
    if isinstance(value, date):
        return f"{value.month}/{value.day}/{value.year}"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _frame_to_rows(df: pd.DataFrame) -> List[Dict[str, str]]:
    if df.empty:
        return []
    rows = []
    for rec in df.to_dict(orient="records"):
        row = {str(k): _cell_text(v) for k, v in rec.items()}
        if any(v.strip() for v in row.values()):
            rows.append(row)
    return rows


def read_report_rows(content: bytes) -> ReportSheet:
    """First worksheet (or the CSV body) as an ordered list of {header: text} rows.

    Empty content or a sheet without data rows gives an empty list; bytes that
    cannot be parsed at all raise ReportReadError.
    """
    if not content:
        return ReportSheet(sheet_name="")
    head = content[:4]
    if head.startswith(ZIP_MAGIC) or head.startswith(OLE_MAGIC):
        sheet = _read_excel_first_sheet(content)
    else:
        try:
            df = _read_delimited(content)
        except Exception as exc:
            raise ReportReadError(f"Could not read report: {exc}") from exc
        sheet = ReportSheet(sheet_name="csv", rows=_frame_to_rows(df))
    logger.info("Read %d row(s) from sheet %r", len(sheet.rows), sheet.sheet_name)
    return sheet
