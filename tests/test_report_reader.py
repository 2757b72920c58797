import io
from datetime import datetime

import pandas as pd
import pytest

from coaching_tracker.errors import ReportReadError
from coaching_tracker.reconcile import import_report
from coaching_tracker.report_reader import read_report_rows

COLUMNS = ["Id", "Agent Name", "Coaching Form Name", "Date Time", "Created By Name", "Team Leader"]
ROWS = [
    ["101", "Smith, John", "Scheduled Coaching", "2/1/2026 9:00 AM", "Pat Lee", "Dana Ray"],
    ["102", "Doe, Jane", "Side by Side", "", "Pat Lee", "Dana Ray"],
]


def xlsx_bytes(df, sheet_name="Export"):
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
        pd.DataFrame({"other": ["ignored"]}).to_excel(writer, sheet_name="Second", index=False)
    return buf.getvalue()


def test_reads_first_worksheet_as_strings():
    sheet = read_report_rows(xlsx_bytes(pd.DataFrame(ROWS, columns=COLUMNS)))
    assert sheet.sheet_name == "Export"
    assert len(sheet.rows) == 2
    assert sheet.rows[0]["Id"] == "101"
    assert sheet.rows[1]["Date Time"] == ""


def test_workbook_dates_and_numbers_read_as_displayed_text():
    df = pd.DataFrame({"Id": [101], "Agent Name": ["Ann Lee"], "Date Time": [datetime(2026, 2, 1, 9, 0)]})
    row = read_report_rows(xlsx_bytes(df)).rows[0]
    assert row["Date Time"] == "2/1/2026 9:00"
    assert row["Id"] == "101"


def test_reads_csv():
    content = pd.DataFrame(ROWS, columns=COLUMNS).to_csv(index=False).encode("utf-8")
    sheet = read_report_rows(content)
    assert [r["Agent Name"] for r in sheet.rows] == ["Smith, John", "Doe, Jane"]


def test_reads_utf8_sig_csv():
    content = "Id,Agent Name\n7,Ann Lee\n".encode("utf-8-sig")
    assert read_report_rows(content).rows == [{"Id": "7", "Agent Name": "Ann Lee"}]


def test_blank_rows_dropped():
    content = b"Id,Agent Name\n1,Ann\n,\n2,Bob\n"
    assert [r["Id"] for r in read_report_rows(content).rows] == ["1", "2"]


def test_empty_content_has_no_rows():
    assert read_report_rows(b"").rows == []
    assert read_report_rows(b"Id,Agent Name\n").rows == []


def test_unreadable_workbook_raises():
    with pytest.raises(ReportReadError):
        read_report_rows(b"PK\x03\x04 this is not a workbook")


class TestImportReport:
    def test_no_data_is_distinct_outcome(self):
        outcome = import_report((), b"Id,Agent Name\n")
        assert outcome.status == "no_data"
        assert outcome.result is None
        assert outcome.rows_read == 0

    def test_rows_but_nothing_imported(self):
        content = b"Id,Agent Name,Coaching Form Name\n1,Ann Lee,QA Review\n"
        outcome = import_report((), content)
        assert outcome.status == "ok"
        assert (outcome.rows_read, outcome.imported, outcome.skipped) == (1, 0, 0)

    def test_import_twice(self):
        content = xlsx_bytes(pd.DataFrame(ROWS, columns=COLUMNS))
        first = import_report((), content)
        second = import_report(first.result.agents, content)
        assert (first.imported, first.skipped) == (2, 0)
        assert (second.imported, second.skipped) == (0, 2)
        assert {a.name for a in first.result.agents} == {"John Smith", "Jane Doe"}
