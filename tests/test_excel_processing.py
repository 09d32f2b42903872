import io
from pathlib import Path

import pandas as pd
import pytest

from datalens.core.errors import EmptyDataset, ParseFailure
from datalens.domain.datasets.parser import parse_tabular

LEGACY_WORKBOOK = Path(__file__).parent / "data" / "clients-two-tabs.xls"


def _two_tab_workbook() -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame(
            {"client": ["Acme", "Globex", "Initech"], "sales oct": [120, 80.5, None]}
        ).to_excel(writer, sheet_name="Clients Oct", index=False)
        pd.DataFrame(
            {"client": ["Acme"], "sales nov": [99]}
        ).to_excel(writer, sheet_name="Clients Nov", index=False)
    return buffer.getvalue()


def test_parse_xlsx_reads_first_sheet_only():
    dataset = parse_tabular(_two_tab_workbook(), ".xlsx")

    assert dataset.total_rows == 3
    assert dataset.columns == ["client", "sales oct"]
    assert "sales nov" not in dataset.rows[0]


def test_parse_xlsx_keeps_native_numbers_and_blanks_missing_cells():
    dataset = parse_tabular(_two_tab_workbook(), "xlsx")

    assert dataset.rows[0] == {"client": "Acme", "sales oct": 120}
    assert dataset.rows[1]["sales oct"] == 80.5
    assert dataset.rows[2]["sales oct"] == ""


def test_parse_legacy_xls_reads_first_sheet_only():
    dataset = parse_tabular(LEGACY_WORKBOOK.read_bytes(), ".xls")

    assert dataset.total_rows == 3
    assert dataset.columns == ["client", "sales oct"]
    assert [row["client"] for row in dataset.rows] == ["Acme", "Globex", "Initech"]
    assert "sales nov" not in dataset.rows[0]


def test_parse_legacy_xls_keeps_native_numbers_and_blanks_missing_cells():
    dataset = parse_tabular(LEGACY_WORKBOOK.read_bytes(), "XLS")

    assert dataset.rows[0] == {"client": "Acme", "sales oct": 120}
    assert dataset.rows[1]["sales oct"] == 80.5
    assert dataset.rows[2]["sales oct"] == ""


def test_parse_xlsx_header_only_is_empty_dataset():
    buffer = io.BytesIO()
    pd.DataFrame(columns=["date", "revenue"]).to_excel(buffer, index=False, engine="openpyxl")

    with pytest.raises(EmptyDataset):
        parse_tabular(buffer.getvalue(), ".xlsx")


def test_parse_corrupt_workbook_is_parse_failure():
    with pytest.raises(ParseFailure) as exc_info:
        parse_tabular(b"this is not a zip archive", ".xlsx")

    assert exc_info.value.status_code == 422
    assert "Failed to parse file" in exc_info.value.detail
