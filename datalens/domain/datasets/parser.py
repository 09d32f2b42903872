"""
Decode uploaded tabular files into a :class:`Dataset`.

CSV and delimited text go through ``pandas.read_csv`` with every cell kept as
a string; spreadsheets go through ``pandas.read_excel`` reading the first
sheet only. Type coercion of numeric-looking strings is left to consumers.
"""
import csv
import io
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from datalens.core.errors import EmptyDataset, ParseFailure, UnsupportedFormat
from datalens.domain.datasets.models import Dataset, RawRow, collect_columns
from datalens.utils.serialization import make_cell_json_safe

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".xls", ".txt")
SPREADSHEET_ENGINES = {".xlsx": "openpyxl", ".xls": "xlrd"}
CANDIDATE_DELIMITERS = ",\t;|"
SNIFF_SAMPLE_BYTES = 64 * 1024


def normalize_extension(extension: str) -> str:
    """Lower-case an extension and make sure it carries a leading dot."""
    ext = (extension or "").strip().lower()
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return ext


def ensure_supported_extension(
    extension: str,
    supported_extensions: Sequence[str] = SUPPORTED_EXTENSIONS,
) -> str:
    """Return the normalized extension or raise :class:`UnsupportedFormat`."""
    ext = normalize_extension(extension)
    if ext not in supported_extensions:
        raise UnsupportedFormat(
            f"Unsupported file type: {ext or '(none)'}. "
            f"Supported types are: {', '.join(supported_extensions)}"
        )
    return ext


def detect_delimiter(file_content: bytes) -> str:
    """
    Guess the field delimiter of a delimited text file.

    Only comma, tab, semicolon and pipe are considered. Falls back to a comma
    when the sniffer cannot decide (e.g. single-column files).
    """
    sample = file_content[:SNIFF_SAMPLE_BYTES].decode("utf-8-sig", errors="replace")
    if len(file_content) > SNIFF_SAMPLE_BYTES and "\n" in sample:
        # Drop the trailing partial line
        sample = sample[: sample.rfind("\n")]
    if not sample.strip():
        return ","

    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=CANDIDATE_DELIMITERS)
    except csv.Error:
        logger.debug("Delimiter sniffing inconclusive, defaulting to comma")
        return ","
    return dialect.delimiter


def _frame_to_rows(df: pd.DataFrame) -> List[RawRow]:
    header = [str(column) for column in df.columns]
    return [
        {column: make_cell_json_safe(value) for column, value in zip(header, values)}
        for values in df.itertuples(index=False, name=None)
    ]


def read_delimited(file_content: bytes) -> pd.DataFrame:
    """Read CSV/TXT bytes without coercing any cell away from its text form."""
    delimiter = detect_delimiter(file_content)
    logger.debug("Reading delimited text with delimiter %r", delimiter)
    return pd.read_csv(
        io.BytesIO(file_content),
        sep=delimiter,
        dtype=str,
        keep_default_na=False,
        encoding="utf-8-sig",
        encoding_errors="replace",
        skip_blank_lines=True,
    )


def read_first_sheet(file_content: bytes, extension: str) -> pd.DataFrame:
    """Read the first sheet of a workbook; any other sheets are ignored."""
    return pd.read_excel(
        io.BytesIO(file_content),
        sheet_name=0,
        engine=SPREADSHEET_ENGINES[extension],
        dtype=object,
    )


def parse_tabular(
    file_content: bytes,
    extension: str,
    source_name: Optional[str] = None,
    supported_extensions: Sequence[str] = SUPPORTED_EXTENSIONS,
) -> Dataset:
    """
    Parse an uploaded file into a Dataset.

    Args:
        file_content: Raw bytes of the upload
        extension: File extension, with or without the leading dot
        source_name: Original file name, used for logging only
        supported_extensions: Extensions accepted by the caller

    Returns:
        Dataset with rows in file order and columns in header order

    Raises:
        UnsupportedFormat: extension not accepted
        EmptyDataset: file is blank or holds a header without data rows
        ParseFailure: the decoder could not read the file
    """
    ext = ensure_supported_extension(extension, supported_extensions)
    label = source_name or f"upload{ext}"

    if not file_content or not file_content.strip():
        raise EmptyDataset(f"{label} is empty")

    try:
        if ext in SPREADSHEET_ENGINES:
            df = read_first_sheet(file_content, ext)
        else:
            df = read_delimited(file_content)
    except pd.errors.EmptyDataError:
        raise EmptyDataset(f"{label} has no header row or data")
    except Exception as e:
        logger.error("Failed to parse %s: %s", label, e)
        raise ParseFailure(f"Failed to parse file: {e}") from e

    rows = _frame_to_rows(df)
    if not rows:
        raise EmptyDataset(f"{label} contains a header but no data rows")
    columns = collect_columns(rows)

    logger.info("Parsed %s: %d rows, columns: %s", label, len(rows), columns)
    return Dataset(rows=rows, columns=columns, source_name=source_name)


def parse_tabular_file(
    file_path: str,
    extension: Optional[str] = None,
    source_name: Optional[str] = None,
    supported_extensions: Sequence[str] = SUPPORTED_EXTENSIONS,
) -> Dataset:
    """Parse a file on disk; the extension defaults to the path's suffix."""
    path = Path(file_path)
    return parse_tabular(
        path.read_bytes(),
        extension if extension is not None else path.suffix,
        source_name=source_name or path.name,
        supported_extensions=supported_extensions,
    )
