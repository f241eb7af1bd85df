"""
Record writer: appends one LogEntry to the data file.

The file is only ever appended to. The header row is written when the file
is new (absent or zero-length), in the same write as the first data row.
The whole chunk is rendered before the file is opened so that an
exception while rendering can never leave half a row on disk.
"""
import csv
import io
import logging
import os
from pathlib import Path
from typing import Union

from dailymetrics.models.entry import CSV_COLUMNS, LogEntry

logger = logging.getLogger(__name__)


class LogFileError(RuntimeError):
    """Raised when the data file cannot be created, opened or written."""


def render_rows(entry: LogEntry, include_header: bool) -> str:
    """Return the CSV text for ``entry``, optionally preceded by the header."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    if include_header:
        writer.writerow(CSV_COLUMNS)
    writer.writerow(entry.to_csv_row())
    return buf.getvalue()


def append_entry(path: Union[str, Path], entry: LogEntry) -> bool:
    """
    Append ``entry`` to the data file and sync it to disk.

    Args:
        path: CSV data file; created (with parent directories) if absent.
        entry: completed entry to persist.

    Returns:
        True if the header row was written (first write to this file).

    Raises:
        LogFileError: on any OS-level failure. Existing rows are untouched.
    """
    path = Path(path)
    try:
        is_new = not path.exists() or path.stat().st_size == 0
        chunk = render_rows(entry, include_header=is_new)
        if not is_new and not _ends_with_newline(path):
            chunk = "\n" + chunk

        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8", newline="") as f:
            f.write(chunk)
            f.flush()
            os.fsync(f.fileno())
    except OSError as exc:
        raise LogFileError(f"Could not write to data file {path}: {exc}") from exc

    logger.info("Appended entry for day %d to %s", entry.day_count, path)
    return is_new


def _ends_with_newline(path: Path) -> bool:
    with path.open("rb") as f:
        f.seek(-1, os.SEEK_END)
        return f.read(1) == b"\n"
