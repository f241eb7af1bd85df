"""
History scanner: derives a ScanSummary from an existing data file.

The file is append-ordered and may have been hand-edited, concatenated or
written by an older version of the tool, so every row is treated as
untrusted:

  - each physical line is parsed on its own (the writer never emits
    embedded newlines), so a stray quote cannot swallow the lines after it
  - rows whose first cell is the header literal are skipped wherever they
    appear (concatenated files repeat the header)
  - blank lines carry no data and are skipped silently
  - rows with a missing, unparsable or timezone-less timestamp are logged
    and skipped
  - rows dated after today are logged and skipped
  - the workout column is located per row from the row's width, so rows of
    both column layouts can share one file

Only a file that cannot be opened or decoded at all aborts the scan.
"""
import csv
import logging
import re
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from dailymetrics.models.entry import (
    TIMESTAMP_COLUMN,
    WORKOUT_COLUMN,
    WORKOUT_COLUMN_INDEX,
    WORKOUT_INDEX_BY_WIDTH,
    ScanSummary,
)

logger = logging.getLogger(__name__)

# datetime.fromisoformat keeps at most microseconds; older files carry nanoseconds
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


class HistoryReadError(RuntimeError):
    """Raised when the data file exists but cannot be read as text at all."""


def parse_timestamp(raw: str) -> datetime:
    """Parse an RFC 3339 / ISO 8601 timestamp that carries an offset.

    Raises:
        ValueError: if the text is not a datetime or has no timezone.
    """
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(r"\1", text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise ValueError(f"timestamp has no timezone: {raw!r}")
    return parsed


def scan_history(path: Union[str, Path], today: date, tz: tzinfo) -> ScanSummary:
    """
    Scan the data file and summarise what has already been logged.

    Args:
        path: CSV data file. A missing file is a first-ever run, not an error.
        today: the caller's current date in ``tz``.
        tz: zone used to attribute each stored timestamp to a calendar date.

    Returns:
        ScanSummary with the earliest date, the date of the last valid row in
        file order, and whether a row dated ``today`` already has a workout.

    Raises:
        HistoryReadError: if the file exists but cannot be opened or decoded.
    """
    path = Path(path)
    if not path.exists():
        return ScanSummary.empty()

    first_date: Optional[date] = None
    last_date: Optional[date] = None
    workout_logged_today = False
    header_workout_index = WORKOUT_COLUMN_INDEX

    try:
        with path.open("r", encoding="utf-8-sig", newline="") as f:
            for line_no, row in _iter_rows(f):
                if not row:
                    continue
                if not row[0].strip():
                    logger.warning("Line %d: missing timestamp column, skipping row", line_no)
                    continue

                ts_cell = row[0].strip()
                if ts_cell == TIMESTAMP_COLUMN:
                    logger.debug("Line %d: header row, skipping", line_no)
                    if WORKOUT_COLUMN in row:
                        header_workout_index = row.index(WORKOUT_COLUMN)
                    continue

                try:
                    row_date = parse_timestamp(ts_cell).astimezone(tz).date()
                except ValueError as exc:
                    logger.warning(
                        "Line %d: could not parse timestamp %r (%s), skipping row",
                        line_no, ts_cell, exc,
                    )
                    continue

                if row_date > today:
                    logger.warning(
                        "Line %d: entry dated %s is after today (%s), skipping row",
                        line_no, row_date, today,
                    )
                    continue

                if first_date is None or row_date < first_date:
                    first_date = row_date
                last_date = row_date

                if row_date == today:
                    workout_index = WORKOUT_INDEX_BY_WIDTH.get(len(row), header_workout_index)
                    if workout_index < len(row):
                        if row[workout_index].strip().lower() == "true":
                            workout_logged_today = True
                    else:
                        logger.warning(
                            "Line %d: entry for %s is missing the workout column (index %d)",
                            line_no, row_date, workout_index,
                        )
    except UnicodeDecodeError as exc:
        raise HistoryReadError(f"Data file {path} is not valid UTF-8 text: {exc}") from exc
    except OSError as exc:
        raise HistoryReadError(f"Could not read data file {path}: {exc}") from exc

    return ScanSummary(
        first_entry_date=first_date,
        last_entry_date=last_date,
        workout_logged_today=workout_logged_today,
    )


def _iter_rows(lines: Iterable[str]) -> Iterator[Tuple[int, List[str]]]:
    """Yield (line_number, row) pairs, one per physical line.

    Lines csv cannot tokenize are logged and skipped.
    """
    for line_no, line in enumerate(lines, start=1):
        try:
            row = next(csv.reader([line]), [])
        except csv.Error as exc:
            logger.warning("Line %d: corrupted CSV record (%s), skipping", line_no, exc)
            continue
        yield line_no, row
