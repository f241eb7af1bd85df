"""
Log entry model and the CSV schema it is persisted under.

One run of the logger produces exactly one LogEntry, which becomes one row
of the data file. The column order below is the on-disk contract:

  timestamp, day_count, sleep_hours, sleep_quality, sleepiness, zonkedness,
  energy, strength, focus, intelligence, workout_today, remarks

Older files may lack the sleep_quality column. The scanner picks the
workout column for each row from the row's width (WORKOUT_INDEX_BY_WIDTH),
falling back to the most recent header for rows of any other width.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

# ── Schema ────────────────────────────────────────────────────────────────────

CSV_COLUMNS: List[str] = [
    "timestamp",
    "day_count",
    "sleep_hours",
    "sleep_quality",
    "sleepiness",
    "zonkedness",
    "energy",
    "strength",
    "focus",
    "intelligence",
    "workout_today",
    "remarks",
]

TIMESTAMP_COLUMN = CSV_COLUMNS[0]
WORKOUT_COLUMN = "workout_today"
WORKOUT_COLUMN_INDEX = CSV_COLUMNS.index(WORKOUT_COLUMN)  # 10

# Older files were written without sleep_quality, shifting workout_today to 9
LEGACY_CSV_COLUMNS: List[str] = [c for c in CSV_COLUMNS if c != "sleep_quality"]

# Rows of either layout can end up in one file, so the workout ordinal is
# chosen per row from its width
WORKOUT_INDEX_BY_WIDTH = {
    len(CSV_COLUMNS): WORKOUT_COLUMN_INDEX,
    len(LEGACY_CSV_COLUMNS): LEGACY_CSV_COLUMNS.index(WORKOUT_COLUMN),
}

SLEEP_HOURS_RANGE = (0.0, 12.0)
SLEEP_QUALITY_RANGE = (1.0, 10.0)
RATING_RANGE = (1, 10)


# ── Models ────────────────────────────────────────────────────────────────────

class LogEntry(BaseModel):
    """A single check-in. Immutable once built."""

    model_config = {"frozen": True}

    timestamp: datetime
    day_count: int = Field(ge=1)

    # Only asked on the first entry of a calendar day
    sleep_hours: Optional[float] = Field(
        default=None, ge=SLEEP_HOURS_RANGE[0], le=SLEEP_HOURS_RANGE[1]
    )
    sleep_quality: Optional[float] = Field(
        default=None, ge=SLEEP_QUALITY_RANGE[0], le=SLEEP_QUALITY_RANGE[1]
    )

    sleepiness: int = Field(ge=RATING_RANGE[0], le=RATING_RANGE[1])
    zonkedness: int = Field(ge=RATING_RANGE[0], le=RATING_RANGE[1])
    energy: int = Field(ge=RATING_RANGE[0], le=RATING_RANGE[1])
    strength: int = Field(ge=RATING_RANGE[0], le=RATING_RANGE[1])
    focus: int = Field(ge=RATING_RANGE[0], le=RATING_RANGE[1])
    intelligence: int = Field(ge=RATING_RANGE[0], le=RATING_RANGE[1])

    workout_today: bool
    remarks: str = ""

    @field_validator("timestamp")
    @classmethod
    def _require_timezone(cls, value: datetime) -> datetime:
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError("timestamp must be timezone-aware")
        return value

    def to_csv_row(self) -> List[str]:
        """Render the entry as cells in CSV_COLUMNS order."""
        return [
            self.timestamp.isoformat(),
            str(self.day_count),
            _optional_cell(self.sleep_hours),
            _optional_cell(self.sleep_quality),
            str(self.sleepiness),
            str(self.zonkedness),
            str(self.energy),
            str(self.strength),
            str(self.focus),
            str(self.intelligence),
            "true" if self.workout_today else "false",
            self.remarks,
        ]


@dataclass(frozen=True)
class ScanSummary:
    """Facts derived from the rows already on disk."""

    first_entry_date: Optional[date] = None
    last_entry_date: Optional[date] = None
    workout_logged_today: bool = False

    @classmethod
    def empty(cls) -> "ScanSummary":
        return cls()


def _optional_cell(value: Optional[float]) -> str:
    return "" if value is None else str(value)
