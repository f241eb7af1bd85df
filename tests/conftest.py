"""Shared test fixtures."""
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, List

import pytest

from dailymetrics.models.entry import CSV_COLUMNS, LEGACY_CSV_COLUMNS, LogEntry

TODAY = date(2025, 3, 10)
NOW = datetime(2025, 3, 10, 21, 45, 12, tzinfo=timezone.utc)

HEADER_LINE = ",".join(CSV_COLUMNS)
LEGACY_HEADER_LINE = ",".join(LEGACY_CSV_COLUMNS)


def csv_line(timestamp: str, workout: str = "false", day_count: int = 1) -> str:
    """A data line in the current column layout with fixed ratings."""
    return f"{timestamp},{day_count},7.0,8.0,3,4,5,6,7,8,{workout},ok"


def legacy_csv_line(timestamp: str, workout: str = "false", day_count: int = 1) -> str:
    """A data line in the older layout without sleep_quality."""
    return f"{timestamp},{day_count},7.0,3,4,5,6,7,8,{workout},ok"


class ScriptedInput:
    """Feeds canned answers to a prompt function and records the prompts.

    An exception class or instance in the answer list is raised instead of
    returned, to simulate Ctrl+C / Ctrl+D.
    """

    def __init__(self, answers: Iterable):
        self._answers = list(answers)
        self.prompts: List[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._answers:
            raise AssertionError(f"Unexpected prompt: {prompt!r}")
        answer = self._answers.pop(0)
        if isinstance(answer, BaseException) or (
            isinstance(answer, type) and issubclass(answer, BaseException)
        ):
            raise answer
        return answer

    @property
    def remaining(self) -> int:
        return len(self._answers)


@pytest.fixture
def data_file(tmp_path) -> Path:
    """Path to a not-yet-created data file."""
    return tmp_path / "daily_metrics.csv"


@pytest.fixture
def write_history(data_file) -> Callable[..., Path]:
    """Write the given lines (each newline-terminated) to the data file."""
    def _write(*lines: str) -> Path:
        data_file.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return data_file
    return _write


@pytest.fixture
def make_entry() -> Callable[..., LogEntry]:
    """Factory for a valid LogEntry; keyword overrides replace defaults."""
    def _make(**overrides) -> LogEntry:
        fields = dict(
            timestamp=NOW,
            day_count=1,
            sleep_hours=7.0,
            sleep_quality=8.0,
            sleepiness=3,
            zonkedness=4,
            energy=5,
            strength=6,
            focus=7,
            intelligence=8,
            workout_today=True,
            remarks="felt good",
        )
        fields.update(overrides)
        return LogEntry(**fields)
    return _make
