"""
Interactive entry collector.

Walks the user through one check-in and returns a LogEntry. What gets asked
depends on the ScanSummary:

  - sleep hours / sleep quality: only on the first entry of a calendar day
  - six 1-10 ratings: always
  - workout: skipped (and forced to True) once a "yes" is on record today
  - remarks: always, empty allowed

Input and output are injected so the whole sequence can be scripted in
tests. Interrupting any prompt (Ctrl+C / Ctrl+D) raises UserCancelled; the
collector never touches the data file.
"""
from datetime import date, datetime, timezone
from typing import Callable, Optional, TypeVar

from dailymetrics.cli.theme import Theme
from dailymetrics.cli.validators import (
    ValidationFailure,
    parse_float_in_range,
    parse_int_in_range,
    parse_yes_no,
)
from dailymetrics.models.entry import (
    RATING_RANGE,
    SLEEP_HOURS_RANGE,
    SLEEP_QUALITY_RANGE,
    LogEntry,
    ScanSummary,
)

T = TypeVar("T")

DEFAULT_SLEEP_HOURS = "8"
DEFAULT_SLEEP_QUALITY = "7.5"

RATING_PROMPTS = {
    "sleepiness": "Sleepiness/Grogginess (1=Low, 10=High)",
    "zonkedness": "Zonked-ness (1=Low, 10=High)",
    "energy": "Energy Levels (1=Low, 10=High)",
    "strength": "Physical Strength (1=Low, 10=High)",
    "focus": "Focus (1=Low, 10=High)",
    "intelligence": "Perceived Intelligence (1=Low, 10=High)",
}


class UserCancelled(RuntimeError):
    """Raised when the user aborts a prompt. Nothing has been written."""


def is_first_entry_today(summary: ScanSummary, today: date) -> bool:
    return summary.last_entry_date is None or summary.last_entry_date != today


def compute_day_count(summary: ScanSummary, today: date) -> int:
    """1-based count of calendar days since the first-ever entry, never below 1."""
    first = summary.first_entry_date or today
    return max(1, (today - first).days + 1)


class EntryCollector:
    def __init__(
        self,
        theme: Theme,
        input_fn: Optional[Callable[[str], str]] = None,
        output_fn: Optional[Callable[[str], None]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._theme = theme
        self._input = input_fn or input
        self._output = output_fn or print
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def collect(self, today: date, summary: ScanSummary) -> LogEntry:
        """
        Run the prompt sequence for one entry.

        Raises:
            UserCancelled: if any prompt is interrupted.
        """
        theme = self._theme
        day_count = compute_day_count(summary, today)

        sleep_hours: Optional[float] = None
        sleep_quality: Optional[float] = None
        if is_first_entry_today(summary, today):
            self._output(theme.info("First log of the day!"))
            sleep_hours = self._ask(
                "How many hours did you sleep last night?",
                lambda raw: parse_float_in_range(raw, SLEEP_HOURS_RANGE),
                default=DEFAULT_SLEEP_HOURS,
            )
            sleep_quality = self._ask(
                "Rate sleep quality (1.0=Poor, 10.0=Excellent)",
                lambda raw: parse_float_in_range(raw, SLEEP_QUALITY_RANGE),
                default=DEFAULT_SLEEP_QUALITY,
            )
        else:
            self._output(theme.muted("Follow-up log for today."))

        ratings = {
            field: self._ask(question, lambda raw: parse_int_in_range(raw, RATING_RANGE))
            for field, question in RATING_PROMPTS.items()
        }

        if summary.workout_logged_today:
            # A "yes" earlier today is never overwritten by a later "no"
            self._output(theme.muted("Workout already logged as 'yes' earlier today."))
            workout_today = True
        else:
            self._output(theme.notice("Checking workout status..."))
            workout_today = self._ask("Did you (or will you) workout today? [y/n]", parse_yes_no)
            if workout_today:
                self._output(theme.highlight(" -> Awesome!"))
            else:
                self._output(theme.muted(" -> Ok, maybe later."))

        remarks = self._ask("Any remarks?", lambda raw: raw.strip())

        return LogEntry(
            timestamp=self._clock(),
            day_count=day_count,
            sleep_hours=sleep_hours,
            sleep_quality=sleep_quality,
            workout_today=workout_today,
            remarks=remarks,
            **ratings,
        )

    def _ask(self, question: str, parse: Callable[[str], T], default: Optional[str] = None) -> T:
        """Prompt until ``parse`` accepts the answer. A blank answer takes ``default``."""
        label = self._theme.prompt(question)
        if default is not None:
            label += self._theme.muted(f" ({default})")
        label += " "

        while True:
            try:
                raw = self._input(label)
            except (KeyboardInterrupt, EOFError) as exc:
                raise UserCancelled("Dialog interaction cancelled") from exc

            if default is not None and not raw.strip():
                raw = default
            try:
                return parse(raw)
            except ValidationFailure as exc:
                self._output(self._theme.error(f"  {exc}"))
