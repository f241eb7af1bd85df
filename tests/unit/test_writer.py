"""Tests for the append-only record writer."""
import csv
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from conftest import HEADER_LINE, LEGACY_HEADER_LINE, TODAY, csv_line, legacy_csv_line
from dailymetrics.models.entry import CSV_COLUMNS
from dailymetrics.storage.scanner import scan_history
from dailymetrics.storage.writer import LogFileError, append_entry, render_rows


def _read_rows(path):
    with path.open(newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


# ─── render_rows ──────────────────────────────────────────────────────────────

class TestRenderRows:
    def test_with_header(self, make_entry):
        text = render_rows(make_entry(), include_header=True)
        lines = text.splitlines()
        assert lines[0] == HEADER_LINE
        assert len(lines) == 2

    def test_without_header(self, make_entry):
        text = render_rows(make_entry(), include_header=False)
        assert text.count("\n") == 1
        assert not text.startswith("timestamp")

    def test_remarks_with_comma_are_quoted(self, make_entry):
        text = render_rows(make_entry(remarks="tired, but ok"), include_header=False)
        assert text.rstrip("\n").endswith('"tired, but ok"')


# ─── append_entry ─────────────────────────────────────────────────────────────

class TestAppendEntry:
    def test_new_file_gets_header_and_row(self, data_file, make_entry):
        wrote_header = append_entry(data_file, make_entry())

        assert wrote_header is True
        rows = _read_rows(data_file)
        assert rows[0] == CSV_COLUMNS
        assert len(rows) == 2
        assert rows[1] == make_entry().to_csv_row()

    def test_existing_file_gets_row_only(self, data_file, make_entry):
        append_entry(data_file, make_entry())
        wrote_header = append_entry(data_file, make_entry(day_count=2, workout_today=False))

        assert wrote_header is False
        rows = _read_rows(data_file)
        assert len(rows) == 3
        assert rows.count(CSV_COLUMNS) == 1
        assert rows[2][1] == "2"

    def test_existing_rows_untouched(self, write_history, make_entry):
        original = HEADER_LINE + "\n" + csv_line("2025-03-01T09:00:00+00:00") + "\n"
        path = write_history(HEADER_LINE, csv_line("2025-03-01T09:00:00+00:00"))

        append_entry(path, make_entry())

        assert path.read_text(encoding="utf-8").startswith(original)

    def test_zero_length_file_treated_as_new(self, data_file, make_entry):
        data_file.write_text("")
        assert append_entry(data_file, make_entry()) is True
        assert _read_rows(data_file)[0] == CSV_COLUMNS

    def test_missing_trailing_newline_does_not_merge_rows(self, data_file, make_entry):
        data_file.write_text(HEADER_LINE + "\n" + csv_line("2025-03-01T09:00:00+00:00"))
        append_entry(data_file, make_entry())

        rows = _read_rows(data_file)
        assert len(rows) == 3
        assert rows[2] == make_entry().to_csv_row()

    def test_creates_parent_directories(self, tmp_path, make_entry):
        path = tmp_path / "nested" / "dir" / "metrics.csv"
        append_entry(path, make_entry())
        assert path.exists()

    def test_absent_sleep_fields_written_as_empty_cells(self, data_file, make_entry):
        append_entry(data_file, make_entry(sleep_hours=None, sleep_quality=None))
        row = _read_rows(data_file)[1]
        assert row[2] == ""
        assert row[3] == ""

    def test_syncs_to_disk(self, data_file, make_entry):
        with patch("dailymetrics.storage.writer.os.fsync") as mock_fsync:
            append_entry(data_file, make_entry())
        mock_fsync.assert_called_once()

    def test_os_error_wrapped(self, tmp_path, make_entry):
        # Appending to a directory path fails at open()
        with pytest.raises(LogFileError):
            append_entry(tmp_path, make_entry())

    def test_failed_write_leaves_file_unchanged(self, write_history, make_entry):
        path = write_history(HEADER_LINE, csv_line("2025-03-01T09:00:00+00:00"))
        before = path.read_bytes()

        with patch("dailymetrics.storage.writer.render_rows", side_effect=OSError("disk full")):
            with pytest.raises(LogFileError):
                append_entry(path, make_entry())

        assert path.read_bytes() == before


# ─── Round trip ───────────────────────────────────────────────────────────────

class TestRoundTrip:
    def test_rescan_recovers_last_date_and_workout_flag(self, data_file, make_entry):
        append_entry(data_file, make_entry(workout_today=True))
        summary = scan_history(data_file, TODAY, timezone.utc)

        assert summary.first_entry_date == TODAY
        assert summary.last_entry_date == TODAY
        assert summary.workout_logged_today is True

    def test_rescan_with_no_workout(self, data_file, make_entry):
        append_entry(data_file, make_entry(workout_today=False))
        summary = scan_history(data_file, TODAY, timezone.utc)

        assert summary.last_entry_date == TODAY
        assert summary.workout_logged_today is False

    def test_rescan_of_offset_timestamp(self, data_file, make_entry):
        tz = timezone(timedelta(hours=9))
        append_entry(data_file, make_entry(timestamp=datetime(2025, 3, 10, 6, 0, tzinfo=tz)))

        # 06:00 at +09:00 is 21:00 UTC on the 9th
        summary = scan_history(data_file, TODAY, timezone.utc)
        assert summary.last_entry_date == TODAY - timedelta(days=1)
        summary = scan_history(data_file, TODAY, tz)
        assert summary.last_entry_date == TODAY

    def test_rescan_after_append_to_legacy_layout_file(self, write_history, make_entry):
        path = write_history(
            LEGACY_HEADER_LINE,
            legacy_csv_line("2025-03-09T08:00:00+00:00", workout="false"),
        )
        append_entry(path, make_entry(workout_today=True))
        summary = scan_history(path, TODAY, timezone.utc)

        assert summary.first_entry_date == TODAY - timedelta(days=1)
        assert summary.last_entry_date == TODAY
        assert summary.workout_logged_today is True
