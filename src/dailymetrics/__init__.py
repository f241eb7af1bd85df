"""Daily metrics logger: one interactive check-in appended to a CSV file per run."""

__version__ = "0.1.0"
