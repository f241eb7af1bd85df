"""Entry data models and CSV schema."""
