"""CSV history scanning and append-only writing."""
