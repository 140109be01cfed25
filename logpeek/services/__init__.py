"""Log ingestion, retention and query services."""
