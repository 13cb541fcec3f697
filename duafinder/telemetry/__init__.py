"""NDJSON telemetry for search and error events."""
