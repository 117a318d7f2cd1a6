"""Models that break the equality contract."""
