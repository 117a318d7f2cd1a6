"""Models that follow every convention."""
