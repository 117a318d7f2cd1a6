"""Model packages scanned by the harness tests."""
