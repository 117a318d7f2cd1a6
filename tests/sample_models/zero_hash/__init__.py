"""Models whose hash is a stub."""
