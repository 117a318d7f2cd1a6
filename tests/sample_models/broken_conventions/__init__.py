"""Models that break getter, setter or repr conventions."""
