import os
from pathlib import Path

import pytest

from modelguard import HarnessConfig

# ============================================================================
# Environment Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_config_env(tmp_path, monkeypatch):
    """Keep user config files and MODELGUARD_* variables out of every test."""
    for key in list(os.environ):
        if key.startswith("MODELGUARD_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("MODELGUARD_CONFIG_PATH", str(tmp_path / "missing.yaml"))


# ============================================================================
# Sample Model Fixtures
# ============================================================================


@pytest.fixture
def good_config():
    """Config for the sample package whose models all pass."""
    return HarnessConfig(
        namespace="sample_models.good",
        excluded_classes={"sample_models.good.widgets.LegacyRecord"},
    )


@pytest.fixture
def config_file(tmp_path) -> Path:
    """Path for a YAML config file inside the test's temp directory."""
    return tmp_path / "modelguard.yaml"
