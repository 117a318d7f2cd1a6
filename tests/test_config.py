"""
Unit tests for configuration system.

Tests configuration loading, validation, merging, and error handling.
"""

from pathlib import Path

import pytest
import yaml

from modelguard.config import (
    ConfigError,
    ConfigLoader,
    HarnessConfig,
    create_default_config,
    load_config,
)
from modelguard.models import DEFAULT_SUPPRESSIONS, ContractWarning


class TestHarnessConfigModel:
    """Test HarnessConfig pydantic model validation."""

    def test_default_config(self):
        """Test creating config with all defaults."""
        config = HarnessConfig()

        assert config.namespace is None
        assert config.excluded_classes == set()
        assert config.excluded_suffixes == {"Builder", "Test", "IT"}
        assert config.suppressed_warnings == set(DEFAULT_SUPPRESSIONS)
        assert config.log_level == "INFO"

    def test_warning_names_any_case(self):
        """Test suppressed warnings accept names in any case."""
        config = HarnessConfig(suppressed_warnings=["null_fields", " Strict_HashCode "])

        assert config.suppressed_warnings == {
            ContractWarning.NULL_FIELDS,
            ContractWarning.STRICT_HASHCODE,
        }

    def test_single_warning_string(self):
        """Test a single warning name is accepted."""
        config = HarnessConfig(suppressed_warnings="unhashable")

        assert config.suppressed_warnings == {ContractWarning.UNHASHABLE}

    def test_unknown_warning_rejected(self):
        """Test unknown warning names are rejected."""
        with pytest.raises(ValueError):
            HarnessConfig(suppressed_warnings=["NOT_A_WARNING"])

    def test_blank_namespace_rejected(self):
        """Test namespace validation."""
        with pytest.raises(ValueError, match="cannot be blank"):
            HarnessConfig(namespace="   ")

    def test_namespace_is_stripped(self):
        """Test surrounding whitespace is removed from the namespace."""
        assert HarnessConfig(namespace=" pkg.models ").namespace == "pkg.models"

    def test_log_level_normalized(self):
        """Test log level is upper-cased and validated."""
        assert HarnessConfig(log_level="debug").log_level == "DEBUG"

        with pytest.raises(ValueError, match="log_level must be one of"):
            HarnessConfig(log_level="chatty")

    def test_unknown_fields_rejected(self):
        """Test that unknown fields are rejected (extra=forbid)."""
        with pytest.raises(ValueError, match="Extra inputs are not permitted"):
            HarnessConfig(unknown_field="value")

    def test_exclusion_set(self):
        """Test conversion to an ExclusionSet."""
        config = HarnessConfig(
            excluded_classes={"pkg.mod.Legacy"}, excluded_suffixes={"Dto"}
        )

        exclusions = config.exclusion_set()

        assert exclusions.excludes("pkg.mod.Legacy")
        assert exclusions.excludes("pkg.mod.AccountDto")
        assert not exclusions.excludes("pkg.mod.AccountBuilder")

    def test_suppression_set_is_frozen(self):
        """Test suppressions are handed out as a frozenset."""
        assert isinstance(HarnessConfig().suppression_set(), frozenset)


class TestConfigLoader:
    """Test ConfigLoader class."""

    @pytest.fixture
    def temp_config_dir(self, tmp_path: Path) -> Path:
        """Create temporary config directory."""
        config_dir = tmp_path / ".config" / "modelguard"
        config_dir.mkdir(parents=True)
        return config_dir

    @pytest.fixture
    def temp_config_file(self, temp_config_dir: Path) -> Path:
        """Create temporary config file."""
        return temp_config_dir / "config.yaml"

    def test_load_nonexistent_file(self, temp_config_file: Path):
        """Test loading when file doesn't exist returns defaults."""
        loader = ConfigLoader(temp_config_file)
        config = loader.load()

        assert isinstance(config, HarnessConfig)
        assert config.namespace is None

    def test_load_valid_file(self, temp_config_file: Path):
        """Test loading valid YAML file."""
        config_data = {
            "namespace": "pkg.models",
            "excluded_classes": ["pkg.models.Legacy"],
            "suppressed_warnings": ["NULL_FIELDS"],
            "log_level": "warning",
        }

        with open(temp_config_file, "w") as f:
            yaml.dump(config_data, f)

        loader = ConfigLoader(temp_config_file)
        config = loader.load()

        assert config.namespace == "pkg.models"
        assert config.excluded_classes == {"pkg.models.Legacy"}
        assert config.suppressed_warnings == {ContractWarning.NULL_FIELDS}
        assert config.log_level == "WARNING"

    def test_load_empty_file(self, temp_config_file: Path):
        """Test an empty file yields defaults."""
        temp_config_file.write_text("")

        assert ConfigLoader(temp_config_file).load() == HarnessConfig()

    def test_load_invalid_yaml(self, temp_config_file: Path):
        """Test loading invalid YAML raises error."""
        with open(temp_config_file, "w") as f:
            f.write("invalid: yaml: content:\n  - bad")

        loader = ConfigLoader(temp_config_file)

        with pytest.raises(ConfigError, match="Invalid YAML"):
            loader.load()

    def test_load_non_mapping(self, temp_config_file: Path):
        """Test a YAML list at the top level is rejected."""
        temp_config_file.write_text("- one\n- two\n")

        with pytest.raises(ConfigError, match="must contain a mapping"):
            ConfigLoader(temp_config_file).load()

    def test_load_invalid_schema(self, temp_config_file: Path):
        """Test loading invalid schema raises error."""
        with open(temp_config_file, "w") as f:
            yaml.dump({"suppressed_warnings": ["NO_SUCH_WARNING"]}, f)

        loader = ConfigLoader(temp_config_file)

        with pytest.raises(ConfigError, match="validation failed"):
            loader.load()

    def test_load_from_env(self, temp_config_file: Path, monkeypatch: pytest.MonkeyPatch):
        """Test loading from environment variables."""
        monkeypatch.setenv("MODELGUARD_NAMESPACE", "pkg.models")
        monkeypatch.setenv("MODELGUARD_EXCLUDED_CLASSES", "pkg.a.One, pkg.b.Two,")
        monkeypatch.setenv("MODELGUARD_SUPPRESSED_WARNINGS", "null_fields,unhashable")
        monkeypatch.setenv("MODELGUARD_LOG_LEVEL", "debug")

        loader = ConfigLoader(temp_config_file)
        config = loader.load()

        assert config.namespace == "pkg.models"
        assert config.excluded_classes == {"pkg.a.One", "pkg.b.Two"}
        assert config.suppressed_warnings == {
            ContractWarning.NULL_FIELDS,
            ContractWarning.UNHASHABLE,
        }
        assert config.log_level == "DEBUG"

    def test_env_overrides_file(
        self, temp_config_file: Path, monkeypatch: pytest.MonkeyPatch
    ):
        """Test environment variables override file values."""
        with open(temp_config_file, "w") as f:
            yaml.dump({"namespace": "from.file", "log_level": "ERROR"}, f)
        monkeypatch.setenv("MODELGUARD_NAMESPACE", "from.env")

        config = ConfigLoader(temp_config_file).load()

        assert config.namespace == "from.env"
        assert config.log_level == "ERROR"

    def test_unknown_env_variable_rejected(
        self, temp_config_file: Path, monkeypatch: pytest.MonkeyPatch
    ):
        """Test unknown MODELGUARD_* variables fail validation."""
        monkeypatch.setenv("MODELGUARD_COLOR", "blue")

        with pytest.raises(ConfigError, match="validation failed"):
            ConfigLoader(temp_config_file).load()

    def test_config_path_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Test MODELGUARD_CONFIG_PATH selects the file."""
        config_file = tmp_path / "custom.yaml"
        config_file.write_text(yaml.dump({"namespace": "env.path"}))
        monkeypatch.setenv("MODELGUARD_CONFIG_PATH", str(config_file))

        loader = ConfigLoader()

        assert loader.config_path == config_file
        assert loader.load().namespace == "env.path"

    def test_default_config_path(self, monkeypatch: pytest.MonkeyPatch):
        """Test the default location when no path is configured."""
        monkeypatch.delenv("MODELGUARD_CONFIG_PATH")

        assert ConfigLoader().config_path == ConfigLoader.DEFAULT_CONFIG_FILE

    def test_merge_overrides(self, temp_config_file: Path):
        """Test merging explicit overrides."""
        loader = ConfigLoader(temp_config_file)
        base_config = loader.load()

        merged = loader.merge_overrides(
            base_config, {"namespace": "pkg.override", "log_level": None}
        )

        assert merged.namespace == "pkg.override"
        assert merged.log_level == "INFO"

    def test_merge_invalid_overrides(self, temp_config_file: Path):
        """Test invalid overrides raise ConfigError."""
        loader = ConfigLoader(temp_config_file)

        with pytest.raises(ConfigError):
            loader.merge_overrides(loader.load(), {"log_level": "LOUD"})

    def test_create_default_config(self, temp_config_file: Path):
        """Test creating default config file."""
        loader = ConfigLoader(temp_config_file)
        path = loader.create_default_config()

        assert path.exists()
        assert path == temp_config_file

        # Verify it's valid YAML matching the defaults
        config = loader.load()
        assert config == HarnessConfig()

    def test_create_default_config_exists(self, temp_config_file: Path):
        """Test creating default config when file exists."""
        temp_config_file.touch()

        loader = ConfigLoader(temp_config_file)

        with pytest.raises(ConfigError, match="already exists"):
            loader.create_default_config(force=False)

        # Should succeed with force=True
        path = loader.create_default_config(force=True)
        assert path.exists()


class TestConvenienceFunctions:
    """Test module-level convenience functions."""

    def test_load_config(self, tmp_path: Path):
        """Test load_config function."""
        config_file = tmp_path / "config.yaml"

        config = load_config(config_file)

        assert isinstance(config, HarnessConfig)

    def test_load_config_with_overrides(self, tmp_path: Path):
        """Test load_config with overrides."""
        config_file = tmp_path / "config.yaml"

        config = load_config(config_file, overrides={"namespace": "pkg.models"})

        assert config.namespace == "pkg.models"

    def test_create_default_config(self, tmp_path: Path):
        """Test create_default_config function."""
        config_file = tmp_path / "nested" / "config.yaml"

        path = create_default_config(config_file)

        assert path.exists()
        assert "suppressed_warnings" in path.read_text()
