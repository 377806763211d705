"""
Tests for configuration loading.

Tests key functionality including:
- Built-in defaults
- YAML file loading and error handling
- Environment variable overrides
- ${...} references
- Schema validation
"""

from pathlib import Path

import pytest

from extrautils.config import (
    CONFIG_FILE_ENV,
    Config,
    ExtraUtilsConfig,
    get_default_config,
)
from extrautils.config.config import MAX_CONFIG_SIZE_BYTES
from extrautils.exceptions import ConfigError, ValidationError

# =============================================================================
# Helpers
# =============================================================================


def write_yaml(path: Path, content: str) -> Path:
    path.write_text(content)
    return path


# =============================================================================
# Test Defaults
# =============================================================================


@pytest.mark.unit
class TestDefaults:
    """Test built-in defaults."""

    def test_default_values(self):
        """Test every section has its defaults."""
        config = Config()

        assert config.logging.level == "info"
        assert config.logging.micros is False
        assert config.watch.eager is True
        assert config.watch.depth is None
        assert config.watch.strict is False
        assert config.watch.placeholder == "<unserializable {type}>"
        assert config.inject.overwrite is False
        assert config.inject.shared is False

    def test_dotted_get(self):
        """Test dotted-path access."""
        config = Config()

        assert config.get("watch.eager") is True
        assert config.get("watch.missing", "fallback") == "fallback"
        assert config.has("inject.shared")

    def test_defaults_not_shared(self):
        """Test instances do not share mutable state."""
        first = Config()
        first.watch.eager = False

        assert Config().watch.eager is True

    def test_path_is_none(self):
        """Test a config without file has no path."""
        assert Config().path is None


# =============================================================================
# Test YAML Loading
# =============================================================================


@pytest.mark.integration
class TestYamlLoading:
    """Test loading configuration files."""

    def test_file_overrides_defaults(self, tmp_path):
        """Test file values are merged over defaults."""
        fname = write_yaml(tmp_path / "cfg.yaml", "watch:\n  eager: false\n")

        config = Config(fname)

        assert config.watch.eager is False
        assert config.watch.strict is False
        assert config.path == fname.resolve()

    def test_extra_sections_kept(self, tmp_path):
        """Test unknown top-level sections are available."""
        fname = write_yaml(tmp_path / "cfg.yaml", "app:\n  name: demo\n")

        assert Config(fname).app.name == "demo"

    def test_empty_file(self, tmp_path):
        """Test an empty file yields defaults."""
        fname = write_yaml(tmp_path / "cfg.yaml", "")

        assert Config(fname).watch.eager is True

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            Config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test syntax errors raise ConfigError."""
        fname = write_yaml(tmp_path / "cfg.yaml", "watch: [unclosed\n")

        with pytest.raises(ConfigError, match="invalid YAML"):
            Config(fname)

    def test_non_mapping_root(self, tmp_path):
        """Test a list at the top level is rejected."""
        fname = write_yaml(tmp_path / "cfg.yaml", "- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            Config(fname)

    def test_file_too_large(self, tmp_path):
        """Test oversized files are rejected."""
        fname = tmp_path / "cfg.yaml"
        fname.write_text("#" * (MAX_CONFIG_SIZE_BYTES + 1))

        with pytest.raises(ConfigError, match="too large"):
            Config(fname)

    def test_reload(self, tmp_path):
        """Test reload() picks up file changes."""
        fname = write_yaml(tmp_path / "cfg.yaml", "watch:\n  depth: 1\n")
        config = Config(fname)

        write_yaml(fname, "watch:\n  depth: 2\n")

        assert config.reload().watch.depth == 2


# =============================================================================
# Test Environment Overrides
# =============================================================================


@pytest.mark.unit
class TestEnvOverrides:
    """Test EXTRAUTILS_* environment overrides."""

    def test_override(self, monkeypatch):
        """Test an environment variable replaces a default."""
        monkeypatch.setenv("EXTRAUTILS_WATCH_EAGER", "false")
        monkeypatch.setenv("EXTRAUTILS_WATCH_DEPTH", "3")

        config = Config()

        assert config.watch.eager is False
        assert config.watch.depth == 3

    def test_override_beats_file(self, monkeypatch, tmp_path):
        """Test the environment wins over the file."""
        fname = write_yaml(tmp_path / "cfg.yaml", "inject:\n  overwrite: false\n")
        monkeypatch.setenv("EXTRAUTILS_INJECT_OVERWRITE", "true")

        assert Config(fname).inject.overwrite is True

    def test_disabled_overrides(self, monkeypatch):
        """Test overrides can be turned off."""
        monkeypatch.setenv("EXTRAUTILS_WATCH_EAGER", "false")

        config = Config(enable_env_overrides=False)

        assert config.watch.eager is True
        assert config.get_env_overrides() == {}

    def test_custom_prefix(self, monkeypatch):
        """Test a custom environment prefix."""
        monkeypatch.setenv("MYAPP_WATCH_STRICT", "true")

        assert Config(env_prefix="MYAPP_").watch.strict is True

    def test_config_file_variable_ignored(self, monkeypatch):
        """Test the config file variable is not treated as an override."""
        monkeypatch.setenv(CONFIG_FILE_ENV, "/nonexistent.yaml")

        config = Config()

        assert "config" not in config
        assert config.get_env_overrides() == {}

    def test_get_env_overrides(self, monkeypatch):
        """Test the pending overrides are reported by dotted path."""
        monkeypatch.setenv("EXTRAUTILS_LOGGING_LEVEL", "debug")

        assert Config().get_env_overrides() == {"logging.level": "debug"}

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("true", True),
            ("False", False),
            ("42", 42),
            ("1.5", 1.5),
            ("null", None),
            ("a, b", ["a", "b"]),
            ("text", "text"),
        ],
    )
    def test_value_conversion(self, raw, expected):
        """Test environment strings are converted to typed values."""
        assert Config()._convert_env_value(raw) == expected


# =============================================================================
# Test References
# =============================================================================


@pytest.mark.integration
class TestReferences:
    """Test ${...} substitution."""

    def test_reference(self, tmp_path):
        """Test string values can reference other keys."""
        fname = write_yaml(
            tmp_path / "cfg.yaml",
            "app:\n  name: demo\n  banner: 'running ${app.name}'\n",
        )

        assert Config(fname).app.banner == "running demo"

    def test_reference_in_list(self, tmp_path):
        """Test references inside lists."""
        fname = write_yaml(
            tmp_path / "cfg.yaml",
            "app:\n  name: demo\n  tags: ['${app.name}', other]\n",
        )

        assert Config(fname).app.tags == ["demo", "other"]

    def test_undefined_reference(self, tmp_path):
        """Test unknown references raise ConfigError."""
        fname = write_yaml(tmp_path / "cfg.yaml", "app:\n  banner: '${app.nope}'\n")

        with pytest.raises(ConfigError) as exc_info:
            Config(fname)

        assert exc_info.value.context["reference"] == "app.nope"


# =============================================================================
# Test Validation
# =============================================================================


@pytest.mark.unit
class TestValidation:
    """Test schema validation."""

    def test_defaults_validate(self):
        """Test the defaults form a valid configuration."""
        model = Config().validate()

        assert isinstance(model, ExtraUtilsConfig)
        assert model.watch.eager is True

    def test_invalid_level(self, monkeypatch):
        """Test an unknown level fails validation."""
        monkeypatch.setenv("EXTRAUTILS_WATCH_LEVEL", "loud")

        with pytest.raises(ValidationError) as exc_info:
            Config().validate()

        assert exc_info.value.context["errors"] == 1

    def test_negative_depth(self, monkeypatch):
        """Test depth must not be negative."""
        monkeypatch.setenv("EXTRAUTILS_WATCH_DEPTH", "-1")

        with pytest.raises(ValidationError):
            Config().validate()

    def test_unknown_watch_key(self, monkeypatch):
        """Test unknown keys in the watch section are rejected."""
        monkeypatch.setenv("EXTRAUTILS_WATCH_COLOR", "true")

        with pytest.raises(ValidationError):
            Config().validate()

    def test_logging_can_be_disabled(self, monkeypatch):
        """Test false is a valid logging level."""
        monkeypatch.setenv("EXTRAUTILS_LOGGING_LEVEL", "false")

        assert Config().validate().logging.level is False


# =============================================================================
# Test get_default_config
# =============================================================================


@pytest.mark.integration
class TestDefaultConfig:
    """Test the configuration used by module-level helpers."""

    def test_without_file(self):
        """Test defaults are used when no file is named."""
        assert get_default_config().watch.eager is True

    def test_file_from_environment(self, monkeypatch, tmp_path):
        """Test the file named by the environment variable is loaded."""
        fname = write_yaml(tmp_path / "cfg.yaml", "watch:\n  strict: true\n")
        monkeypatch.setenv(CONFIG_FILE_ENV, str(fname))

        assert get_default_config().watch.strict is True

    def test_invalid_file_rejected(self, monkeypatch, tmp_path):
        """Test a file failing validation raises ValidationError."""
        fname = write_yaml(tmp_path / "cfg.yaml", "watch:\n  depth: -5\n")
        monkeypatch.setenv(CONFIG_FILE_ENV, str(fname))

        with pytest.raises(ValidationError):
            get_default_config()
