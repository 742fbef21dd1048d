"""Tests for the configuration system."""

import json
from dataclasses import FrozenInstanceError

import pytest

from xmlite.shared.config import ConfigError, ConfigValidationError, ParserConfig


class TestParserConfig:
    """Test suite for ParserConfig."""

    def test_default_configuration(self):
        """Test default configuration values."""
        config = ParserConfig()

        assert config.strict_content is False
        assert config.keep_whitespace_text is True
        assert config.max_depth is None
        assert config.warn_on_recovery is True
        assert config.correlation_id is None

    def test_configuration_is_frozen(self):
        """Test configuration cannot be modified in place."""
        config = ParserConfig()
        with pytest.raises(FrozenInstanceError):
            config.max_depth = 10

    def test_max_depth_validation(self):
        """Test max_depth must be a positive int or None."""
        with pytest.raises(ConfigValidationError, match="max_depth must be > 0") as exc_info:
            ParserConfig(max_depth=0)
        assert exc_info.value.field_name == "max_depth"
        assert exc_info.value.suggestions

        with pytest.raises(ConfigValidationError, match="max_depth must be an int"):
            ParserConfig(max_depth="10")

        with pytest.raises(ConfigValidationError, match="max_depth must be an int"):
            ParserConfig(max_depth=True)

    def test_flag_validation(self):
        """Test boolean flags reject other types."""
        for name in ("strict_content", "keep_whitespace_text", "warn_on_recovery"):
            with pytest.raises(ConfigValidationError, match=f"{name} must be a bool"):
                ParserConfig(**{name: 1})

    def test_correlation_id_validation(self):
        """Test correlation_id must be a string."""
        with pytest.raises(ConfigValidationError, match="correlation_id"):
            ParserConfig(correlation_id=42)

    def test_validation_error_is_config_error(self):
        """Test the exception hierarchy."""
        assert issubclass(ConfigValidationError, ConfigError)


class TestConfigOverride:
    """Tests for override()."""

    def test_override_creates_new_instance(self):
        """Test override leaves the original untouched."""
        base = ParserConfig()
        changed = base.override(max_depth=64, strict_content=True)

        assert changed.max_depth == 64
        assert changed.strict_content is True
        assert base.max_depth is None

    def test_override_validates(self):
        """Test overridden values are validated."""
        with pytest.raises(ConfigValidationError):
            ParserConfig().override(max_depth=-1)

    def test_override_unknown_field(self):
        """Test unknown field names are rejected with suggestions."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration fields: depth") as exc_info:
            ParserConfig().override(depth=3)

        assert exc_info.value.field_name == "depth"
        assert "max_depth" in exc_info.value.suggestions


class TestConfigSerialization:
    """Tests for dict and JSON conversion."""

    def test_to_dict(self):
        """Test dictionary conversion includes every field."""
        assert ParserConfig(max_depth=5).to_dict() == {
            "strict_content": False,
            "keep_whitespace_text": True,
            "max_depth": 5,
            "warn_on_recovery": True,
            "correlation_id": None,
        }

    def test_json_round_trip(self):
        """Test JSON serialization and deserialization."""
        original = ParserConfig(strict_content=True, max_depth=12, correlation_id="x")
        restored = ParserConfig.from_json(original.to_json())

        assert restored == original
        assert json.loads(original.to_json())["max_depth"] == 12

    def test_from_dict_partial(self):
        """Test missing keys fall back to defaults."""
        config = ParserConfig.from_dict({"keep_whitespace_text": False})
        assert config.keep_whitespace_text is False
        assert config.warn_on_recovery is True

    def test_from_dict_rejects_non_mapping(self):
        """Test non-dict input is rejected."""
        with pytest.raises(ConfigValidationError, match="must be a mapping"):
            ParserConfig.from_dict(["strict_content"])

    def test_from_dict_unknown_keys(self):
        """Test unknown keys are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration fields"):
            ParserConfig.from_dict({"strict": True})

    def test_from_json_invalid(self):
        """Test malformed JSON raises a validation error."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            ParserConfig.from_json("{not json")

    def test_from_json_validates_values(self):
        """Test values loaded from JSON are validated."""
        with pytest.raises(ConfigValidationError, match="max_depth"):
            ParserConfig.from_json('{"max_depth": 0}')


class TestConfigPresets:
    """Tests for preset factory methods."""

    def test_lenient_is_default(self):
        """Test the lenient preset equals the defaults."""
        assert ParserConfig.lenient() == ParserConfig()

    def test_strict_preset(self):
        """Test the strict preset."""
        config = ParserConfig.strict()
        assert config.strict_content is True
        assert config.keep_whitespace_text is False
        assert config.max_depth is None
