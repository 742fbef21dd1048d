"""Configuration for xmlite parsing.

``ParserConfig`` is an immutable, validated settings object shared by the tag
assembler, the tree builder and the public API. It round-trips through plain
dictionaries and JSON so it can live in application config files.
"""

import json
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Optional


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Settings controlling tag assembly and tree building.

    Thread-safe due to frozen dataclass implementation.

    Attributes:
        strict_content: Disallow mixed text and element content in one element
        keep_whitespace_text: Keep whitespace-only text runs as text nodes
        max_depth: Maximum element nesting depth, or None for unbounded
        warn_on_recovery: Log a warning each time the tag assembler recovers
        correlation_id: Optional correlation ID attached to log records
    """

    strict_content: bool = False
    keep_whitespace_text: bool = True
    max_depth: Optional[int] = None
    warn_on_recovery: bool = True
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        for name in ("strict_content", "keep_whitespace_text", "warn_on_recovery"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigValidationError(f"{name} must be a bool", field_name=name)
        if self.max_depth is not None:
            if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
                raise ConfigValidationError(
                    "max_depth must be an int or None", field_name="max_depth"
                )
            if self.max_depth <= 0:
                raise ConfigValidationError(
                    "max_depth must be > 0 or None",
                    field_name="max_depth",
                    suggestions=["Use None for unbounded nesting"],
                )
        if self.correlation_id is not None and not isinstance(self.correlation_id, str):
            raise ConfigValidationError(
                "correlation_id must be a string or None", field_name="correlation_id"
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> ParserConfig().override(max_depth=64).max_depth
            64
        """
        self._check_field_names(kwargs)
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Raises:
            ConfigValidationError: If ``data`` has unknown keys or invalid values
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a mapping")
        cls._check_field_names(data)
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def _check_field_names(cls, data: Dict[str, Any]) -> None:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )

    # Preset factory methods
    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Default preset: mixed content allowed, whitespace text kept."""
        return cls()

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Preset for element-or-text-only documents."""
        return cls(strict_content=True, keep_whitespace_text=False)
