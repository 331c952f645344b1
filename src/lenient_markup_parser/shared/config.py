"""Configuration classes for lenient markup parsing.

Configuration only controls the ambient behaviour of the parser (logging and
metric collection). Tokenization and tree building semantics are fixed and
never depend on any setting defined here.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional


@dataclass
class TokenizationConfig:
    """Configuration for the tokenizer layer."""

    # Emit the full token stream at DEBUG level after every tokenization
    log_token_stream: bool = False
    # Max characters of input echoed in log previews
    preview_length: int = 100

    def __post_init__(self) -> None:
        """Validate tokenization configuration."""
        if self.preview_length < 0:
            raise ValueError("preview_length must be >= 0")


@dataclass
class TreeConfig:
    """Configuration for the tree building layer."""

    log_dropped_nodes: bool = True

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if not isinstance(self.log_dropped_nodes, bool):
            raise ValueError("log_dropped_nodes must be a bool")


@dataclass
class ApiConfig:
    """Configuration for API layer behavior."""

    collect_metrics: bool = True

    def __post_init__(self) -> None:
        """Validate API configuration."""
        if not isinstance(self.collect_metrics, bool):
            raise ValueError("collect_metrics must be a bool")


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    correlation_id: Optional[str] = None
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.correlation_id is not None and not self.correlation_id:
            raise ValueError("correlation_id must be a non-empty string or None")

    @property
    def effective_correlation_id(self) -> Optional[str]:
        """Correlation ID to propagate, or None when tracking is disabled."""
        if not self.enable_correlation_tracking:
            return None
        return self.correlation_id


_COMPONENT_TYPES: Dict[str, type] = {
    "tokenization": TokenizationConfig,
    "tree": TreeConfig,
    "api": ApiConfig,
    "global_": GlobalConfig,
}


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
    """Complete configuration for all parser components.

    Immutable, so a single instance can be shared between parsers and threads.
    """

    tokenization: TokenizationConfig = field(default_factory=TokenizationConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    version: str = "1.0.0"
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        for field_name, expected in _COMPONENT_TYPES.items():
            component = getattr(self, field_name)
            if not isinstance(component, expected):
                raise ConfigValidationError(
                    f"{field_name} must be a {expected.__name__}",
                    field_name=field_name,
                    suggestions=[f"Pass a {expected.__name__} instance"],
                )
            try:
                component.__post_init__()
            except ValueError as e:
                raise ConfigValidationError(str(e), field_name=field_name) from e

    @property
    def correlation_id(self) -> Optional[str]:
        """Correlation ID propagated to loggers and results."""
        return self.global_.effective_correlation_id

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Top-level fields, or ``component__field`` keys for
                fields of a component configuration

        Returns:
            New ParserConfig instance with overrides applied

        Example:
            >>> config = ParserConfig()
            >>> new_config = config.override(
            ...     tokenization__log_token_stream=True,
            ...     global___correlation_id="req-42",
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                # "global___x" splits into "global" and "_x"
                if component == "global" and field_name.startswith("_"):
                    component, field_name = "global_", field_name[1:]
                if component not in _COMPONENT_TYPES:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=sorted(_COMPONENT_TYPES),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENT_TYPES and isinstance(value, dict):
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected.
        """
        field_values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in cls.__dataclass_fields__:
                raise ConfigValidationError(
                    f"Unknown configuration field: {key}",
                    field_name=key,
                )
            if key in _COMPONENT_TYPES and isinstance(value, dict):
                component_class = _COMPONENT_TYPES[key]
                try:
                    field_values[key] = component_class(**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                field_values[key] = value
        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ParserConfig":
        """Create the default configuration."""
        return cls(name="default")

    @classmethod
    def debugging(cls) -> "ParserConfig":
        """Create configuration that also logs the full token stream."""
        return cls(
            tokenization=TokenizationConfig(log_token_stream=True),
            name="debugging",
        )
