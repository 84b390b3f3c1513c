"""Configuration classes for markup tree building and rendering.

This module provides configuration objects for the tree, renderer and global
settings, with validation, presets and JSON round-tripping.
"""

import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

REATTACH_POLICIES = ("move", "reject")
LOGGING_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_COMPONENTS = ("tree", "render", "global_")


@dataclass
class TreeConfig:
    """Configuration for tree structure rules."""

    # What attach() does with a node that already has a parent
    reattach_policy: str = "move"
    enable_cycle_check: bool = True
    # Nesting limit for tree descriptions read by build_tree
    max_depth: int = 512

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if self.reattach_policy not in REATTACH_POLICIES:
            raise ValueError(
                f"reattach_policy must be one of {list(REATTACH_POLICIES)}"
            )
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")


@dataclass
class RenderConfig:
    """Configuration for markup rendering."""

    separator: str = ""
    trailing_newline: bool = False

    def __post_init__(self) -> None:
        """Validate render configuration."""
        if not isinstance(self.separator, str):
            raise ValueError("separator must be a string")


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components.

    ``logging_level`` is applied to the ``markup_builder`` logger by the
    command-line tool; library calls leave logger levels to the application.
    """

    logging_level: str = "INFO"
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {list(LOGGING_LEVELS)}")


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
class BuilderConfig:
    """Complete configuration for building and rendering markup trees.

    Immutable; use :meth:`override` to derive a modified copy.
    """

    tree: TreeConfig = field(default_factory=TreeConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.tree.__post_init__()
            self.render.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "BuilderConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override, using ``component__field`` notation
                for component settings

        Returns:
            New BuilderConfig instance with overrides applied

        Example:
            >>> config = BuilderConfig()
            >>> config.override(render__separator="\\n").render.separator
            '\\n'
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, _, field_name = key.rpartition("__")
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"Use one of {list(_COMPONENTS)}"],
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for component in _COMPONENTS:
            current_config = getattr(self, component)
            if component in nested_overrides:
                try:
                    new_fields[component] = replace(
                        current_config, **nested_overrides[component]
                    )
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=component) from e
            else:
                new_fields[component] = current_config

        for key, value in nested_overrides.items():
            if key not in _COMPONENTS:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for component in _COMPONENTS:
            config = getattr(self, component)
            result[component] = {
                f.name: getattr(config, f.name) for f in fields(config)
            }
        result["name"] = self.name
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuilderConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so typos in config files surface early.
        """
        component_types = {
            "tree": TreeConfig,
            "render": RenderConfig,
            "global_": GlobalConfig,
        }
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in component_types:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"Section '{key}' must be an object", field_name=key
                    )
                try:
                    values[key] = component_types[key](**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key == "name":
                values[key] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}",
                    field_name=key,
                    suggestions=[f"Use one of {list(component_types) + ['name']}"],
                )
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "BuilderConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def pretty(cls) -> "BuilderConfig":
        """Preset rendering one fragment per line."""
        return cls(
            render=RenderConfig(separator="\n", trailing_newline=True),
            name="pretty",
        )

    @classmethod
    def compact(cls) -> "BuilderConfig":
        """Preset rendering everything on a single line."""
        return cls(render=RenderConfig(separator=""), name="compact")

    @classmethod
    def strict(cls) -> "BuilderConfig":
        """Preset rejecting attach() of nodes that already have a parent."""
        return cls(
            tree=TreeConfig(reattach_policy="reject"),
            name="strict",
        )
