"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, fields, asdict


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    output_dir: Optional[str] = None
    package_name: Optional[str] = None  # overrides the descriptor's namespace

    # Code style settings
    indent_size: int = 4
    add_comments: bool = True

    # Generated header and server shape
    disable_version: bool = False
    enable_metrics: bool = True

    # Qualified names the templates refer to, keyed by symbol
    symbols: Dict[str, str] = field(default_factory=dict)

    # Language-specific settings understood by one generator
    language_config: Dict[str, Any] = field(default_factory=dict)

    # Unknown keys from config files end up here
    custom: Dict[str, Any] = field(default_factory=dict)


_CONFIG_FIELDS = {f.name for f in fields(GeneratorConfig)}


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["java"] = {
            "indent_size": 2,
            "add_comments": True,
            "enable_metrics": True,
            "language_config": {
                "class_prefix": "Blocking",
            },
        }

        self._configs["python"] = {
            "indent_size": 4,
            "add_comments": True,
            "enable_metrics": True,
            "language_config": {
                "messages_module_suffix": "_pb2",
            },
        }

    def get_config(self, language: Optional[str] = None,
                   custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name (None for bare defaults)
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        base_config = self._deep_copy(self._configs.get((language or "").lower(), {}))

        if config_file:
            self._merge(base_config, self._load_config_file(config_file))

        if custom_config:
            self._merge(base_config, custom_config)

        return self._dict_to_config(base_config)

    @staticmethod
    def _deep_copy(config: Dict[str, Any]) -> Dict[str, Any]:
        return {k: dict(v) if isinstance(v, dict) else v for k, v in config.items()}

    @staticmethod
    def _merge(base: Dict[str, Any], overrides: Dict[str, Any]):
        """Merge overrides into base; dict-valued settings merge key by key."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                base[key].update(value)
            else:
                base[key] = value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in _CONFIG_FIELDS:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get('custom', {}))
            existing_custom.update(custom_args)
            config_args['custom'] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)
        config_dict = asdict(config)
        custom = config_dict.pop("custom", {})
        config_dict.update(custom)

        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def list_languages(self) -> list[str]:
        """Get list of languages with default settings."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig, language: str) -> list[str]:
        """
        Validate configuration for a language.

        Returns:
            List of validation warnings
        """
        warnings = []

        if config.indent_size < 1:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if config.package_name is not None and not all(
            part.isidentifier() for part in config.package_name.split(".")
        ):
            warnings.append(f"Invalid package name: {config.package_name}")

        for key, value in config.symbols.items():
            if not isinstance(value, str) or not value:
                warnings.append(f"Symbol '{key}' must map to a non-empty string")

        if language == "python":
            suffix = config.language_config.get("messages_module_suffix", "_pb2")
            if not isinstance(suffix, str):
                warnings.append(f"Invalid messages_module_suffix: {suffix}")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(language: Optional[str] = None,
                custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)


# Example configuration files for reference
EXAMPLE_JAVA_CONFIG = {
    "package_name": "io.example.rpc",
    "enable_metrics": True,
    "disable_version": False,
    "symbols": {"Generated": "javax.annotation.processing.Generated"},
}

EXAMPLE_PYTHON_CONFIG = {
    "enable_metrics": False,
    "language_config": {"messages_module_suffix": "_pb2"},
}
