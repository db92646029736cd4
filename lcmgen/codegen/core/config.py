"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
import re
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, asdict


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


_DOTTED_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    output_dir: str = "."
    package_prefix: str = ""

    # Code style settings
    indent_size: int = 4
    use_tabs: bool = False

    # Naming settings
    strip_type_suffix: bool = True

    # Regeneration settings
    lazy: bool = False

    # Additional metadata
    add_comments: bool = True

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    @property
    def indent(self) -> str:
        return "\t" if self.use_tabs else " " * self.indent_size


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["python"] = {
            "indent_size": 4,
            "use_tabs": False,
            "add_comments": True,
            "custom": {
                "runtime_module": "lcmgen.runtime",
            },
        }

        self._configs["rust"] = {
            "indent_size": 4,
            "use_tabs": False,
            "add_comments": True,
            "custom": {
                "crate_root": "crate",
            },
        }

        # gofmt style
        self._configs["go"] = {
            "use_tabs": True,
            "add_comments": True,
            "custom": {
                "module_path": "lcmtypes",
                "default_package": "lcmtypes",
            },
        }

    def get_config(
        self,
        language: str,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        # Start with defaults
        defaults = self._configs.get(language, {})
        base_config = dict(defaults)
        base_config["custom"] = dict(defaults.get("custom", {}))

        # Load from file if provided
        if config_file:
            self._merge(base_config, self._load_config_file(config_file))

        # Apply custom overrides
        if custom_config:
            self._merge(base_config, custom_config)

        return self._dict_to_config(base_config)

    @staticmethod
    def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        for key, value in overrides.items():
            if key == "custom" and isinstance(value, dict):
                base["custom"].update(value)
            else:
                base[key] = value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
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
        # Extract known fields
        known_fields = set(GeneratorConfig.__dataclass_fields__)

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Unknown keys are language options
        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)
        config_dict = asdict(config)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def list_languages(self) -> list[str]:
        """Get list of languages with default configurations."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig, language: str) -> list[str]:
        """
        Validate configuration for a language.

        Returns:
            List of validation warnings/errors
        """
        warnings = []

        if config.indent_size < 1:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if config.package_prefix and not _DOTTED_NAME.match(config.package_prefix):
            warnings.append(f"Invalid package_prefix: {config.package_prefix}")

        # Language-specific validations
        if language == "rust":
            crate_root = config.custom.get("crate_root", "crate")
            if not all(part.isidentifier() for part in crate_root.split("::")):
                warnings.append(f"Invalid Rust crate_root: {crate_root}")

        elif language == "go":
            if not config.custom.get("module_path"):
                warnings.append("Go module_path is empty")
            default_package = config.custom.get("default_package", "")
            if not default_package.isidentifier():
                warnings.append(f"Invalid Go default_package: {default_package}")

        elif language == "python":
            runtime_module = config.custom.get("runtime_module", "")
            if not _DOTTED_NAME.match(runtime_module):
                warnings.append(f"Invalid Python runtime_module: {runtime_module}")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
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
