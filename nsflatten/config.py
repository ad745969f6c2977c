"""
Configuration system for nsflatten

Provides configuration management with support for files and environment variables.
Includes validation, default value handling, and configuration merging.
"""

import os
import json
import yaml
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any
import logging

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value.lower() == "true"


def _env_list(name: str) -> Optional[List[str]]:
    value = os.getenv(name)
    if not value:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


class ConfigurationManager:
    """Manages configuration loading, validation, and merging."""

    DEFAULT_CONFIG_PATHS = [
        "nsflatten.json",
        "nsflatten.yaml",
        "nsflatten.yml",
        ".nsflatten.json",
        ".nsflatten.yaml",
        ".nsflatten.yml",
        os.path.expanduser("~/.nsflatten.json"),
        os.path.expanduser("~/.nsflatten.yaml"),
    ]

    @staticmethod
    def find_config_file(search_paths: Optional[List[str]] = None) -> Optional[str]:
        """Find the first existing configuration file."""
        paths = search_paths or ConfigurationManager.DEFAULT_CONFIG_PATHS

        for path in paths:
            if os.path.exists(path):
                return path
        return None

    @staticmethod
    def load_config_file(config_path: str) -> Dict[str, Any]:
        """Load configuration from file (JSON or YAML)."""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if config_path.endswith((".yaml", ".yml")):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid configuration file format: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")
        return data

    @staticmethod
    def load_env_config() -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}

        namespaces = {}
        roots = _env_list("NSFLATTEN_NAMESPACE_ROOTS")
        if roots:
            namespaces["namespace_roots"] = roots

        insert_export = _env_flag("NSFLATTEN_INSERT_EXPORT")
        if insert_export is not None:
            namespaces["insert_export"] = insert_export

        flatten_class = _env_flag("NSFLATTEN_FLATTEN_CLASS")
        if flatten_class is not None:
            namespaces["flatten_class"] = flatten_class

        reserved = _env_list("NSFLATTEN_RESERVED_GLOBALS")
        if reserved:
            namespaces["reserved_globals"] = reserved

        if namespaces:
            config["namespaces"] = namespaces

        files = {}
        if os.getenv("NSFLATTEN_MAX_FILE_SIZE"):
            try:
                files["max_file_size"] = int(os.getenv("NSFLATTEN_MAX_FILE_SIZE"))
            except ValueError:
                logger.warning("Invalid NSFLATTEN_MAX_FILE_SIZE value, using default")

        if os.getenv("NSFLATTEN_ENCODING"):
            files["encoding"] = os.getenv("NSFLATTEN_ENCODING")

        excluded = _env_list("NSFLATTEN_EXCLUDE_PATTERNS")
        if excluded:
            files["exclude_patterns"] = excluded

        if files:
            config["files"] = files

        output = {}
        backup_enabled = _env_flag("NSFLATTEN_BACKUP_ENABLED")
        if backup_enabled is not None:
            output["backup_enabled"] = backup_enabled

        dry_run = _env_flag("NSFLATTEN_DRY_RUN")
        if dry_run is not None:
            output["dry_run"] = dry_run

        if os.getenv("NSFLATTEN_OUTPUT_DIRECTORY"):
            output["output_directory"] = os.getenv("NSFLATTEN_OUTPUT_DIRECTORY")

        if output:
            config["output"] = output

        return config

    @staticmethod
    def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
        """Merge multiple configuration dictionaries, with later ones taking precedence."""
        result = {}

        for config in configs:
            if not config:
                continue

            for key, value in config.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = ConfigurationManager.merge_configs(result[key], value)
                else:
                    result[key] = value

        return result

    @staticmethod
    def validate_config(config_data: Dict[str, Any]) -> None:
        """Validate configuration data."""
        if "namespaces" in config_data:
            namespaces = config_data["namespaces"]

            roots = namespaces.get("namespace_roots", [])
            if not isinstance(roots, list) or not all(isinstance(r, str) and r for r in roots):
                raise ConfigurationError("namespace_roots must be a list of non-empty names")
            for root in roots:
                if "." in root:
                    raise ConfigurationError(f"namespace root '{root}' must be a single label")

            reserved = namespaces.get("reserved_globals", [])
            if not isinstance(reserved, list):
                raise ConfigurationError("reserved_globals must be a list of names")

            global_requires = namespaces.get("global_requires", {})
            if not isinstance(global_requires, dict):
                raise ConfigurationError("global_requires must map identifiers to module ids")

        if "files" in config_data:
            files = config_data["files"]

            if "max_file_size" in files and files["max_file_size"] <= 0:
                raise ConfigurationError("max_file_size must be positive")

            for key in ("include_patterns", "exclude_patterns"):
                if key in files and not isinstance(files[key], list):
                    raise ConfigurationError(f"{key} must be a list of glob patterns")


@dataclass
class NamespaceSettings:
    """Settings for the namespace transforms."""

    namespace_roots: List[str] = field(default_factory=list)
    insert_export: bool = True
    flatten_class: bool = True
    reserved_globals: List[str] = field(default_factory=lambda: ["Number", "Error"])
    global_requires: Dict[str, str] = field(default_factory=dict)


@dataclass
class FileSettings:
    """Which files are converted and how they are read."""

    include_patterns: List[str] = field(default_factory=lambda: ["**/*.js"])
    exclude_patterns: List[str] = field(
        default_factory=lambda: [
            "**/node_modules/**",
            "**/.*/**",
            "**/*.min.js",
        ]
    )
    max_file_size: int = 1024 * 1024  # 1MB
    encoding: str = "utf-8"


@dataclass
class OutputSettings:
    """Where and how converted files are written."""

    backup_enabled: bool = False
    dry_run: bool = False
    output_directory: Optional[str] = None


@dataclass
class NsFlattenConfig:
    """Main configuration class for nsflatten."""

    namespace_settings: NamespaceSettings = field(default_factory=NamespaceSettings)
    file_settings: FileSettings = field(default_factory=FileSettings)
    output_settings: OutputSettings = field(default_factory=OutputSettings)

    @classmethod
    def default(cls) -> "NsFlattenConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        use_env: bool = True,
        validate: bool = True,
    ) -> "NsFlattenConfig":
        """
        Load configuration from multiple sources with precedence:
        1. Default values
        2. Configuration file
        3. Environment variables (if use_env=True)

        Args:
            config_path: Path to configuration file. If None, searches for default files.
            use_env: Whether to load environment variables
            validate: Whether to validate the configuration
        """
        configs_to_merge = []

        file_config = {}
        if config_path:
            file_config = ConfigurationManager.load_config_file(config_path)
        else:
            found_config = ConfigurationManager.find_config_file()
            if found_config:
                file_config = ConfigurationManager.load_config_file(found_config)
                logger.info(f"Loaded configuration from: {found_config}")

        configs_to_merge.append(file_config)

        if use_env:
            configs_to_merge.append(ConfigurationManager.load_env_config())

        merged_config = ConfigurationManager.merge_configs(*configs_to_merge)

        if validate:
            ConfigurationManager.validate_config(merged_config)

        return cls.from_dict(merged_config)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NsFlattenConfig":
        """Build a configuration from a dictionary shaped like `to_dict`."""
        sections = (
            ("namespaces", NamespaceSettings()),
            ("files", FileSettings()),
            ("output", OutputSettings()),
        )
        for key, settings in sections:
            for name, value in (data.get(key) or {}).items():
                if hasattr(settings, name):
                    setattr(settings, name, value)
                else:
                    logger.warning(f"Ignoring unknown configuration key: {key}.{name}")

        return cls(
            namespace_settings=sections[0][1],
            file_settings=sections[1][1],
            output_settings=sections[2][1],
        )

    @classmethod
    def from_file(cls, config_path: str) -> "NsFlattenConfig":
        """Load configuration from a JSON or YAML file."""
        return cls.load(config_path=config_path, use_env=False)

    @classmethod
    def from_env(cls) -> "NsFlattenConfig":
        """Load configuration from environment variables."""
        return cls.load(config_path=None, use_env=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "namespaces": asdict(self.namespace_settings),
            "files": asdict(self.file_settings),
            "output": asdict(self.output_settings),
        }

    def to_file(self, config_path: str, format: str = "json") -> None:
        """
        Save configuration to file.

        Args:
            config_path: Path to save configuration
            format: File format ('json' or 'yaml')
        """
        config_data = self.to_dict()

        try:
            with open(config_path, "w", encoding="utf-8") as f:
                if format.lower() == "yaml":
                    yaml.dump(config_data, f, default_flow_style=False, indent=2)
                else:
                    json.dump(config_data, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration file: {e}")

    def validate(self) -> None:
        """Validate the current configuration."""
        ConfigurationManager.validate_config(self.to_dict())

    def get_config_summary(self) -> str:
        """Get a human-readable summary of the configuration."""
        ns = self.namespace_settings
        return f"""nsflatten Configuration Summary:
Namespaces:
  - Namespace roots: {", ".join(ns.namespace_roots) or "(none)"}
  - Insert export: {ns.insert_export}
  - Flatten class: {ns.flatten_class}
  - Reserved globals: {", ".join(ns.reserved_globals)}
  - Global requires: {len(ns.global_requires)} identifiers

Files:
  - Include patterns: {self.file_settings.include_patterns}
  - Excluded patterns: {len(self.file_settings.exclude_patterns)} patterns
  - Max file size: {self.file_settings.max_file_size} bytes

Output:
  - Backup enabled: {self.output_settings.backup_enabled}
  - Dry run: {self.output_settings.dry_run}
  - Output directory: {self.output_settings.output_directory or "(in place)"}
"""


def load_config(config_path: Optional[str] = None, use_env: bool = True) -> NsFlattenConfig:
    """
    Load configuration from file and/or environment variables.

    Args:
        config_path: Path to configuration file
        use_env: Whether to load environment variables

    Returns:
        NsFlattenConfig: Loaded configuration
    """
    return NsFlattenConfig.load(config_path=config_path, use_env=use_env)
