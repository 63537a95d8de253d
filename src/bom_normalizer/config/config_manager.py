"""
Configuration management system for the BOM normalizer.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, asdict
import logging

from ..models import ComponentType

logger = logging.getLogger(__name__)

SCOPE_ORDER = ("compile", "provided", "runtime", "system", "test")


@dataclass
class BomConfig:
    """BOM generation configuration."""
    schema_version: str = "1.4"
    output_format: str = "all"
    output_name: str = "bom"
    output_directory: str = "./target"
    include_bom_serial_number: bool = True
    project_type: str = "library"
    include_compile_scope: bool = True
    include_provided_scope: bool = True
    include_runtime_scope: bool = True
    include_system_scope: bool = True
    include_test_scope: bool = False
    exclude_types: list = field(default_factory=list)
    skip: bool = False
    verbose: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_file_size: int = 10  # MB
    backup_count: int = 5
    structured: bool = False


@dataclass
class AppConfig:
    """Complete application configuration."""
    bom: BomConfig = field(default_factory=BomConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


@dataclass(frozen=True)
class ScopeFilter:
    """
    Ordered set of build scopes whose artifacts are included in the BOM.
    """
    compile: bool = True
    provided: bool = True
    runtime: bool = True
    system: bool = True
    test: bool = False

    @classmethod
    def from_config(cls, config: BomConfig) -> 'ScopeFilter':
        return cls(
            compile=config.include_compile_scope,
            provided=config.include_provided_scope,
            runtime=config.include_runtime_scope,
            system=config.include_system_scope,
            test=config.include_test_scope
        )

    @property
    def scopes(self) -> List[str]:
        """Included scope names, always in compile, provided, runtime, system, test order."""
        return [scope for scope in SCOPE_ORDER if getattr(self, scope)]

    def includes(self, scope: Optional[str]) -> bool:
        """
        Check whether artifacts of a scope are included.

        Artifacts without a scope label are treated as compile scoped.
        """
        scope = (scope or "compile").lower()
        if scope not in SCOPE_ORDER:
            return False
        return getattr(self, scope)


class ConfigManager:
    """
    Manages application configuration from multiple sources.

    Configuration is loaded in the following order (later sources override earlier):
    1. Default configuration
    2. Configuration file
    3. Environment variables
    4. Command-line arguments (when provided)
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Optional[AppConfig] = None
        self._env_var_mapping = self._create_env_var_mapping()

    def _create_env_var_mapping(self) -> Dict[str, str]:
        """Create mapping of environment variables to config paths."""
        return {
            # BOM configuration
            "BOM_SCHEMA_VERSION": "bom.schema_version",
            "BOM_OUTPUT_FORMAT": "bom.output_format",
            "BOM_OUTPUT_NAME": "bom.output_name",
            "BOM_OUTPUT_DIR": "bom.output_directory",
            "BOM_INCLUDE_SERIAL_NUMBER": "bom.include_bom_serial_number",
            "BOM_PROJECT_TYPE": "bom.project_type",
            "BOM_INCLUDE_COMPILE_SCOPE": "bom.include_compile_scope",
            "BOM_INCLUDE_PROVIDED_SCOPE": "bom.include_provided_scope",
            "BOM_INCLUDE_RUNTIME_SCOPE": "bom.include_runtime_scope",
            "BOM_INCLUDE_SYSTEM_SCOPE": "bom.include_system_scope",
            "BOM_INCLUDE_TEST_SCOPE": "bom.include_test_scope",
            "BOM_EXCLUDE_TYPES": "bom.exclude_types",
            "BOM_SKIP": "bom.skip",
            "BOM_VERBOSE": "bom.verbose",

            # Logging configuration
            "LOG_LEVEL": "logging.level",
            "LOG_FILE": "logging.file",
            "LOG_FORMAT": "logging.format",
            "LOG_MAX_SIZE": "logging.max_file_size",
            "LOG_BACKUP_COUNT": "logging.backup_count",
        }

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> AppConfig:
        """
        Load configuration from all sources.

        Args:
            overrides: Nested overrides (e.g. from the command line), applied last

        Returns:
            Complete application configuration
        """
        if self._config is not None and not overrides:
            return self._config

        config_dict = self._get_default_config()

        if self.config_file and self.config_file.exists():
            file_config = self._load_config_file(self.config_file)
            config_dict = self._merge_configs(config_dict, file_config)

        env_config = self._load_env_config()
        config_dict = self._merge_configs(config_dict, env_config)

        if overrides:
            config_dict = self._merge_configs(config_dict, overrides)

        config_dict = self._substitute_env_vars(config_dict)

        self._validate_config(config_dict)

        self._config = self._dict_to_config(config_dict)

        return self._config

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values."""
        return {
            "bom": asdict(BomConfig()),
            "logging": asdict(LoggingConfig())
        }

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            Configuration dictionary
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
                logger.info(f"Loaded configuration from {config_path}")
                return config or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config file {config_path}: {e}")
            return {}

    def _load_env_config(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables.

        Returns:
            Configuration dictionary from environment variables
        """
        env_config: Dict[str, Any] = {}

        for env_var, config_path in self._env_var_mapping.items():
            value = os.getenv(env_var)
            if value is not None:
                value = self._convert_env_value(value)
                self._set_nested_value(env_config, config_path, value)

        return env_config

    def _convert_env_value(self, value: str) -> Any:
        """
        Convert environment variable string to appropriate type.

        Args:
            value: String value from environment variable

        Returns:
            Converted value
        """
        if value.lower() in ('true', 'yes', 'on'):
            return True
        elif value.lower() in ('false', 'no', 'off'):
            return False

        # Versions such as "1.2" stay strings
        try:
            return int(value)
        except ValueError:
            pass

        if ',' in value:
            return [item.strip() for item in value.split(',') if item.strip()]

        return value

    def _set_nested_value(self, config: Dict[str, Any], path: str, value: Any) -> None:
        """
        Set a nested configuration value using dot notation.

        Args:
            config: Configuration dictionary
            path: Dot-separated path (e.g., 'bom.schema_version')
            value: Value to set
        """
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _substitute_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Substitute ``${VAR}`` placeholders in configuration values.

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with environment variables substituted
        """
        def substitute_recursive(obj):
            if isinstance(obj, dict):
                return {k: substitute_recursive(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [substitute_recursive(item) for item in obj]
            elif isinstance(obj, str) and obj.startswith('${') and obj.endswith('}'):
                env_var = obj[2:-1]
                return os.getenv(env_var, obj)
            else:
                return obj

        return substitute_recursive(config)

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge two configuration dictionaries.

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate configuration values.

        The output format is checked when the BOM is assembled, not here.

        Args:
            config: Configuration dictionary

        Raises:
            ValueError: If configuration is invalid
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        log_level = str(config.get("logging", {}).get("level", "INFO")).upper()
        if log_level not in valid_levels:
            raise ValueError(f"Invalid log level: {log_level}. Valid levels: {valid_levels}")

        project_type = config.get("bom", {}).get("project_type", "library")
        ComponentType.from_string(str(project_type))

        unknown_keys = set(config.get("bom", {})) - set(BomConfig.__dataclass_fields__)
        if unknown_keys:
            logger.warning(f"Ignoring unknown bom configuration keys: {sorted(unknown_keys)}")

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """
        Convert configuration dictionary to AppConfig object.

        Args:
            config_dict: Configuration dictionary

        Returns:
            AppConfig object
        """
        bom_dict = {
            key: value for key, value in config_dict.get("bom", {}).items()
            if key in BomConfig.__dataclass_fields__
        }
        bom_dict["schema_version"] = str(bom_dict.get("schema_version", "1.4"))
        exclude_types = bom_dict.get("exclude_types") or []
        if isinstance(exclude_types, str):
            exclude_types = [item.strip() for item in exclude_types.split(',') if item.strip()]
        bom_dict["exclude_types"] = list(exclude_types)

        logging_dict = dict(config_dict.get("logging", {}))
        logging_dict["level"] = str(logging_dict.get("level", "INFO")).upper()

        return AppConfig(
            bom=BomConfig(**bom_dict),
            logging=LoggingConfig(**logging_dict)
        )

    def get_config(self) -> AppConfig:
        """
        Get the current configuration.

        Returns:
            Application configuration
        """
        if self._config is None:
            return self.load_config()
        return self._config


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_file: Optional[Union[str, Path]] = None) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        config_file: Path to configuration file (only used on first call)

    Returns:
        ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_file)
    return _config_manager


def reset_config_manager() -> None:
    """Drop the global configuration manager so the next call rebuilds it."""
    global _config_manager
    _config_manager = None


def get_config() -> AppConfig:
    """
    Get the current application configuration.

    Returns:
        Application configuration
    """
    return get_config_manager().get_config()
