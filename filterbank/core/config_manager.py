"""
Configuration Management for the filter bank
"""

import os
import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any, Optional

import yaml
from pydantic import BaseModel, ValidationError, field_validator, model_validator

logger = logging.getLogger('filterbank.core.config_manager')

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing"""
    pass

class FilterBankConfiguration(BaseModel):
    """Filter bank configuration model with Pydantic validation"""

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = DEFAULT_LOG_FORMAT
    log_file_path: Optional[str] = None
    log_max_bytes: int = 32 * 1024 * 1024  # 32MB
    log_backup_count: int = 5

    # Filter Bank Configuration (piano range)
    default_min_pitch: int = 21
    default_max_pitch: int = 108

    # Log IIR filters whose input and output coefficient counts differ
    warn_on_coefficient_mismatch: bool = True

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f'log_level must be one of {VALID_LOG_LEVELS}')
        return v.upper()

    @field_validator('default_min_pitch', 'default_max_pitch')
    @classmethod
    def validate_pitch(cls, v):
        if not 0 <= v <= 127:
            raise ValueError('MIDI pitch must be between 0 and 127')
        return v

    @model_validator(mode='after')
    def validate_pitch_range(self):
        if self.default_max_pitch < self.default_min_pitch:
            raise ValueError('default_max_pitch must not be less than default_min_pitch')
        return self

class ConfigurationManager:
    """
    Centralized configuration management.

    Loads model defaults, then ``config/default.yaml`` below the base path,
    then ``FILTERBANK_*`` environment variables, later sources winning.
    """

    ENV_MAPPINGS = {
        'FILTERBANK_LOG_LEVEL': 'log_level',
        'FILTERBANK_LOG_FILE_PATH': 'log_file_path',
        'FILTERBANK_DEFAULT_MIN_PITCH': 'default_min_pitch',
        'FILTERBANK_DEFAULT_MAX_PITCH': 'default_max_pitch',
        'FILTERBANK_WARN_ON_COEFFICIENT_MISMATCH': 'warn_on_coefficient_mismatch',
    }
    INT_KEYS = ('default_min_pitch', 'default_max_pitch')
    BOOL_KEYS = ('warn_on_coefficient_mismatch',)

    def __init__(self, base_path: Optional[Path] = None):
        self.base_path = Path(base_path) if base_path is not None else Path.cwd()
        self.config_dir = self.base_path / "config"
        self._configuration: Optional[FilterBankConfiguration] = None

        logger.debug(f"ConfigurationManager initialized for {self.config_dir}")

    def load_configuration(self) -> FilterBankConfiguration:
        """
        Load and validate configuration from all sources.

        Returns:
            Validated configuration object

        Raises:
            ConfigurationError: If configuration is invalid
        """
        try:
            config_data = self._load_base_configuration()
            config_data = self._apply_environment_variables(config_data)

            self._configuration = FilterBankConfiguration(**config_data)

            logger.debug("Configuration loaded successfully")
            return self._configuration

        except ConfigurationError:
            raise
        except (ValidationError, TypeError) as e:
            logger.error(f"Failed to load configuration: {e}")
            raise ConfigurationError(f"Configuration loading failed: {e}") from e

    def get_configuration(self) -> FilterBankConfiguration:
        """Get current configuration, loading if necessary"""
        if self._configuration is None:
            return self.load_configuration()
        return self._configuration

    def reload_configuration(self) -> FilterBankConfiguration:
        """Reload configuration from sources"""
        self._configuration = None
        return self.load_configuration()

    def get_config_value(self, key: str, default: Any = None) -> Any:
        """
        Get a specific configuration value.

        Args:
            key: Configuration field name
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return getattr(self.get_configuration(), key, default)

    def validate_configuration(self, config_data: Dict[str, Any]) -> bool:
        """
        Validate configuration data without loading.

        Args:
            config_data: Configuration dictionary to validate

        Returns:
            True if valid, False otherwise
        """
        try:
            FilterBankConfiguration(**config_data)
            return True
        except (ValidationError, TypeError):
            return False

    def _load_base_configuration(self) -> Dict[str, Any]:
        """Load base configuration from default.yaml if present"""
        config_data: Dict[str, Any] = {}

        default_config_path = self.config_dir / "default.yaml"
        if default_config_path.exists():
            config_data.update(self._load_yaml_file(default_config_path))
            logger.debug(f"Loaded base configuration from {default_config_path}")

        return config_data

    def _apply_environment_variables(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides"""
        for env_var, config_key in self.ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue

            if config_key in self.INT_KEYS:
                try:
                    config_data[config_key] = int(env_value)
                except ValueError:
                    logger.warning(f"Invalid integer value for {env_var}: {env_value}")
                    continue
            elif config_key in self.BOOL_KEYS:
                config_data[config_key] = env_value.lower() in ('true', '1', 'yes', 'on')
            else:
                config_data[config_key] = env_value

            logger.debug(f"Applied environment variable {env_var} -> {config_key}")

        return config_data

    def _load_yaml_file(self, path: Path) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load YAML file {path}: {e}")
            raise ConfigurationError(f"Failed to load YAML file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"YAML file {path} must contain a mapping")
        return data


def configure_logging(config: Optional[FilterBankConfiguration] = None) -> logging.Logger:
    """
    Install console and optional rotating file handlers on the package logger.

    Args:
        config: Configuration to use, the global configuration if omitted

    Returns:
        The configured ``filterbank`` logger
    """
    config = config or get_config()

    package_logger = logging.getLogger('filterbank')
    package_logger.setLevel(config.log_level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if config.log_file_path:
        file_handler = logging.handlers.RotatingFileHandler(
            filename=config.log_file_path,
            encoding='utf-8',
            maxBytes=config.log_max_bytes,
            backupCount=config.log_backup_count
        )
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    logger.debug("Logging configured")
    return package_logger


# Global configuration manager instance
_global_config_manager: Optional[ConfigurationManager] = None

def get_config_manager() -> ConfigurationManager:
    """Get the global configuration manager instance"""
    global _global_config_manager
    if _global_config_manager is None:
        _global_config_manager = ConfigurationManager()
    return _global_config_manager

def get_config() -> FilterBankConfiguration:
    """Get the current filter bank configuration"""
    return get_config_manager().get_configuration()

def reload_config() -> FilterBankConfiguration:
    """Reload the filter bank configuration from sources"""
    return get_config_manager().reload_configuration()
