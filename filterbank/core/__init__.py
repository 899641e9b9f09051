"""
Core infrastructure: configuration loading and logging setup.
"""

from .config_manager import (
    ConfigurationManager, ConfigurationError, FilterBankConfiguration,
    configure_logging, get_config_manager, get_config, reload_config
)

__all__ = [
    'ConfigurationManager',
    'ConfigurationError',
    'FilterBankConfiguration',
    'configure_logging',
    'get_config_manager',
    'get_config',
    'reload_config'
]
