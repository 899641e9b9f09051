"""
Pytest fixtures for filterbank tests.
"""
import os
import pytest

from filterbank.core import config_manager


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Give every test a fresh global configuration without FILTERBANK_* overrides."""
    for env_var in list(os.environ):
        if env_var.startswith('FILTERBANK_'):
            monkeypatch.delenv(env_var)
    manager = config_manager.ConfigurationManager(base_path=tmp_path)
    monkeypatch.setattr(config_manager, '_global_config_manager', manager)
    return manager


@pytest.fixture
def sample_input():
    """Short test buffer used throughout the original filter tests."""
    return [1.0, 2.0, 1.0, 4.0]


@pytest.fixture
def alternating_signal():
    """Alternating 1/2 signal for multirate tests."""
    return [1.0, 2.0] * 7
