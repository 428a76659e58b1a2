"""Shared pytest fixtures for all tests."""

import pytest
from fastapi.testclient import TestClient

from cli.config import Config
from gateway import service_locator


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .filegateway directory
    """
    config_dir = tmp_path / '.filegateway'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance with retries disabled.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    config = Config(temp_config_dir / 'config.json')
    config.data['max_retries'] = 0
    return config


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing uploads.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path


@pytest.fixture
def storage_root(tmp_path, monkeypatch):
    """
    Point the gateway at an empty storage root and rebuild its components.

    Returns:
        Path to the storage root
    """
    root = tmp_path / 'public'
    root.mkdir()
    monkeypatch.setattr("gateway.config.STORAGE_ROOT", str(root))
    monkeypatch.setattr("gateway.config.PUBLIC_BASE_URL", "")
    service_locator.reset_components()
    yield root
    service_locator.reset_components()


@pytest.fixture
def api(storage_root):
    """Create FastAPI test client bound to the temporary storage root."""
    from gateway.main import app
    return TestClient(app)
