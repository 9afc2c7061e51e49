"""Pytest configuration and fixtures for storypoint tests."""
import pytest

from storypoint.estimator import EstimatorConfig, default_config


@pytest.fixture
def config() -> EstimatorConfig:
    """Fresh default configuration."""
    return default_config()
