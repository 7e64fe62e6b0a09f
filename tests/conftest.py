"""
Shared fixtures for the traffic-cams test suite.
"""

import os
import sys
from unittest.mock import Mock

import pytest

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(project_root)

from tomtom.config import TomTomConfig


@pytest.fixture
def config() -> TomTomConfig:
    return TomTomConfig(api_key="test_key", base_url="https://api.example.test")


@pytest.fixture
def session() -> Mock:
    """requests.Session double; set session.get.return_value per test."""
    return Mock()
