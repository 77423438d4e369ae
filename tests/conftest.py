"""Pytest configuration and fixtures for test suite."""

import os
import sys
from pathlib import Path

import pytest

# Use the bundled parameter files regardless of the developer's environment
os.environ.pop("TAX_ENGINE_TAX_PARAMETERS_DIR", None)

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture(scope="session")
def year_2025():
    """Year module for 2025."""
    from calculator.year_modules import get_year_module
    return get_year_module(2025)


@pytest.fixture(scope="session")
def config_2025(year_2025):
    """Federal constants for 2025."""
    return year_2025.config


@pytest.fixture(scope="session")
def config_2026():
    from calculator.year_modules import get_year_module
    return get_year_module(2026).config


@pytest.fixture(scope="session")
def state_engine_2025(year_2025):
    """State tax engine wired with the 2025 state modules."""
    return year_2025.state_engine()


@pytest.fixture
def parameters_dir():
    """Directory holding the bundled tax_year_{year}.yaml files."""
    from config.tax_config_loader import CONFIG_DIR
    return CONFIG_DIR
