"""
Shared fixtures for Pixel Forge tests.
Qt runs on the offscreen platform so controller and worker tests work headless.
"""

import logging
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("QT_LOGGING_RULES", "*.debug=false")

from pixel_forge.core.logging_config import LOGGER_NAME  # noqa: E402
from pixel_forge.core.pixel_forge_models import LayerStore  # noqa: E402
from pixel_forge.core.pixel_forge_session import EditSession  # noqa: E402
from pixel_forge.core.pixel_forge_settings import SettingsManager  # noqa: E402


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: fast engine tests without Qt")
    config.addinivalue_line("markers", "qt: tests that need a Qt application")


@pytest.fixture
def layer_store():
    """Store with a small 8x8 grid"""
    return LayerStore(grid_size=8)


@pytest.fixture
def session():
    """Edit session on an 8x8 grid with a known color"""
    return EditSession(grid_size=8, color="#ff0000")


@pytest.fixture
def settings(tmp_path):
    """Settings persisted under a temporary directory"""
    return SettingsManager(settings_file=tmp_path / "settings.json")


@pytest.fixture(autouse=True)
def restore_logger():
    """Undo setup_logging changes to the package logger after each test"""
    logger = logging.getLogger(LOGGER_NAME)
    handlers = logger.handlers[:]
    level = logger.level
    propagate = logger.propagate
    yield logger
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
