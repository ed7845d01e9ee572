"""
Pytest configuration for shelldb tests
"""

import asyncio
import sys
from pathlib import Path

import pytest

# Ensure the parent directory is in the Python path for imports
parent_dir = Path(__file__).resolve().parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

import utils.env as env_config  # noqa: E402

# Settings come from the process environment only, never from a developer .env file
env_config.reload_env({})

# Configure asyncio for Windows compatibility
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())

FAKE_SHELL = Path(__file__).resolve().parent / "fake_psql.py"


@pytest.fixture
def fake_shell_command():
    """argv that runs the scripted psql stand-in with the current interpreter."""
    return [sys.executable, "-u", str(FAKE_SHELL)]


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "asyncio: mark test as async")
    config.addinivalue_line("markers", "integration: tests that spawn real child processes")
