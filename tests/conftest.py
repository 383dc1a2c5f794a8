"""Root pytest configuration for test discovery and auto-skip behavior.

All tests stay visible to the test explorer; integration tests are
auto-skipped unless explicitly enabled via environment variables or
pytest options.

Test Structure:
    tests/
    ├── examiner_auth/         # Policy, hashing, JWT, code generator
    │   └── unit/
    ├── examiner_config/       # Settings loading
    ├── examiner_identity/     # Account domain and lifecycle service
    │   ├── unit/              # Fast, isolated tests (mocks, fakes, SQLite)
    │   └── integration/       # Tests with Testcontainers PostgreSQL
    └── shared/                # Shared fixtures and fakes

Environment Variables:
    RUN_INTEGRATION=1    Run @pytest.mark.integration tests
    RUN_ALL_TESTS=1      Run all tests (overrides other settings)

Pytest Options:
    --run-integration    Run integration tests
    --run-all            Run all tests
"""

import os

import pytest

from examiner_config import clear_settings_cache


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.integration",
    )
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Run all tests regardless of markers",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip integration tests unless explicitly enabled."""
    if config.getoption("--run-all") or _env_flag("RUN_ALL_TESTS"):
        return

    if config.getoption("--run-integration") or _env_flag("RUN_INTEGRATION"):
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test - run with --run-integration or RUN_INTEGRATION=1",
    )
    for item in items:
        # Explicit marker only, not folder name
        item_markers = {mark.name for mark in item.iter_markers()}
        if "integration" in item_markers:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Never let one test's settings leak into the next."""
    clear_settings_cache()
    yield
    clear_settings_cache()
