import os

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests against a live database (TEST_DATABASE_URL).",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: tests that need a live database at TEST_DATABASE_URL"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-integration") and os.getenv("TEST_DATABASE_URL"):
        return

    skip_integration = pytest.mark.skip(
        reason="integration test (set TEST_DATABASE_URL and use --run-integration)"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
