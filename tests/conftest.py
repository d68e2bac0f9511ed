"""
Pytest configuration for keycloakadmin tests.
"""

import pytest


def pytest_addoption(parser):
    """Add command line options to enable integration tests."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against a live Keycloak server",
    )
    parser.addoption(
        "--keycloak-url",
        action="store",
        default="http://127.0.0.1:8080/auth",
        help="Base URL of the Keycloak server used by integration tests",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: needs a live Keycloak server")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is passed."""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
