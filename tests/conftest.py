"""Pytest configuration and shared fixtures."""

import logging

import pytest  # type: ignore[import-not-found]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest."""
    config.addinivalue_line("markers", "integration: Integration tests")


@pytest.fixture(autouse=True)
def reset_package_logging():
    """Drop handlers installed by CLI runs so they do not outlive the test."""
    yield
    package_logger = logging.getLogger("hiworks_commute")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
