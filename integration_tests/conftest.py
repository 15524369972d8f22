"""Pytest configuration for the end-to-end training loop tests."""

import pytest


def pytest_collection_modifyitems(items):
    """Mark everything collected from this directory as integration."""
    for item in items:
        if "integration_tests" in item.path.parts:
            item.add_marker(pytest.mark.integration)
