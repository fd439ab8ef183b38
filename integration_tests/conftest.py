"""Fixtures and markers for the backup/restore integration suite."""

import pytest


def pytest_collection_modifyitems(items):
    """Tag everything collected from this directory with the integration marker."""
    for item in items:
        if item.path.parent.name == "integration_tests":
            item.add_marker(pytest.mark.integration)
