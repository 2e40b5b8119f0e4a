"""Pytest configuration and shared fixtures."""

import pytest


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as database-backed tests (deselect with '-m \"not integration\"')"
    )
