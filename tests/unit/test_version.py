"""Test basic package functionality."""

import waypoint_templates


def test_version():
    """Test that package version is defined."""
    assert waypoint_templates.__version__ == "0.1.0"
