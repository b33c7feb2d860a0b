"""Unit tests for settings and logging configuration."""

import pytest

from commitlens.log import configure_logging
from commitlens.models import PlotLayout, Settings


def test_defaults():
    """Test default settings."""
    settings = Settings()

    assert settings.commit_key is None
    assert settings.nice_time_axis is True
    assert settings.commit_url("abc") == "https://github.com/jackkalsched/portfolio/commit/abc"


def test_environment_override(monkeypatch):
    """Test COMMITLENS_ environment variables."""
    monkeypatch.setenv("COMMITLENS_COMMIT_KEY", "commit_hash")
    monkeypatch.setenv("COMMITLENS_RESCALE_ON_CUTOFF", "false")

    settings = Settings()

    assert settings.commit_key == "commit_hash"
    assert settings.rescale_on_cutoff is False


def test_plot_layout():
    """Test the usable plot area inside the margins."""
    layout = PlotLayout()

    assert (layout.usable_left, layout.usable_right) == (20.0, 990.0)
    assert (layout.usable_top, layout.usable_bottom) == (10.0, 570.0)


def test_configure_logging_rejects_unknown_level():
    """Test an invalid level name."""
    with pytest.raises(ValueError):
        configure_logging("LOUD")


def test_configure_logging_accepts_lowercase():
    """Test level names are case-insensitive."""
    configure_logging("debug")
