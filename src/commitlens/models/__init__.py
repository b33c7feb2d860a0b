"""Data models for commit history analytics."""

from commitlens.models.commit import Commit, LineRecord
from commitlens.models.config import (
    COMMIT_KEY_CANDIDATES,
    DEFAULT_REPOSITORY_URL,
    DatasetColumns,
    PlotLayout,
    Settings,
)

__all__ = [
    "Commit",
    "LineRecord",
    "COMMIT_KEY_CANDIDATES",
    "DEFAULT_REPOSITORY_URL",
    "DatasetColumns",
    "PlotLayout",
    "Settings",
]
