"""Shared fixtures for CommitLens tests."""

import csv
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest
import structlog

from commitlens.extraction import CommitAggregator, LineRecordNormalizer
from commitlens.filtering import FilterEngine
from commitlens.models import Commit
from commitlens.rendering import Renderer
from commitlens.reporting import AggregateReporter
from commitlens.visualization import CoordinateMapper

HEADER = ["commit", "author", "datetime", "date", "time", "timezone", "file", "line", "depth", "length", "type"]

SCENARIO_ROWS = [
    {
        "commit": "a1", "author": "Jack", "datetime": "2024-01-01 08:00:00", "date": "2024-01-01",
        "time": "08:00:00", "timezone": "", "file": "meta/main.js", "line": "1", "depth": "0",
        "length": "40", "type": "js",
    },
    {
        "commit": "a1", "author": "Jack", "datetime": "2024-01-01 08:00:00", "date": "2024-01-01",
        "time": "08:00:00", "timezone": "", "file": "meta/main.js", "line": "2", "depth": "1",
        "length": "22", "type": "js",
    },
    {
        "commit": "b2", "author": "Ana", "datetime": "2024-01-02 20:00:00", "date": "2024-01-02",
        "time": "20:00:00", "timezone": "", "file": "style.css", "line": "7", "depth": "2",
        "length": "18", "type": "css",
    },
]


def write_csv(path: Path, rows: List[Dict[str, str]], header: List[str] = HEADER) -> Path:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=header)
        writer.writeheader()
        for row in rows:
            writer.writerow({k: row.get(k, "") for k in header})
    return path


class RecordingRenderer(Renderer):
    """Renderer that records every call for later inspection."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.highlighted: List[str] = []
        self._plotted: List[Commit] = []

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def draw_scatter(self, commits):
        self.calls.append(("draw_scatter", list(commits)))
        self._plotted = list(commits)

    def highlight(self, predicate):
        self.highlighted = [c.id for c in self._plotted if predicate(c)]
        self.calls.append(("highlight", list(self.highlighted)))

    def draw_summary(self, report):
        self.calls.append(("draw_summary", report))

    def set_selection_count_text(self, count):
        self.calls.append(("set_selection_count_text", count))

    def set_language_breakdown(self, report):
        self.calls.append(("set_language_breakdown", report))


@pytest.fixture
def csv_writer():
    """Function writing rows to a CSV file with the standard header."""
    return write_csv


@pytest.fixture
def scenario_rows() -> List[Dict[str, str]]:
    """Raw rows of the three-line, two-commit scenario."""
    return [dict(row) for row in SCENARIO_ROWS]


@pytest.fixture
def scenario_csv(tmp_path, scenario_rows) -> Path:
    """Scenario rows written to a CSV file."""
    return write_csv(tmp_path / "loc.csv", scenario_rows)


@pytest.fixture
def records(scenario_rows):
    """Normalized scenario records."""
    return LineRecordNormalizer().normalize(scenario_rows).records


@pytest.fixture
def commits(records) -> List[Commit]:
    """Scenario commits: a1 (2 js lines, 08:00) and b2 (1 css line, 20:00)."""
    return CommitAggregator().aggregate(records)


@pytest.fixture
def mapper(commits) -> CoordinateMapper:
    """Coordinate mapper fitted to the scenario commits."""
    fitted = CoordinateMapper()
    fitted.fit(commits)
    return fitted


@pytest.fixture
def engine(mapper) -> FilterEngine:
    """Filter engine over the fitted mapper."""
    return FilterEngine(mapper)


@pytest.fixture
def reporter() -> AggregateReporter:
    return AggregateReporter()


@pytest.fixture
def recording_renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop logging configuration made by CLI runs between tests."""
    yield
    structlog.reset_defaults()
