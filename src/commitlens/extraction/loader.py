"""Loading of per-line history CSV files into commits."""

import asyncio
import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import structlog

from commitlens.exceptions import EmptyDatasetError
from commitlens.extraction.aggregator import CommitAggregator
from commitlens.extraction.normalizer import LineRecordNormalizer, NormalizationResult, resolve_columns
from commitlens.models import Commit, DatasetColumns, LineRecord, Settings

logger = structlog.get_logger(__name__)


@dataclass
class Dataset:
    """Records and commits of one loaded history file."""

    records: List[LineRecord]
    commits: List[Commit]
    columns: DatasetColumns
    normalization: NormalizationResult = field(default_factory=NormalizationResult)

    @property
    def is_empty(self) -> bool:
        return not self.commits

    def find_commit(self, commit_id: str) -> Optional[Commit]:
        """Find a commit by full id or unique prefix."""
        matches = [c for c in self.commits if c.id == commit_id]
        if not matches:
            matches = [c for c in self.commits if c.id.startswith(commit_id)]
        return matches[0] if len(matches) == 1 else None


def read_csv(path: Path) -> Tuple[List[str], List[Dict[str, str]]]:
    """Read a CSV file with a header row.

    Args:
        path: Path to the CSV file

    Returns:
        Tuple of (header, rows)

    Raises:
        ValueError: If the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise ValueError(f"Dataset file does not exist: {path}")

    # utf-8-sig drops a leading byte order mark; undecodable bytes become U+FFFD
    with open(path, "r", newline="", encoding="utf-8-sig", errors="replace") as f:
        reader = csv.DictReader(f)
        rows = list(reader)
        header = list(reader.fieldnames or [])

    return header, rows


def build_dataset(
    header: List[str],
    rows: List[Dict[str, str]],
    settings: Optional[Settings] = None,
) -> Dataset:
    """Normalize and aggregate already-read rows.

    Args:
        header: Column names
        rows: Raw rows keyed by column name
        settings: Application settings

    Returns:
        Dataset
    """
    settings = settings or Settings()
    columns = resolve_columns(header, settings.commit_key)

    normalizer = LineRecordNormalizer(columns, datetime_format=settings.datetime_format)
    result = normalizer.normalize(rows)

    aggregator = CommitAggregator(settings.repository_url)
    commits = aggregator.aggregate(result.records)

    logger.info(
        "dataset_loaded",
        rows=result.rows_read,
        records=len(result.records),
        skipped=result.rows_skipped,
        commits=len(commits),
        commit_key=columns.commit_key,
    )
    return Dataset(records=result.records, commits=commits, columns=columns, normalization=result)


def load_dataset(
    path: Path,
    settings: Optional[Settings] = None,
    require_data: bool = False,
) -> Dataset:
    """Load a per-line history CSV into commits.

    Args:
        path: Path to the CSV file
        settings: Application settings
        require_data: Raise instead of returning an empty dataset

    Returns:
        Dataset

    Raises:
        ValueError: If the file does not exist
        EmptyDatasetError: If require_data is set and no commit was built
    """
    header, rows = read_csv(path)
    dataset = build_dataset(header, rows, settings)

    if dataset.is_empty:
        logger.warning("empty_dataset", path=str(path), rows=len(rows))
        if require_data:
            raise EmptyDatasetError(f"No commits could be built from {path}")

    return dataset


async def load_dataset_async(
    path: Path,
    settings: Optional[Settings] = None,
    require_data: bool = False,
) -> Dataset:
    """Load a dataset without blocking the event loop."""
    return await asyncio.to_thread(load_dataset, path, settings, require_data)
