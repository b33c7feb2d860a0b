"""Grouping of line records into commits."""

from typing import Dict, Iterable, List, Optional

import structlog

from commitlens.models import DEFAULT_REPOSITORY_URL, Commit, LineRecord

logger = structlog.get_logger(__name__)


class CommitAggregator:
    """Builds one Commit per distinct commit id.

    Commits come out in the order their ids are first encountered. Each
    commit takes its author and timestamp from its first record.
    """

    def __init__(self, repository_url: str = DEFAULT_REPOSITORY_URL) -> None:
        """Initialize the aggregator.

        Args:
            repository_url: Base URL that commit ids are appended to
        """
        self.repository_url = repository_url

    def aggregate(self, records: Iterable[LineRecord]) -> List[Commit]:
        """Group records by commit id.

        Args:
            records: Normalized line records

        Returns:
            List of Commit objects in first-encounter order
        """
        groups: Dict[str, List[LineRecord]] = {}
        for record in records:
            groups.setdefault(record.commit_id, []).append(record)

        commits = []
        for commit_id, lines in groups.items():
            commit = self._build_commit(commit_id, lines)
            if commit is not None:
                commits.append(commit)

        logger.debug("commits_aggregated", groups=len(groups), commits=len(commits))
        return commits

    def _build_commit(self, commit_id: str, lines: List[LineRecord]) -> Optional[Commit]:
        if not lines:
            return None

        first = lines[0]
        timestamp = first.datetime
        if timestamp is None:
            logger.warning("commit_without_timestamp_excluded", commit_id=commit_id)
            return None

        return Commit(
            id=commit_id,
            url=f"{self.repository_url}{commit_id}",
            author=first.author,
            date=first.date,
            time=first.time,
            timezone=first.timezone,
            datetime=timestamp,
            hour_fraction=hour_fraction(timestamp.hour, timestamp.minute),
            total_lines=len(lines),
            line_records=tuple(lines),
        )


def hour_fraction(hours: int, minutes: int) -> float:
    """Time of day as a continuous value in [0, 24)."""
    return hours + minutes / 60
