"""Summary metrics over a subset of commits."""

from collections import Counter
from enum import Enum
from typing import Dict, Iterable, Optional, Sequence

from pydantic import BaseModel, Field

from commitlens.models import Commit, DatasetColumns, LineRecord

NOT_APPLICABLE = "N/A"


class TimeOfDay(str, Enum):
    """Time-of-day buckets, in tie-breaking order."""

    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    NIGHT = "Night"

    @classmethod
    def of_hour(cls, hour: int) -> "TimeOfDay":
        if 5 <= hour < 12:
            return cls.MORNING
        if 12 <= hour < 17:
            return cls.AFTERNOON
        if 17 <= hour < 21:
            return cls.EVENING
        return cls.NIGHT


class LanguageShare(BaseModel):
    """Line count of one language and its share of all selected lines."""

    count: int = Field(..., ge=0)
    proportion: float = Field(..., ge=0, le=1)

    @property
    def percent(self) -> float:
        """Proportion as a percentage rounded to one decimal."""
        return round(self.proportion * 100, 1)


class AggregateReport(BaseModel):
    """Metrics derived from one commit selection.

    ``file_count`` and ``language_breakdown`` are None when the dataset has no
    ``file`` / ``type`` column; ``most_productive_period`` is None for an
    empty selection.
    """

    commit_count: int = 0
    total_line_count: int = 0
    file_count: Optional[int] = None
    author_count: int = 0
    language_breakdown: Optional[Dict[str, LanguageShare]] = None
    most_productive_period: Optional[TimeOfDay] = None
    max_depth: int = 0
    longest_line: int = 0
    average_line_length: float = 0.0

    @property
    def file_count_text(self) -> str:
        return NOT_APPLICABLE if self.file_count is None else str(self.file_count)

    @property
    def period_text(self) -> str:
        return NOT_APPLICABLE if self.most_productive_period is None else self.most_productive_period.value

    def metrics(self) -> Dict[str, str]:
        """Display label to display value, in panel order."""
        return {
            "Commits": str(self.commit_count),
            "Total LOC": str(self.total_line_count),
            "Files": self.file_count_text,
            "Authors": str(self.author_count),
            "Max Depth": str(self.max_depth),
            "Longest Line": str(self.longest_line),
            "Average Line Length": f"{self.average_line_length:.1f}",
            "Most Productive Time of Day": self.period_text,
        }


class AggregateReporter:
    """Computes fresh reports from commit selections."""

    def __init__(self, columns: Optional[DatasetColumns] = None) -> None:
        """Initialize the reporter.

        Args:
            columns: Columns available in the loaded dataset. Decides whether
                file counts and language breakdowns are applicable.
        """
        self.columns = columns or DatasetColumns()

    def report(self, commits: Sequence[Commit]) -> AggregateReport:
        """Build a report over a commit selection.

        Args:
            commits: Selected commits; may be empty

        Returns:
            AggregateReport
        """
        records = [record for commit in commits for record in commit.lines]
        total_lines = sum(commit.total_lines for commit in commits)

        return AggregateReport(
            commit_count=len(commits),
            total_line_count=total_lines,
            file_count=self._file_count(records),
            author_count=len({commit.author for commit in commits if commit.author}),
            language_breakdown=self.language_breakdown(records, total_lines),
            most_productive_period=most_productive_period(records),
            max_depth=max((r.depth for r in records), default=0),
            longest_line=max((r.line_length for r in records), default=0),
            average_line_length=(sum(r.line_length for r in records) / len(records)) if records else 0.0,
        )

    def _file_count(self, records: Sequence[LineRecord]) -> Optional[int]:
        if not self.columns.has_file:
            return None
        return len({r.file for r in records if r.file})

    def language_breakdown(
        self, records: Sequence[LineRecord], total_lines: Optional[int] = None
    ) -> Optional[Dict[str, LanguageShare]]:
        """Line count and share per language, largest first.

        Args:
            records: Line records of the selection
            total_lines: Denominator for proportions; defaults to len(records)

        Returns:
            Mapping of language to LanguageShare, or None if not applicable
        """
        if not self.columns.has_language:
            return None

        total = len(records) if total_lines is None else total_lines
        counts = Counter(r.language or "unknown" for r in records)
        return {
            language: LanguageShare(count=count, proportion=count / total)
            for language, count in counts.most_common()
        }


def most_productive_period(records: Iterable[LineRecord]) -> Optional[TimeOfDay]:
    """Bucket with the most records; ties go to the earlier bucket."""
    counts = Counter(TimeOfDay.of_hour(r.datetime.hour) for r in records)
    if not counts:
        return None
    return max(TimeOfDay, key=lambda period: counts[period])
