"""Normalization of raw per-line history rows into line records."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Mapping, Optional, Sequence

import structlog
from pydantic import ValidationError

from commitlens.exceptions import InvalidTimestampError, MalformedRowError
from commitlens.models import COMMIT_KEY_CANDIDATES, DatasetColumns, LineRecord

logger = structlog.get_logger(__name__)

DEFAULT_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
_DATE_TIME_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M")


def resolve_columns(header: Sequence[str], commit_key: Optional[str] = None) -> DatasetColumns:
    """Resolve the dataset columns once from a CSV header.

    Args:
        header: Column names of the dataset
        commit_key: Explicitly configured commit column, if any

    Returns:
        DatasetColumns describing the grouping key and optional columns
    """
    names = set(header)
    key = commit_key
    if key is None:
        key = next((c for c in COMMIT_KEY_CANDIDATES if c in names), COMMIT_KEY_CANDIDATES[0])
    if key not in names:
        logger.warning("commit_key_column_missing", commit_key=key, header=list(header))

    return DatasetColumns(
        commit_key=key,
        has_file="file" in names,
        has_language="type" in names,
    )


def parse_offset(value: Optional[str]) -> Optional[timezone]:
    """Parse a timezone offset such as ``-08:00``, ``+0530`` or ``Z``.

    Returns:
        A fixed-offset timezone, or None if the value is blank or unparseable
    """
    if not value:
        return None
    text = value.strip()
    if text.upper() in ("Z", "UTC"):
        return timezone.utc
    if len(text) < 3 or text[0] not in "+-":
        return None

    digits = text[1:].replace(":", "")
    if not digits.isdigit() or len(digits) not in (2, 4):
        return None
    hours = int(digits[:2])
    minutes = int(digits[2:] or 0)
    if hours > 23 or minutes > 59:
        return None

    delta = timedelta(hours=hours, minutes=minutes)
    return timezone(-delta if text[0] == "-" else delta)


@dataclass
class NormalizationResult:
    """Outcome of normalizing a batch of raw rows."""

    records: List[LineRecord] = field(default_factory=list)
    rows_read: int = 0
    malformed_rows: int = 0
    invalid_timestamps: int = 0

    @property
    def rows_skipped(self) -> int:
        return self.malformed_rows + self.invalid_timestamps


class LineRecordNormalizer:
    """Turns raw field-string rows into typed line records."""

    def __init__(
        self,
        columns: Optional[DatasetColumns] = None,
        datetime_format: str = DEFAULT_DATETIME_FORMAT,
    ) -> None:
        """Initialize the normalizer.

        Args:
            columns: Resolved dataset columns. Defaults to a ``commit`` key
                with file and type columns present.
            datetime_format: Primary strptime pattern for the datetime column
        """
        self.columns = columns or DatasetColumns()
        self.datetime_format = datetime_format

    def normalize(self, rows: Iterable[Mapping[str, Optional[str]]]) -> NormalizationResult:
        """Normalize every row, skipping the ones that cannot be used.

        Args:
            rows: Raw rows keyed by column name

        Returns:
            NormalizationResult with the usable records and skip counts
        """
        result = NormalizationResult()

        # Row 1 is the header
        for row_number, row in enumerate(rows, start=2):
            result.rows_read += 1
            try:
                result.records.append(self.normalize_row(row, row_number))
            except MalformedRowError as e:
                result.malformed_rows += 1
                logger.warning("malformed_row_skipped", row_number=row_number, reason=e.reason)
            except InvalidTimestampError as e:
                result.invalid_timestamps += 1
                logger.warning("invalid_timestamp_skipped", row_number=row_number, value=e.value)

        logger.debug(
            "rows_normalized",
            rows_read=result.rows_read,
            records=len(result.records),
            skipped=result.rows_skipped,
        )
        return result

    def normalize_row(self, row: Mapping[str, Optional[str]], row_number: Optional[int] = None) -> LineRecord:
        """Normalize a single row.

        Args:
            row: Raw row keyed by column name
            row_number: Position of the row in its source, for error messages

        Returns:
            LineRecord

        Raises:
            MalformedRowError: If the commit id or a numeric column is unusable
            InvalidTimestampError: If no timestamp can be resolved
        """
        commit_id = _text(row.get(self.columns.commit_key))
        if not commit_id:
            raise MalformedRowError(f"missing {self.columns.commit_key!r} value", row_number)

        line_number = _parse_int(row, "line", row_number)
        depth = _parse_int(row, "depth", row_number)
        line_length = _parse_int(row, "length", row_number)

        timestamp = self.resolve_datetime(row, row_number)
        calendar_date = _parse_date(row.get("date")) or timestamp.date()

        try:
            return LineRecord(
                commit_id=commit_id,
                author=_text(row.get("author")),
                file=(_text(row.get("file")) or None) if self.columns.has_file else None,
                line_number=line_number,
                depth=depth,
                line_length=line_length,
                language=(_text(row.get("type")) or None) if self.columns.has_language else None,
                date=calendar_date,
                time=_text(row.get("time")) or None,
                timezone=_text(row.get("timezone")) or None,
                datetime=timestamp,
            )
        except ValidationError as e:
            raise MalformedRowError(str(e.errors()[0]["msg"]), row_number) from e

    def resolve_datetime(self, row: Mapping[str, Optional[str]], row_number: Optional[int] = None) -> datetime:
        """Resolve the timestamp of a row.

        Tries the configured pattern, then ISO-8601, then the ``date`` and
        ``time`` columns. Naive results get the row's ``timezone`` offset, or
        UTC when the row has none.

        Raises:
            InvalidTimestampError: If every strategy fails
        """
        raw = _text(row.get("datetime"))
        parsed = None

        if raw:
            try:
                parsed = datetime.strptime(raw, self.datetime_format)
            except ValueError:
                try:
                    parsed = datetime.fromisoformat(_iso(raw))
                except ValueError:
                    parsed = None

        if parsed is None:
            parsed = _compose(row.get("date"), row.get("time"))

        if parsed is None:
            raise InvalidTimestampError(raw or None, row_number)

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=parse_offset(row.get("timezone")) or timezone.utc)
        return parsed


def _text(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


def _iso(value: str) -> str:
    # fromisoformat only accepts a trailing Z from Python 3.11 on
    return value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value


def _parse_int(row: Mapping[str, Optional[str]], column: str, row_number: Optional[int]) -> int:
    text = _text(row.get(column))
    if not text:
        raise MalformedRowError(f"missing numeric {column!r}", row_number)
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        raise MalformedRowError(f"non-numeric {column!r}: {text!r}", row_number) from None
    if not number.is_integer():
        raise MalformedRowError(f"non-integer {column!r}: {text!r}", row_number)
    return int(number)


def _parse_date(value: Optional[str]) -> Optional[date]:
    text = _text(value)
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def _compose(date_value: Optional[str], time_value: Optional[str]) -> Optional[datetime]:
    day = _parse_date(date_value)
    if day is None:
        return None
    clock = _text(time_value) or "00:00:00"
    for fmt in _DATE_TIME_FORMATS:
        try:
            return datetime.strptime(f"{day.isoformat()} {clock}", fmt)
        except ValueError:
            continue
    return datetime.combine(day, datetime.min.time())
