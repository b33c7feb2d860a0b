"""Data models for per-line history records and the commits built from them."""

from datetime import date as Date
from datetime import datetime as DateTime
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class LineRecord(BaseModel):
    """One modified source line in one commit."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "commit_id": "a1b2c3d",
                "author": "Jane Doe",
                "file": "meta/main.js",
                "line_number": 12,
                "depth": 1,
                "line_length": 48,
                "language": "js",
                "date": "2024-01-01",
                "time": "08:00:00",
                "timezone": "-08:00",
                "datetime": "2024-01-01T08:00:00-08:00",
            }
        },
    )

    commit_id: str = Field(..., min_length=1, description="Identifier of the owning commit")
    author: str = Field("", description="Author of the commit that touched the line")
    file: Optional[str] = Field(None, description="Path of the file the line belongs to")
    line_number: int = Field(..., ge=1, description="1-based line number within the file")
    depth: int = Field(0, ge=0, description="Indentation depth of the line")
    line_length: int = Field(0, ge=0, description="Length of the line in characters")
    language: Optional[str] = Field(None, description="File-type classifier, e.g. js or css")
    date: Optional[Date] = Field(None, description="Calendar date of the commit")
    time: Optional[str] = Field(None, description="Raw time-of-day column")
    timezone: Optional[str] = Field(None, description="Raw timezone offset column")
    datetime: DateTime = Field(..., description="Commit timestamp, always timezone-aware")


class Commit(BaseModel):
    """All line records sharing one commit identifier.

    A commit exclusively owns its line records. They are exposed read-only
    through :attr:`lines`; the model itself is frozen once built.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Commit identifier")
    url: str = Field(..., description="Link to the commit in the hosting repository")
    author: str = Field("", description="Author of the first record of the commit")
    date: Optional[Date] = Field(None, description="Calendar date of the first record")
    time: Optional[str] = Field(None, description="Raw time column of the first record")
    timezone: Optional[str] = Field(None, description="Raw timezone column of the first record")
    datetime: DateTime = Field(..., description="Timestamp of the first record")
    hour_fraction: float = Field(..., ge=0, lt=24, description="Time of day as hours + minutes / 60")
    total_lines: int = Field(..., ge=1, description="Number of owned line records")
    line_records: Tuple[LineRecord, ...] = Field(..., min_length=1, repr=False, exclude=True)

    @property
    def lines(self) -> Tuple[LineRecord, ...]:
        """Line records owned by this commit."""
        return self.line_records

    def describe(self) -> Dict[str, str]:
        """Fields shown when a single commit is inspected.

        Returns:
            Mapping of label to display text
        """
        dt = self.datetime
        hour12 = dt.hour % 12 or 12
        meridiem = "AM" if dt.hour < 12 else "PM"
        return {
            "commit": self.id,
            "url": self.url,
            "date": f"{dt:%A, %B} {dt.day}, {dt.year}",
            "time": f"{hour12}:{dt:%M} {meridiem}",
            "author": self.author or "Unknown",
            "lines": str(self.total_lines),
        }
