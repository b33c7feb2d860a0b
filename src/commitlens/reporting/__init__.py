"""Summary metrics over commit selections."""

from commitlens.reporting.report import (
    NOT_APPLICABLE,
    AggregateReport,
    AggregateReporter,
    LanguageShare,
    TimeOfDay,
    most_productive_period,
)

__all__ = [
    "NOT_APPLICABLE",
    "AggregateReport",
    "AggregateReporter",
    "LanguageShare",
    "TimeOfDay",
    "most_productive_period",
]
