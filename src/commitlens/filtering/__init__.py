"""Time and brush filtering of commits."""

from commitlens.filtering.engine import (
    BrushPhase,
    BrushRegion,
    FilterEngine,
    FilterEvent,
    FilterEventKind,
    FilterState,
    FilterStatus,
)

__all__ = [
    "BrushPhase",
    "BrushRegion",
    "FilterEngine",
    "FilterEvent",
    "FilterEventKind",
    "FilterState",
    "FilterStatus",
]
