"""Filter state and the composed commit selection predicate."""

from collections import deque
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Deque, Iterable, List, Optional, Sequence, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field

from commitlens.models import Commit
from commitlens.visualization.scales import CoordinateMapper

logger = structlog.get_logger(__name__)


class BrushRegion(BaseModel):
    """Axis-aligned rectangle in plot pixel space, corners ordered."""

    model_config = ConfigDict(frozen=True)

    x0: float = Field(..., description="Left edge")
    y0: float = Field(..., description="Top edge")
    x1: float = Field(..., description="Right edge")
    y1: float = Field(..., description="Bottom edge")

    @classmethod
    def from_corners(cls, x_a: float, y_a: float, x_b: float, y_b: float) -> "BrushRegion":
        """Build a region from two opposite corners given in any order."""
        return cls(x0=min(x_a, x_b), y0=min(y_a, y_b), x1=max(x_a, x_b), y1=max(y_a, y_b))

    @property
    def is_empty(self) -> bool:
        return self.x1 <= self.x0 or self.y1 <= self.y0

    def contains(self, x: float, y: float) -> bool:
        """Whether a point lies inside the region, edges included."""
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1


class FilterStatus(str, Enum):
    """Which of the two independent constraints are active."""

    UNFILTERED = "unfiltered"
    TIME_FILTERED = "time_filtered"
    SPATIALLY_FILTERED = "spatially_filtered"
    BOTH_FILTERED = "both_filtered"


class BrushPhase(str, Enum):
    START = "start"
    MOVE = "move"
    END = "end"


class FilterEventKind(str, Enum):
    TIME_CUTOFF = "time_cutoff"
    BRUSH_START = "brush_start"
    BRUSH_MOVE = "brush_move"
    BRUSH_END = "brush_end"
    CLEARED = "cleared"


_BRUSH_EVENTS = {
    BrushPhase.START: FilterEventKind.BRUSH_START,
    BrushPhase.MOVE: FilterEventKind.BRUSH_MOVE,
    BrushPhase.END: FilterEventKind.BRUSH_END,
}


@dataclass(frozen=True)
class FilterState:
    """Current time cutoff and brush; None means the constraint is off."""

    time_cutoff: Optional[datetime] = None
    brush: Optional[BrushRegion] = None


@dataclass(frozen=True)
class FilterEvent:
    """A filter mutation and the state it produced."""

    kind: FilterEventKind
    state: FilterState


FilterChangeHandler = Callable[[FilterEvent], None]
BrushInput = Union[BrushRegion, Sequence[float], None]


def ensure_aware(value: datetime) -> datetime:
    """Attach UTC to naive timestamps so they compare with loaded commits."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class FilterEngine:
    """Holds the filter state and evaluates the composed selection predicate.

    The time cutoff and the brush are independent: setting one never touches
    the other. Subscribers registered with :meth:`on_filter_change` are called
    after every mutation. A mutation made from inside a handler is queued and
    dispatched once the current event has been fully handled.
    """

    def __init__(self, mapper: CoordinateMapper) -> None:
        """Initialize the filter engine.

        Args:
            mapper: Coordinate mapper used to place commits in brush space
        """
        self.mapper = mapper
        self._state = FilterState()
        self._handlers: List[FilterChangeHandler] = []
        self._pending: Deque[FilterEvent] = deque()
        self._dispatching = False

    @property
    def state(self) -> FilterState:
        return self._state

    @property
    def time_cutoff(self) -> Optional[datetime]:
        return self._state.time_cutoff

    @property
    def brush(self) -> Optional[BrushRegion]:
        return self._state.brush

    @property
    def status(self) -> FilterStatus:
        timed = self._state.time_cutoff is not None
        brushed = self._state.brush is not None
        if timed and brushed:
            return FilterStatus.BOTH_FILTERED
        if timed:
            return FilterStatus.TIME_FILTERED
        if brushed:
            return FilterStatus.SPATIALLY_FILTERED
        return FilterStatus.UNFILTERED

    # ============================================================================
    # Subscriptions
    # ============================================================================

    def on_filter_change(self, handler: FilterChangeHandler) -> Callable[[], None]:
        """Register a handler called after every filter mutation.

        Returns:
            Callable that removes the handler again
        """
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def _emit(self, kind: FilterEventKind) -> None:
        self._pending.append(FilterEvent(kind=kind, state=self._state))
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._pending:
                event = self._pending.popleft()
                logger.debug("filter_changed", kind=event.kind.value, status=self.status.value)
                for handler in list(self._handlers):
                    handler(event)
        finally:
            self._dispatching = False
            self._pending.clear()

    # ============================================================================
    # Mutations
    # ============================================================================

    def set_time_cutoff(self, cutoff: Optional[datetime]) -> None:
        """Set the upper time bound, or remove it with None."""
        if cutoff is not None:
            cutoff = ensure_aware(cutoff)
        self._state = replace(self._state, time_cutoff=cutoff)
        self._emit(FilterEventKind.TIME_CUTOFF)

    def set_time_cutoff_from_slider(self, position: float) -> datetime:
        """Set the cutoff from a slider position in [0, 100].

        Returns:
            The resolved cutoff timestamp

        Raises:
            ValueError: If the position is out of range or no data is loaded
        """
        cutoff = self.mapper.datetime_at(position)
        self.set_time_cutoff(cutoff)
        return cutoff

    def set_brush(self, region: BrushInput, phase: BrushPhase = BrushPhase.MOVE) -> None:
        """Set the brush from a drag gesture.

        A missing or zero-area region removes the spatial constraint.

        Args:
            region: BrushRegion, corner coordinates (x0, y0, x1, y1) or None
            phase: Stage of the drag gesture
        """
        if region is not None and not isinstance(region, BrushRegion):
            region = BrushRegion.from_corners(*region)
        if region is not None and region.is_empty:
            region = None

        self._state = replace(self._state, brush=region)
        self._emit(_BRUSH_EVENTS[BrushPhase(phase)])

    def clear_brush(self) -> None:
        self.set_brush(None, BrushPhase.END)

    def clear(self) -> None:
        """Remove both constraints."""
        self._state = FilterState()
        self._emit(FilterEventKind.CLEARED)

    # ============================================================================
    # Predicates
    # ============================================================================

    def passes_time(self, commit: Commit) -> bool:
        cutoff = self._state.time_cutoff
        return cutoff is None or commit.datetime <= cutoff

    def passes_brush(self, commit: Commit) -> bool:
        brush = self._state.brush
        if brush is None:
            return True
        x, y = self.mapper.position_of(commit)
        return brush.contains(x, y)

    def is_selected(self, commit: Commit) -> bool:
        """Whether a commit satisfies every active constraint."""
        return self.passes_time(commit) and self.passes_brush(commit)

    def time_selection(self, commits: Iterable[Commit]) -> List[Commit]:
        """Commits passing the time cutoff alone, in input order."""
        return [c for c in commits if self.passes_time(c)]

    def current_selection(self, commits: Iterable[Commit]) -> List[Commit]:
        """Commits passing every active constraint, in input order."""
        return [c for c in commits if self.is_selected(c)]
