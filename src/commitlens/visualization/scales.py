"""Scale functions mapping commit data to plot pixel space and back."""

from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence, Tuple

import structlog

from commitlens.models import Commit, PlotLayout

logger = structlog.get_logger(__name__)

HOURS_PER_DAY = 24
SLIDER_MIN = 0.0
SLIDER_MAX = 100.0


class LinearScale:
    """Linear map from a numeric domain to a numeric range."""

    def __init__(self, domain: Tuple[float, float], range_: Tuple[float, float]) -> None:
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, position: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return (d0 + d1) / 2
        return d0 + (position - r0) / (r1 - r0) * (d1 - d0)


class TimeScale:
    """Linear map from a datetime domain to a numeric range."""

    def __init__(
        self,
        range_: Tuple[float, float],
        domain: Optional[Tuple[datetime, datetime]] = None,
    ) -> None:
        self.range = (float(range_[0]), float(range_[1]))
        self.domain = domain

    @property
    def has_domain(self) -> bool:
        return self.domain is not None

    def require_domain(self) -> Tuple[datetime, datetime]:
        if self.domain is None:
            raise ValueError("Time scale has no domain; fit it to a set of commits first")
        return self.domain

    def __call__(self, value: datetime) -> float:
        start, end = self.require_domain()
        r0, r1 = self.range
        span = (end - start).total_seconds()
        if span == 0:
            return (r0 + r1) / 2
        return r0 + (value - start).total_seconds() / span * (r1 - r0)

    def invert(self, position: float) -> datetime:
        start, end = self.require_domain()
        r0, r1 = self.range
        if r1 == r0:
            return start
        fraction = (position - r0) / (r1 - r0)
        return start + (end - start) * fraction

    def nice(self) -> "TimeScale":
        """Extend the domain outward to midnight boundaries."""
        start, end = self.require_domain()
        floor = start.replace(hour=0, minute=0, second=0, microsecond=0)
        ceil = end.replace(hour=0, minute=0, second=0, microsecond=0)
        if ceil < end or ceil == floor:
            ceil += timedelta(days=1)
        self.domain = (floor, ceil)
        return self


def time_extent(commits: Iterable[Commit]) -> Optional[Tuple[datetime, datetime]]:
    """Earliest and latest commit timestamps, or None for no commits."""
    stamps = [c.datetime for c in commits]
    if not stamps:
        return None
    return min(stamps), max(stamps)


class CoordinateMapper:
    """Owns the scales used to plot commits and to interpret user input.

    Ranges depend only on the plot layout. The x domain follows the commits
    currently being visualized; the y domain is fixed to a day. A separate
    slider scale maps the full, unfiltered time extent onto 0-100.
    """

    def __init__(self, layout: Optional[PlotLayout] = None, nice: bool = True) -> None:
        """Initialize the mapper.

        Args:
            layout: Plot geometry. Defaults to the standard layout.
            nice: Extend the time axis outward to whole days
        """
        self.layout = layout or PlotLayout()
        self.nice = nice
        self.x_scale = TimeScale((self.layout.usable_left, self.layout.usable_right))
        self.y_scale = LinearScale((0, HOURS_PER_DAY), (self.layout.usable_bottom, self.layout.usable_top))
        self.slider_scale = TimeScale((SLIDER_MIN, SLIDER_MAX))

    @property
    def is_fitted(self) -> bool:
        return self.x_scale.has_domain

    def fit(self, commits: Sequence[Commit]) -> None:
        """Build the domains from the full dataset.

        Args:
            commits: Every commit of the loaded dataset
        """
        extent = time_extent(commits)
        if extent is None:
            logger.warning("coordinate_mapper_no_commits")
            self.x_scale.domain = None
            self.slider_scale.domain = None
            return

        self.slider_scale.domain = extent
        self._set_x_domain(extent)

    def redomain(self, commits: Sequence[Commit]) -> bool:
        """Narrow or widen the x domain to the commits being visualized.

        Leaves the domain unchanged when no commits are given.

        Returns:
            True if the domain changed
        """
        extent = time_extent(commits)
        if extent is None:
            return False

        previous = self.x_scale.domain
        self._set_x_domain(extent)
        changed = self.x_scale.domain != previous
        if changed:
            logger.debug("x_domain_changed", start=str(self.x_scale.domain[0]), end=str(self.x_scale.domain[1]))
        return changed

    def _set_x_domain(self, extent: Tuple[datetime, datetime]) -> None:
        self.x_scale.domain = extent
        if self.nice:
            self.x_scale.nice()

    def x_of(self, value: datetime) -> float:
        return self.x_scale(value)

    def y_of(self, hour_fraction: float) -> float:
        return self.y_scale(hour_fraction)

    def inverse_x(self, position: float) -> datetime:
        return self.x_scale.invert(position)

    def inverse_y(self, position: float) -> float:
        return self.y_scale.invert(position)

    def position_of(self, commit: Commit) -> Tuple[float, float]:
        """Pixel position of a commit's mark."""
        return self.x_of(commit.datetime), self.y_of(commit.hour_fraction)

    def datetime_at(self, progress: float) -> datetime:
        """Timestamp selected by a slider position in [0, 100]."""
        if not SLIDER_MIN <= progress <= SLIDER_MAX:
            raise ValueError(f"Slider position must be between {SLIDER_MIN:g} and {SLIDER_MAX:g}: {progress}")
        if progress == SLIDER_MAX:
            return self.slider_scale.require_domain()[1]
        return self.slider_scale.invert(progress)

    def progress_of(self, value: datetime) -> float:
        """Slider position corresponding to a timestamp, clamped to [0, 100]."""
        return min(SLIDER_MAX, max(SLIDER_MIN, self.slider_scale(value)))

    @staticmethod
    def tick_label(hour: float) -> str:
        """Label for a y-axis tick, e.g. ``08:00``."""
        return f"{int(hour) % HOURS_PER_DAY:02d}:00"
