"""Keeps the rendered views consistent with the filter state."""

from typing import Any, Callable, List, Optional, Sequence

import structlog

from commitlens.exceptions import MissingCollaboratorError
from commitlens.filtering.engine import FilterEngine, FilterEvent, FilterEventKind
from commitlens.models import Commit
from commitlens.rendering.base import Renderer
from commitlens.reporting.report import AggregateReport, AggregateReporter
from commitlens.visualization.scales import CoordinateMapper

logger = structlog.get_logger(__name__)

_REDOMAIN_EVENTS = {FilterEventKind.TIME_CUTOFF, FilterEventKind.CLEARED}


class UpdateCoordinator:
    """Single subscriber of the filter engine.

    For every filter change it recomputes the selection, then a fresh report
    over that selection, and only then asks the renderer to redraw, so the
    highlighted marks and the displayed counts always agree.
    """

    def __init__(
        self,
        commits: Sequence[Commit],
        engine: FilterEngine,
        reporter: AggregateReporter,
        renderer: Optional[Renderer] = None,
        rescale_on_cutoff: bool = True,
    ) -> None:
        """Initialize the coordinator.

        Args:
            commits: Every commit of the loaded dataset, in aggregation order
            engine: Filter engine to subscribe to
            reporter: Reporter used for the selection metrics
            renderer: Display collaborator; updates are skipped without one
            rescale_on_cutoff: Narrow the time axis to the time-filtered commits
        """
        self.commits = list(commits)
        self.engine = engine
        self.reporter = reporter
        self.renderer = renderer
        self.rescale_on_cutoff = rescale_on_cutoff

        self.visible: List[Commit] = list(self.commits)
        self.selection: List[Commit] = list(self.commits)
        self.report: AggregateReport = AggregateReport()
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def mapper(self) -> CoordinateMapper:
        return self.engine.mapper

    def start(self) -> AggregateReport:
        """Fit the scales, subscribe to filter changes and draw everything once.

        Returns:
            Report over the initial selection
        """
        self.mapper.fit(self.commits)
        if self._unsubscribe is None:
            self._unsubscribe = self.engine.on_filter_change(self.handle)

        self.visible = self.engine.time_selection(self.commits)
        if self.rescale_on_cutoff:
            self.mapper.redomain(self.visible or self.commits)
        self._render("draw_scatter", self.visible)
        return self.refresh()

    def stop(self) -> None:
        """Stop reacting to filter changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle(self, event: FilterEvent) -> None:
        """React to one filter change."""
        logger.debug("filter_event_received", kind=event.kind.value)
        if event.kind in _REDOMAIN_EVENTS:
            self.visible = self.engine.time_selection(self.commits)
            if self.rescale_on_cutoff:
                self.mapper.redomain(self.visible or self.commits)
            self._render("draw_scatter", self.visible)
        self.refresh()

    def refresh(self) -> AggregateReport:
        """Recompute selection and report, then redraw the dependent views.

        Returns:
            Report over the current selection
        """
        self.selection = self.engine.current_selection(self.commits)
        self.report = self.reporter.report(self.selection)

        self._render("highlight", self.engine.is_selected)
        self._render("set_selection_count_text", len(self.selection))
        self._render("draw_summary", self.report)
        self._render("set_language_breakdown", self.report)
        return self.report

    def _render(self, operation: str, *args: Any) -> None:
        try:
            if self.renderer is None:
                raise MissingCollaboratorError(operation)
            method = getattr(self.renderer, operation, None)
            if method is None:
                raise MissingCollaboratorError(operation)
            method(*args)
        except MissingCollaboratorError as e:
            logger.warning("render_update_skipped", operation=e.operation)
        except Exception as e:
            # A failing view must not stop the remaining updates
            logger.error("render_update_failed", operation=operation, error=str(e))
