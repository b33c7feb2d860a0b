"""Base class for renderers driven by the update coordinator."""

from abc import ABC, abstractmethod
from typing import Callable, Sequence

from commitlens.models import Commit
from commitlens.reporting.report import AggregateReport

CommitPredicate = Callable[[Commit], bool]


class Renderer(ABC):
    """Abstract display collaborator.

    The pipeline only ever calls these operations; layout and drawing are
    entirely up to the implementation.
    """

    @abstractmethod
    def draw_scatter(self, commits: Sequence[Commit]) -> None:
        """Place one mark per commit using the current scales.

        Args:
            commits: Commits to plot
        """
        pass

    @abstractmethod
    def highlight(self, predicate: CommitPredicate) -> None:
        """Mark the plotted commits matching ``predicate`` as selected.

        Args:
            predicate: Returns True for selected commits
        """
        pass

    @abstractmethod
    def draw_summary(self, report: AggregateReport) -> None:
        """Show the summary metrics panel.

        Args:
            report: Metrics of the current selection
        """
        pass

    @abstractmethod
    def set_selection_count_text(self, count: int) -> None:
        """Show how many commits are selected.

        Args:
            count: Number of selected commits
        """
        pass

    @abstractmethod
    def set_language_breakdown(self, report: AggregateReport) -> None:
        """Show lines per language for the current selection.

        Args:
            report: Metrics of the current selection
        """
        pass
