"""Terminal renderer built on rich."""

from typing import Dict, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from commitlens.models import Commit
from commitlens.reporting.report import AggregateReport
from commitlens.rendering.base import CommitPredicate, Renderer
from commitlens.visualization.scales import HOURS_PER_DAY, CoordinateMapper

SELECTED_MARK = "●"
PLAIN_MARK = "·"


class ConsoleRenderer(Renderer):
    """Draws the scatterplot as a character grid and the panels as tables.

    Plot pixel space is resampled onto a ``columns`` x ``rows`` grid. Marks
    are placed by :meth:`draw_scatter` and printed by :meth:`highlight`,
    which the coordinator always calls after a redraw.
    """

    def __init__(
        self,
        mapper: CoordinateMapper,
        console: Optional[Console] = None,
        columns: int = 72,
        rows: int = 18,
        show_scatter: bool = True,
    ) -> None:
        """Initialize the renderer.

        Args:
            mapper: Coordinate mapper shared with the filter engine
            console: Rich console for output
            columns: Width of the scatter grid in characters
            rows: Height of the scatter grid in characters
            show_scatter: Print the scatter panel on highlight
        """
        if columns < 2 or rows < 2:
            raise ValueError("Scatter grid needs at least 2 columns and 2 rows")
        self.mapper = mapper
        self.console = console or Console()
        self.columns = columns
        self.rows = rows
        self.show_scatter = show_scatter
        self._marks: List[Tuple[Commit, int, int]] = []

    def _cell(self, x: float, y: float) -> Tuple[int, int]:
        layout = self.mapper.layout
        col = round((x - layout.usable_left) / layout.usable_width * (self.columns - 1))
        row = round((y - layout.usable_top) / layout.usable_height * (self.rows - 1))
        return min(max(col, 0), self.columns - 1), min(max(row, 0), self.rows - 1)

    def draw_scatter(self, commits: Sequence[Commit]) -> None:
        self._marks = []
        if not self.mapper.is_fitted:
            return
        for commit in commits:
            col, row = self._cell(*self.mapper.position_of(commit))
            self._marks.append((commit, col, row))

    def highlight(self, predicate: CommitPredicate) -> None:
        if not self.show_scatter:
            return
        self.console.print(self.render_scatter(predicate))

    def render_scatter(self, predicate: Optional[CommitPredicate] = None) -> Panel:
        """Build the scatter panel without printing it."""
        if not self._marks:
            return Panel(Text("No commits to plot", style="dim"), title="Commits by time of day")

        grid: Dict[Tuple[int, int], bool] = {}
        for commit, col, row in self._marks:
            selected = predicate(commit) if predicate else False
            grid[(col, row)] = grid.get((col, row), False) or selected

        labels = self._y_labels()
        body = Text()
        for row in range(self.rows):
            body.append(f"{labels.get(row, ''):>5} │", style="dim")
            for col in range(self.columns):
                if (col, row) not in grid:
                    body.append(" ")
                elif grid[(col, row)]:
                    body.append(SELECTED_MARK, style="bold orange1")
                else:
                    body.append(PLAIN_MARK, style="steel_blue")
            body.append("\n")

        start, end = self.mapper.x_scale.require_domain()
        left, right = f"{start:%Y-%m-%d}", f"{end:%Y-%m-%d}"
        gap = max(1, self.columns - len(left) - len(right))
        body.append("      └" + "─" * self.columns + "\n", style="dim")
        body.append(f"       {left}{' ' * gap}{right}", style="dim")

        return Panel(body, title="Commits by time of day", expand=False)

    def _y_labels(self) -> Dict[int, str]:
        labels = {}
        layout = self.mapper.layout
        for hour in range(0, HOURS_PER_DAY + 1, 6):
            y = self.mapper.y_of(hour)
            row = round((y - layout.usable_top) / layout.usable_height * (self.rows - 1))
            labels[row] = self.mapper.tick_label(hour)
        return labels

    def draw_summary(self, report: AggregateReport) -> None:
        table = Table(title="Summary", show_header=True, header_style="bold magenta")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right", style="green")
        for label, value in report.metrics().items():
            table.add_row(label, value)
        self.console.print(table)

    def set_selection_count_text(self, count: int) -> None:
        if count == 0:
            self.console.print("[dim]No commits selected[/dim]")
        else:
            noun = "commit" if count == 1 else "commits"
            self.console.print(f"[bold]{count}[/bold] {noun} selected")

    def set_language_breakdown(self, report: AggregateReport) -> None:
        breakdown = report.language_breakdown
        if breakdown is None:
            self.console.print("[dim]Language breakdown: N/A[/dim]")
            return
        if not breakdown:
            self.console.print("[dim]Language breakdown: no lines selected[/dim]")
            return

        table = Table(title="Lines by language", show_header=True, header_style="bold magenta")
        table.add_column("Language", style="cyan")
        table.add_column("Lines", justify="right", style="yellow")
        table.add_column("Share", justify="right", style="green")
        for language, share in breakdown.items():
            table.add_row(language, str(share.count), f"{share.percent:.1f}%")
        self.console.print(table)

    def show_commit(self, commit: Commit) -> None:
        """Print the details of one commit."""
        table = Table(show_header=False, box=None)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        for label, value in commit.describe().items():
            table.add_row(label.capitalize(), value)
        self.console.print(Panel(table, title=f"Commit {commit.id}", expand=False))
