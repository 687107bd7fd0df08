"""
Rich-based progress tracking
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from serp.core.types import ERROR, NOT_FOUND, KeywordOutcome
from tracker.models import KeywordStatus, KeywordUpdate


def format_rank(outcome: KeywordOutcome) -> tuple[str, str]:
    """Display text for an outcome: (rank text, top-10 detail)"""
    if outcome.rank == ERROR:
        return "Error", ""
    if outcome.rank == NOT_FOUND:
        return "No rank", ""
    # A single top-10 hit is the rank itself, so only repeats are worth noting
    detail = f"{outcome.top10_count} in top 10" if outcome.top10_count > 1 else ""
    return f"#{outcome.rank}", detail


class ProgressTracker:
    """Rich progress display driven by keyword updates"""

    def __init__(self, target_domain: str, console: Console | None = None):
        self.console = console or Console()
        self.target_domain = target_domain
        self.resolved_count = 0
        self.error_count = 0
        self.retry_count = 0

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TextColumn("•"),
            TimeElapsedColumn(),
            console=self.console,
        )

        self.task_id = None

    def start(self, total: int):
        """Initialize progress bar"""
        self.task_id = self.progress.add_task(
            f"Ranking {self.target_domain}", total=total
        )

    def update(self, update: KeywordUpdate):
        """Orchestrator on_update callback"""
        if self.task_id is None:
            raise RuntimeError("ProgressTracker not started. Call start() first.")

        if update.status == KeywordStatus.LOADING:
            if update.round > 0:
                self.retry_count += 1
            self.progress.update(
                self.task_id,
                description=f"Ranking {self.target_domain}: {update.keyword}",
            )
            return

        if update.status == KeywordStatus.PENDING:
            return

        resolved = update.status == KeywordStatus.RESOLVED
        if update.round == 0:
            self.progress.update(self.task_id, advance=1)
            if resolved:
                self.resolved_count += 1
            else:
                self.error_count += 1
        elif resolved:
            # Retried keyword recovered
            self.error_count -= 1
            self.resolved_count += 1

    def show_completion_summary(self, outcomes: dict[str, KeywordOutcome]):
        """Show summary table after completion"""
        table = Table(title=f"Rank Summary: {self.target_domain}")
        table.add_column("Keyword", style="cyan")
        table.add_column("Rank", style="magenta")
        table.add_column("Top 10", style="green")
        table.add_column("Source", style="dim", overflow="fold")

        for keyword, outcome in outcomes.items():
            rank_text, detail = format_rank(outcome)
            table.add_row(keyword, rank_text, detail, outcome.source_url)

        self.console.print(table)
        self.console.print(
            f"Resolved: {self.resolved_count}  "
            f"Errors: {self.error_count}  "
            f"Retries: {self.retry_count}"
        )
