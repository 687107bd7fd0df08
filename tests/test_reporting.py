"""
Tests for rank display text, the progress tracker and result export.
"""

import csv
import io
import json

from rich.console import Console

from serp.core.types import ERROR, NOT_FOUND, KeywordOutcome, ResultEntry
from tracker.models import KeywordStatus, KeywordUpdate
from tracker.progress_tracker import ProgressTracker, format_rank
from tracker.result_writer import ResultWriter


def test_format_rank():
    assert format_rank(KeywordOutcome("a", ERROR)) == ("Error", "")
    assert format_rank(KeywordOutcome("a", NOT_FOUND)) == ("No rank", "")
    assert format_rank(KeywordOutcome("a", 3, top10_count=1)) == ("#3", "")
    assert format_rank(KeywordOutcome("a", 3, top10_count=2)) == ("#3", "2 in top 10")


def test_progress_tracker_counts_retries():
    console = Console(file=io.StringIO(), width=120)
    tracker = ProgressTracker("megagong.net", console=console)
    tracker.start(2)

    for update in [
        KeywordUpdate("A", KeywordStatus.LOADING, "loading"),
        KeywordUpdate("B", KeywordStatus.LOADING, "loading"),
        KeywordUpdate("A", KeywordStatus.ERRORED, ERROR, attempt=1),
        KeywordUpdate("B", KeywordStatus.RESOLVED, 4, attempt=1),
        KeywordUpdate("A", KeywordStatus.LOADING, "loading", attempt=1, round=1),
        KeywordUpdate("A", KeywordStatus.RESOLVED, 7, attempt=2, round=1),
    ]:
        tracker.update(update)

    assert tracker.resolved_count == 2
    assert tracker.error_count == 0
    assert tracker.retry_count == 1
    task = tracker.progress.tasks[0]
    assert task.completed == 2


def test_completion_summary_lists_outcomes():
    output = io.StringIO()
    tracker = ProgressTracker("megagong.net", console=Console(file=output, width=200))

    tracker.show_completion_summary(
        {
            "A": KeywordOutcome("A", 2, "https://megagong.net/a", top10_count=3),
            "B": KeywordOutcome("B", NOT_FOUND),
        }
    )

    text = output.getvalue()
    assert "#2" in text
    assert "3 in top 10" in text
    assert "No rank" in text


def test_result_writer(tmp_path):
    outcomes = {
        "A": KeywordOutcome(
            "A",
            1,
            "https://megagong.net/",
            top10_count=1,
            entries=[ResultEntry("Megagong", "https://megagong.net/", 1)],
            pages_fetched=1,
        ),
        "B": KeywordOutcome.error("B", "blocked"),
    }

    ResultWriter(tmp_path / "out").write(outcomes)

    lines = (tmp_path / "out" / "results.jsonl").read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert records[0]["rank"] == 1
    assert records[0]["entries"] == [
        {"title": "Megagong", "url": "https://megagong.net/", "rank": 1}
    ]
    assert records[1]["rank"] == "error"
    assert records[1]["error_message"] == "blocked"

    with open(tmp_path / "out" / "results.csv", encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert [row["keyword"] for row in rows] == ["A", "B"]
    assert rows[1]["rank"] == "error"
