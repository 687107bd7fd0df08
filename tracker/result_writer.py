"""
Export of a run's final outcomes
"""

import csv
import json
import logging
from pathlib import Path

from serp.core.types import KeywordOutcome

logger = logging.getLogger(__name__)

CSV_FIELDS = [
    "keyword",
    "rank",
    "source_url",
    "top10_count",
    "pages_fetched",
    "error_message",
]


class ResultWriter:
    """Writes outcomes to results.jsonl and results.csv"""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.jsonl_path = self.output_dir / "results.jsonl"
        self.csv_path = self.output_dir / "results.csv"

    def write(self, outcomes: dict[str, KeywordOutcome]) -> None:
        """Write all outcomes, replacing earlier files in the same directory"""
        self.output_dir.mkdir(parents=True, exist_ok=True)

        with open(self.jsonl_path, "w", encoding="utf-8") as f:
            for outcome in outcomes.values():
                json.dump(outcome.to_dict(), f, ensure_ascii=False)
                f.write("\n")

        # Also write CSV for easy viewing in spreadsheets
        with open(self.csv_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            for outcome in outcomes.values():
                writer.writerow(
                    {
                        "keyword": outcome.keyword,
                        "rank": outcome.rank,
                        "source_url": outcome.source_url,
                        "top10_count": outcome.top10_count,
                        "pages_fetched": outcome.pages_fetched,
                        "error_message": outcome.error_message or "",
                    }
                )

        logger.info(f"Wrote {len(outcomes)} outcomes to {self.output_dir}")
