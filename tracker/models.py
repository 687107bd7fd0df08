"""
Data models for rank tracking runs
"""

import threading
from dataclasses import dataclass, field
from enum import Enum

from serp.core.types import KeywordOutcome


class KeywordStatus(Enum):
    """Per-keyword status within one run"""

    PENDING = "pending"  # Not yet attempted
    LOADING = "loading"  # Request in flight
    RESOLVED = "resolved"  # Rank or "not found"
    ERRORED = "errored"  # Outcome is "error", eligible for retry


@dataclass
class KeywordUpdate:
    """State transition reported to observers"""

    keyword: str
    status: KeywordStatus
    rank: int | str  # "loading" while in flight
    source_url: str = ""
    top10_count: int = 0
    attempt: int = 0  # Completed attempts for this keyword so far
    round: int = 0  # 0 for the first pass, 1.. for retry rounds

    def to_dict(self) -> dict:
        return {
            "keyword": self.keyword,
            "status": self.status.value,
            "rank": self.rank,
            "source_url": self.source_url,
            "top10_count": self.top10_count,
            "attempt": self.attempt,
            "round": self.round,
        }


@dataclass
class RunState:
    """Keyword status map owned by a single run"""

    statuses: dict[str, KeywordStatus] = field(default_factory=dict)
    attempts: dict[str, int] = field(default_factory=dict)
    outcomes: dict[str, KeywordOutcome] = field(default_factory=dict)
    round: int = 0

    def reset(self, keywords: list[str]) -> None:
        self.statuses = {kw: KeywordStatus.PENDING for kw in keywords}
        self.attempts = {kw: 0 for kw in keywords}
        self.outcomes = {}
        self.round = 0

    def failed(self) -> list[str]:
        """Keywords currently in the errored state, in insertion order"""
        return [
            kw for kw, status in self.statuses.items()
            if status == KeywordStatus.ERRORED
        ]

    def to_dict(self) -> dict:
        return {
            "round": self.round,
            "keywords": {
                kw: {
                    "status": status.value,
                    "attempts": self.attempts.get(kw, 0),
                    "outcome": (
                        self.outcomes[kw].to_dict() if kw in self.outcomes else None
                    ),
                }
                for kw, status in self.statuses.items()
            },
        }


class CancellationToken:
    """Thread-safe cancel flag, honored at keyword boundaries"""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
