"""
Sequential rank orchestrator with bounded retry rounds
"""

import asyncio
import inspect
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Sequence

from serp.core.types import LOADING, KeywordOutcome
from serp.resolver import RankResolver
from tracker.events import UpdateChannel
from tracker.models import CancellationToken, KeywordStatus, KeywordUpdate, RunState

logger = logging.getLogger(__name__)

DEFAULT_RETRY_BUDGET = 5
DEFAULT_COURTESY_DELAY = 1.0

UpdateCallback = Callable[[KeywordUpdate], Any]


def validate_keywords(keywords: Sequence[str]) -> list[str]:
    """Return keywords as a list, rejecting empty, blank or duplicate entries"""
    keywords = list(keywords)
    if not keywords:
        raise ValueError("keywords must not be empty")

    seen = set()
    for kw in keywords:
        if not isinstance(kw, str) or not kw.strip():
            raise ValueError(f"Invalid keyword: {kw!r}")
        if kw in seen:
            raise ValueError(f"Duplicate keyword: {kw!r}")
        seen.add(kw)
    return keywords


class RetryingOrchestrator:
    """Resolves keywords one at a time, then re-drives failures"""

    def __init__(
        self,
        resolver: RankResolver,
        courtesy_delay: float = DEFAULT_COURTESY_DELAY,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.resolver = resolver
        self.courtesy_delay = courtesy_delay
        self._sleep = sleep

    async def run(
        self,
        keywords: Sequence[str],
        target_domain: str,
        retry_budget: int = DEFAULT_RETRY_BUDGET,
        on_update: UpdateCallback | None = None,
        cancel_token: CancellationToken | None = None,
        state: RunState | None = None,
    ) -> dict[str, KeywordOutcome]:
        """
        Resolve every keyword and return its latest outcome.

        Keywords are processed strictly in order with a courtesy delay after
        each request. Keywords whose outcome is "error" are retried in
        rounds, at most retry_budget rounds. Pass a RunState to observe the
        run's keyword statuses; each call resets it.
        """
        keywords = validate_keywords(keywords)
        if not target_domain:
            raise ValueError("target_domain must not be empty")
        if retry_budget < 0:
            raise ValueError(f"retry_budget must be >= 0, got {retry_budget}")

        if state is None:
            state = RunState()
        state.reset(keywords)

        if cancel_token is not None and cancel_token.cancelled:
            logger.info("Run cancelled before start")
            return {}

        logger.info(
            f"Starting rank run: {len(keywords)} keywords, "
            f"target '{target_domain}', retry budget {retry_budget}"
        )

        # Everything shows as loading before the first request goes out
        for kw in keywords:
            await self._mark_loading(state, kw, on_update)

        failed = await self._run_pass(
            state, keywords, target_domain, on_update, cancel_token,
            mark_loading=False,
        )

        while failed and retry_budget > 0:
            if cancel_token is not None and cancel_token.cancelled:
                break
            state.round += 1
            logger.info(
                f"Retry round {state.round}: {len(failed)} keywords "
                f"({retry_budget} rounds left)"
            )
            failed = await self._run_pass(
                state, failed, target_domain, on_update, cancel_token,
                mark_loading=True,
            )
            retry_budget -= 1

        if cancel_token is not None and cancel_token.cancelled:
            await self._revert_unattempted(state, on_update)

        for kw in failed:
            logger.warning(
                f"Keyword '{kw}' still failing after {state.attempts[kw]} attempts"
            )

        outcomes = {kw: state.outcomes[kw] for kw in keywords if kw in state.outcomes}
        logger.info(
            f"Rank run finished: {len(outcomes)} outcomes, "
            f"{sum(1 for o in outcomes.values() if o.is_error)} errors"
        )
        return outcomes

    async def stream(
        self, keywords: Sequence[str], target_domain: str, **kwargs
    ) -> AsyncIterator[KeywordUpdate]:
        """Run and yield each KeywordUpdate as it happens"""
        channel = UpdateChannel()
        task = asyncio.create_task(
            self.run(keywords, target_domain, on_update=channel.publish, **kwargs)
        )
        task.add_done_callback(lambda _: channel.close())
        try:
            async for update in channel:
                yield update
        finally:
            if not task.done():
                task.cancel()
        # Surface validation errors or crashes from the run itself
        await task

    async def _run_pass(
        self,
        state: RunState,
        keywords: list[str],
        target_domain: str,
        on_update: UpdateCallback | None,
        cancel_token: CancellationToken | None,
        mark_loading: bool,
    ) -> list[str]:
        """Resolve keywords in order; return those that errored"""
        failed = []
        for kw in keywords:
            if cancel_token is not None and cancel_token.cancelled:
                logger.info(f"Run cancelled before '{kw}'")
                break

            if mark_loading:
                await self._mark_loading(state, kw, on_update)

            outcome = await self._resolve(kw, target_domain)
            state.attempts[kw] += 1
            state.outcomes[kw] = outcome
            status = KeywordStatus.ERRORED if outcome.is_error else KeywordStatus.RESOLVED
            state.statuses[kw] = status

            await self._notify(
                on_update,
                KeywordUpdate(
                    keyword=kw,
                    status=status,
                    rank=outcome.rank,
                    source_url=outcome.source_url,
                    top10_count=outcome.top10_count,
                    attempt=state.attempts[kw],
                    round=state.round,
                ),
            )

            if outcome.is_error:
                failed.append(kw)

            await self._sleep(self.courtesy_delay)

        return failed

    async def _resolve(self, keyword: str, target_domain: str) -> KeywordOutcome:
        try:
            return await self.resolver.resolve(keyword, target_domain)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Failed to process keyword '{keyword}': {e}", exc_info=True)
            return KeywordOutcome.error(keyword, str(e))

    async def _mark_loading(
        self, state: RunState, keyword: str, on_update: UpdateCallback | None
    ) -> None:
        state.statuses[keyword] = KeywordStatus.LOADING
        await self._notify(
            on_update,
            KeywordUpdate(
                keyword=keyword,
                status=KeywordStatus.LOADING,
                rank=LOADING,
                attempt=state.attempts[keyword],
                round=state.round,
            ),
        )

    async def _revert_unattempted(
        self, state: RunState, on_update: UpdateCallback | None
    ) -> None:
        """After cancellation, put keywords with no completed attempt back to pending"""
        # Retries mark loading right before resolving, so only first-pass
        # keywords can be left loading here
        for kw, status in state.statuses.items():
            if status != KeywordStatus.LOADING:
                continue
            state.statuses[kw] = KeywordStatus.PENDING
            await self._notify(
                on_update,
                KeywordUpdate(
                    keyword=kw, status=KeywordStatus.PENDING, rank="", round=state.round
                ),
            )

    async def _notify(
        self, on_update: UpdateCallback | None, update: KeywordUpdate
    ) -> None:
        if on_update is None:
            return
        result = on_update(update)
        if inspect.isawaitable(result):
            await result
