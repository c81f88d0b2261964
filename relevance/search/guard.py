"""Debounced, generation-guarded search for interactively typed queries.

Each search box owns a :class:`DebouncedSearch`. Keystrokes restart a quiet
timer; when it fires the query is evaluated under a fresh generation number.
Evaluations may complete in any order. Only the result whose generation is
still current gets published; anything older is dropped.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

from ..events import SearchEvent
from ..search_config import search_settings
from ..search_match import normalize_search_value


logger = logging.getLogger("SearchGuard")

Evaluator = Callable[[str], Union[Sequence[Any], Awaitable[Sequence[Any]]]]
ResolvedCallback = Callable[[list, int], None]
EventCallback = Callable[[SearchEvent], None]


class SearchState(Enum):
    IDLE = "idle"
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    RESOLVED = "resolved"


@dataclass
class SearchSession:
    """Generation bookkeeping for one search box."""

    # Last generation handed out.
    counter: int = 0
    # Generation allowed to publish; None once superseded or cleared.
    current: Optional[int] = None
    published: int = 0

    def next_generation(self) -> int:
        self.counter += 1
        self.current = self.counter
        return self.counter

    def invalidate(self) -> None:
        self.current = None

    def is_current(self, generation: int) -> bool:
        return self.current is not None and self.current == generation

    def mark_published(self, generation: int) -> None:
        self.published = generation


class DebouncedSearch:
    """Debounce keystrokes and publish only the newest evaluation.

    Args:
        evaluate: Called with the normalized query. May return a list or an
            awaitable resolving to one.
        on_resolved: Called with ``(results, generation)`` on publish.
        delay_s: Quiet period before evaluating. Defaults to settings.
        on_event: Receives notices (failures, clears).
        on_busy_change: Receives the busy flag whenever it flips.
    """

    failure_message = "Failed to search."

    def __init__(
        self,
        evaluate: Evaluator,
        on_resolved: Optional[ResolvedCallback] = None,
        *,
        delay_s: Optional[float] = None,
        on_event: Optional[EventCallback] = None,
        on_busy_change: Optional[Callable[[bool], None]] = None,
        session: Optional[SearchSession] = None,
    ):
        self.evaluate = evaluate
        self.on_resolved = on_resolved
        self.on_event = on_event
        self.on_busy_change = on_busy_change
        self.delay_s = (
            search_settings.debounce_ms / 1000.0 if delay_s is None else float(delay_s)
        )
        self.session = session or SearchSession()

        self.state = SearchState.IDLE
        self.busy = False
        self.query = ""
        self.results: list = []

        self._timer: Optional[asyncio.TimerHandle] = None
        self._inflight: set[asyncio.Task] = set()

    def update(self, raw_query: str) -> None:
        """Feed the latest text of the search box. Requires a running loop."""
        self.query = raw_query or ""
        if not self.query.strip():
            self.clear()
            return

        # A new keystroke supersedes whatever is still in flight.
        self.session.invalidate()
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay_s, self._dispatch, self.query)
        self.state = SearchState.PENDING
        self._set_busy(True)

    def clear(self) -> None:
        """Return to idle without waiting for in-flight evaluations."""
        self._cancel_timer()
        self.session.invalidate()
        self.query = ""
        self.results = []
        self.state = SearchState.IDLE
        self._set_busy(False)
        self._emit(SearchEvent(type="search_cleared"))

    def reset(self) -> None:
        """Drop the session entirely (e.g. on logout)."""
        self.clear()
        self.session = SearchSession()

    async def drain(self) -> None:
        """Wait until no timer is pending and nothing is in flight."""
        while self._timer is not None or self._inflight:
            if self._inflight:
                await asyncio.gather(*list(self._inflight), return_exceptions=True)
            else:
                await asyncio.sleep(max(self.delay_s / 4.0, 0.001))

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set_busy(self, busy: bool) -> None:
        if self.busy == busy:
            return
        self.busy = busy
        self._notify(self.on_busy_change, busy)

    def _emit(self, event: SearchEvent) -> None:
        self._notify(self.on_event, event)

    def _notify(self, callback: Optional[Callable[..., Any]], *args: Any) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.warning(f"Search callback {getattr(callback, '__name__', callback)!r} failed: {e}")

    def _dispatch(self, raw_query: str) -> None:
        self._timer = None
        session = self.session
        generation = session.next_generation()
        self.state = SearchState.IN_FLIGHT
        task = asyncio.ensure_future(
            self._run(session, generation, normalize_search_value(raw_query))
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _run(self, session: SearchSession, generation: int, query: str) -> None:
        error: Optional[Exception] = None
        try:
            outcome = self.evaluate(query)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            results = list(outcome or [])
        except Exception as e:
            logger.warning(f"Search evaluation failed (generation {generation}): {e}")
            results = []
            error = e
        self._resolve(session, generation, results, error)

    def _resolve(
        self,
        session: SearchSession,
        generation: int,
        results: list,
        error: Optional[Exception],
    ) -> bool:
        if session is not self.session or not session.is_current(generation):
            logger.debug(f"Discarding stale search result for generation {generation}")
            return False

        session.mark_published(generation)
        self.results = results
        self.state = SearchState.RESOLVED
        self._set_busy(False)
        if error is not None:
            self._emit(
                SearchEvent(
                    type="search_failed",
                    generation=generation,
                    data={"message": self.failure_message, "error": str(error)},
                )
            )
        self._notify(self.on_resolved, results, generation)
        return True


def ranked_evaluator(ranker: Any, records: Callable[[], Sequence[Any]]) -> Callable[[str], list]:
    """Local evaluation: rank a fresh snapshot of ``records()`` for the query."""

    def evaluate(query: str) -> list:
        return ranker.rank(list(records()), query)

    return evaluate
