"""Search input debouncer.

Holds back raw search text until it has been stable for a fixed
quiescence window. There is at most one pending timer per debouncer.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger()

DEFAULT_DELAY_SECONDS = 0.4

CommitCallback = Callable[[str], Awaitable[None] | None]


def _log_commit_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error("Search commit failed", error=str(error), error_type=type(error).__name__)


class Debouncer:
    """Delays a commit callback until input goes quiet.

    Every ``on_input`` call cancels the pending timer and arms a new
    one. The callback runs only when a timer elapses uninterrupted.
    Must be used from within a running event loop.

    Example usage:
        debouncer = Debouncer(session.commit_search, delay=0.4)
        debouncer.on_input("a")
        debouncer.on_input("ab")   # cancels the timer armed for "a"
    """

    def __init__(
        self,
        on_commit: CommitCallback,
        delay: float = DEFAULT_DELAY_SECONDS,
    ) -> None:
        """Initialize debouncer.

        Args:
            on_commit: Called with the settled text. May be async.
            delay: Quiescence window in seconds.
        """
        self.on_commit = on_commit
        self.delay = delay
        self._timer: asyncio.Task | None = None
        self._latest: str | None = None
        self._commits: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """Whether a timer is armed."""
        return self._timer is not None and not self._timer.done()

    def on_input(self, text: str) -> None:
        """Record new input and restart the timer.

        Args:
            text: Raw input text.
        """
        self.cancel()
        self._latest = text
        self._timer = asyncio.get_running_loop().create_task(self._wait(text))
        self._timer.add_done_callback(_log_commit_failure)

    async def _wait(self, text: str) -> None:
        await asyncio.sleep(self.delay)
        # Detach before committing so new input cannot cancel a commit in progress
        self._timer = None
        task = asyncio.current_task()
        if task is not None:
            self._commits.add(task)
            task.add_done_callback(self._commits.discard)
        await self._commit(text)

    async def _commit(self, text: str) -> None:
        logger.debug("Search input settled", search=text)
        result = self.on_commit(text)
        if inspect.isawaitable(result):
            await result

    async def flush(self) -> None:
        """Commit pending input immediately."""
        if not self.pending or self._latest is None:
            return
        text = self._latest
        self.cancel()
        await self._commit(text)

    def cancel(self) -> None:
        """Drop the pending timer, if any."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def wait_idle(self) -> None:
        """Wait until no timer is armed and no commit is running."""
        while self.pending or self._commits:
            pending = [t for t in (self._timer, *self._commits) if t is not None]
            await asyncio.gather(*pending, return_exceptions=True)
