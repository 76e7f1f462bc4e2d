"""
Activity log side channel.

Use cases publish UserActivity entries after their own transaction has
committed. A background worker drains the queue into the activity store,
retrying each entry a few times. Failures are logged and counted; they are
never raised to the publisher.
"""

import asyncio
from dataclasses import asdict, dataclass
from typing import Any

from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt, wait_exponential

from mro.config import get_logger, get_settings
from mro.core.entities.activity import ActivityAction, ResourceType, UserActivity
from mro.core.entities.tenant import TenantContext
from mro.core.interfaces.activity_store import IActivityStore

logger = get_logger(__name__)


@dataclass
class DispatcherStats:
    """Counters for the activity side channel."""

    published: int = 0
    written: int = 0
    retried: int = 0
    failed: int = 0
    dropped: int = 0


@dataclass
class RequestOrigin:
    """Where a request came from, recorded alongside its activity."""

    ip_address: str | None = None
    user_agent: str | None = None


def build_activity(
    tenant: TenantContext,
    action: ActivityAction,
    resource_type: ResourceType,
    resource_id: str | None,
    resource_title: str,
    metadata: dict[str, Any] | None = None,
    origin: RequestOrigin | None = None,
) -> UserActivity:
    """Build an activity entry for the acting user and company."""
    origin = origin or RequestOrigin()
    return UserActivity(
        company_id=tenant.company_id,
        user_id=tenant.user_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        resource_title=resource_title,
        metadata=metadata,
        ip_address=origin.ip_address,
        user_agent=origin.user_agent,
    )


class ActivityDispatcher:
    """In-process queue that writes activity entries in the background."""

    def __init__(
        self,
        activity_store: IActivityStore | None = None,
        queue_size: int = 1000,
        max_attempts: int = 3,
        retry_delay: float = 0.5,
        enabled: bool = True,
    ):
        self._activity_store = activity_store
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.enabled = enabled
        self._queue: asyncio.Queue[UserActivity] = asyncio.Queue(maxsize=queue_size)
        self._worker: asyncio.Task | None = None
        self._stats = DispatcherStats()

    async def _get_activity_store(self) -> IActivityStore:
        if self._activity_store is None:
            from mro.infrastructure.storage.sqlite import get_activity_store

            self._activity_store = await get_activity_store()
        return self._activity_store

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def publish(self, activity: UserActivity) -> bool:
        """Queue an activity. Returns False if it was dropped."""
        if not self.enabled:
            return False
        try:
            self._queue.put_nowait(activity)
        except asyncio.QueueFull:
            self._stats.dropped += 1
            logger.warning(
                "activity_dropped",
                action=activity.action.value,
                resource_id=activity.resource_id,
                queue_size=self._queue.maxsize,
            )
            return False
        self._stats.published += 1
        return True

    async def start(self) -> None:
        """Start the background worker."""
        if self.running:
            return
        self._worker = asyncio.create_task(self._run(), name="activity-dispatcher")
        logger.info("activity_dispatcher_started", queue_size=self._queue.maxsize)

    async def stop(self) -> None:
        """Flush pending entries and stop the worker."""
        await self.drain()
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None
        logger.info("activity_dispatcher_stopped", **self.stats())

    async def drain(self) -> None:
        """Wait until every queued entry has been written or given up on."""
        if self.running:
            await self._queue.join()
            return
        while not self._queue.empty():
            activity = self._queue.get_nowait()
            try:
                await self._deliver(activity)
            finally:
                self._queue.task_done()

    async def _run(self) -> None:
        while True:
            activity = await self._queue.get()
            try:
                await self._deliver(activity)
            finally:
                self._queue.task_done()

    async def _deliver(self, activity: UserActivity) -> bool:
        store = await self._get_activity_store()

        def log_retry(retry_state: RetryCallState) -> None:
            self._stats.retried += 1
            logger.warning(
                "activity_log_retry",
                action=activity.action.value,
                attempt=retry_state.attempt_number,
                error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
            )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.retry_delay, max=self.retry_delay * 4),
            before_sleep=log_retry,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    await store.add(activity)
        # Worker boundary: nothing raised by the store may stop the queue
        except Exception as e:
            self._stats.failed += 1
            logger.error(
                "activity_log_failed",
                action=activity.action.value,
                company_id=activity.company_id,
                resource_id=activity.resource_id,
                attempts=self.max_attempts,
                error=str(e),
            )
            return False

        self._stats.written += 1
        return True

    def stats(self) -> dict:
        """Counter snapshot plus current queue depth."""
        return {**asdict(self._stats), "pending": self.pending, "running": self.running}


_dispatcher: ActivityDispatcher | None = None


def get_activity_dispatcher() -> ActivityDispatcher:
    """Get or create the process-wide dispatcher from settings."""
    global _dispatcher
    if _dispatcher is None:
        settings = get_settings().activity
        _dispatcher = ActivityDispatcher(
            queue_size=settings.queue_size,
            max_attempts=settings.max_attempts,
            retry_delay=settings.retry_delay,
            enabled=settings.enabled,
        )
    return _dispatcher


def reset_activity_dispatcher() -> None:
    """Forget the global dispatcher (tests)."""
    global _dispatcher
    _dispatcher = None
