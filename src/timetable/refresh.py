"""Batch refresh driver.

For each group key, in order: wait out the inter-request pause, fetch the
page, parse it, diff it against the cached snapshot, hand any notice to the
notification sink and store the fresh snapshot. Fetches are strictly
sequential to respect the upstream site's rate limit.

A failure for one group (upstream, markup or cache) is logged and recorded
in the BatchReport; the batch moves on and the group's cached snapshot is
left as it was.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Literal, Protocol

from pydantic import BaseModel

from src.timetable.cache import ScheduleCache
from src.timetable.diff import check_today_day_id, diff_schedules
from src.timetable.errors import TimetableError
from src.timetable.logging import get_logger, group_context
from src.timetable.pages.schedule import parse_schedule
from src.timetable.store import SnapshotStore

logger = get_logger(__name__)

NotifySink = Callable[[str, str], Awaitable[None]]


class DocumentSource(Protocol):
    def fetch(self, group_key: str) -> str: ...


async def log_notice(group: str, notice: str) -> None:
    """Default notification sink: just log the notice."""
    logger.info("schedule_change_notice", group=group, notice=notice)


class GroupResult(BaseModel):
    """Outcome of refreshing one group."""

    group: str
    status: Literal["new", "changed", "unchanged", "failed"]
    notice: str | None = None
    error: str | None = None


class BatchReport(BaseModel):
    """Outcome of one batch refresh cycle."""

    results: list[GroupResult] = []

    @property
    def failed(self) -> list[GroupResult]:
        return [r for r in self.results if r.status == "failed"]

    @property
    def notices(self) -> list[GroupResult]:
        return [r for r in self.results if r.notice is not None]

    def counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for r in self.results:
            counts[r.status] = counts.get(r.status, 0) + 1
        return counts


class ScheduleRefresher:
    """Refreshes cached snapshots for a list of groups.

    Only one batch runs at a time; a second caller waits for the running
    batch to finish.
    """

    def __init__(
        self,
        source: DocumentSource,
        cache: ScheduleCache,
        notify: NotifySink = log_notice,
        *,
        request_delay: float = 5.0,
        store: SnapshotStore | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize ScheduleRefresher.

        Args:
            source: Blocking document fetcher (run in a worker thread).
            cache: Snapshot cache read before and written after each diff.
            notify: Async sink receiving (group, notice) for every change.
            request_delay: Minimum seconds between the starts of two fetches.
            store: Optional in-process snapshot view updated after each write.
            sleep: Awaitable sleep, injectable for tests.
            clock: Monotonic clock, injectable for tests.
        """
        self.source = source
        self.cache = cache
        self.notify = notify
        self.request_delay = request_delay
        self.store = store
        self._sleep = sleep
        self._clock = clock
        self._last_fetch_started: float | None = None
        self._batch_lock = asyncio.Lock()

    async def _pause(self) -> None:
        if self._last_fetch_started is not None:
            wait = self.request_delay - (self._clock() - self._last_fetch_started)
            if wait > 0:
                logger.debug("request_pause", seconds=round(wait, 3))
                await self._sleep(wait)
        self._last_fetch_started = self._clock()

    async def refresh_group(self, group: str, today_day_id: int) -> GroupResult:
        """Fetch, parse, diff and store one group's snapshot."""
        with group_context(group):
            return await self._refresh_group(group, today_day_id)

    async def _refresh_group(self, group: str, today_day_id: int) -> GroupResult:
        await self._pause()
        try:
            html = await asyncio.to_thread(self.source.fetch, group)
            fresh = parse_schedule(html, today_day_id, group_key=group)
            previous = await self.cache.get(group)
        except TimetableError as e:
            logger.error("group_refresh_failed", error=str(e), type=type(e).__name__)
            return GroupResult(group=group, status="failed", error=str(e))

        notice = None
        if previous is None:
            status = "new"
        else:
            notice = diff_schedules(fresh, previous, today_day_id)
            status = "changed" if notice is not None else "unchanged"

        if notice is not None:
            try:
                await self.notify(group, notice)
            except Exception as e:
                logger.exception("notice_delivery_failed", error=str(e))

        try:
            await self.cache.put(group, fresh)
        except TimetableError as e:
            logger.error("group_refresh_failed", error=str(e), type=type(e).__name__)
            return GroupResult(group=group, status="failed", notice=notice, error=str(e))

        if self.store is not None:
            self.store.publish(group, fresh)

        logger.info("group_refreshed", status=status)
        return GroupResult(group=group, status=status, notice=notice)

    async def refresh_batch(
        self, groups: Sequence[str], today_day_id: int
    ) -> BatchReport:
        """Refresh every group in order.

        Raises:
            OutOfRangeDayIndexError: If today_day_id is outside 0..5.
        """
        check_today_day_id(today_day_id)
        async with self._batch_lock:
            logger.info("batch_started", groups=len(groups), today_day_id=today_day_id)
            report = BatchReport()
            for group in groups:
                report.results.append(await self.refresh_group(group, today_day_id))
            logger.info("batch_finished", **report.counts())
            return report

    async def run_forever(
        self,
        groups: Sequence[str],
        today_day_id: int,
        interval: float,
        *,
        cycles: int | None = None,
    ) -> None:
        """Run batch refreshes on a fixed cadence.

        A cycle starts `interval` seconds after the previous one started, or
        right after it finished when the batch took longer than that.

        Args:
            groups: Group keys refreshed every cycle.
            today_day_id: Day slot treated as today.
            interval: Seconds between cycle starts.
            cycles: Stop after this many cycles (None = forever).
        """
        check_today_day_id(today_day_id)
        done = 0
        while cycles is None or done < cycles:
            started = self._clock()
            await self.refresh_batch(groups, today_day_id)
            done += 1
            if cycles is not None and done >= cycles:
                break
            remaining = interval - (self._clock() - started)
            logger.info("next_cycle_scheduled", in_seconds=round(max(remaining, 0.0), 1))
            if remaining > 0:
                await self._sleep(remaining)
