"""
Dashboard state and polling
===========================

`DashboardController` owns the one piece of mutable state in the app: the
current snapshot plus the selected filter criteria. Both are frozen values
and are only ever replaced whole, so a reader sees either the old snapshot
or the new one.

Overlapping fetches are allowed. Each fetch gets a request id from
`begin_request()` and only the response to the most recently issued id is
applied; anything older is dropped.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from metro_core.errors import LoadError
from metro_core.filters import FilterCriteria, filter_records
from metro_core.metrics_overview import Summary, compute_summary
from metro_core.models import LoadedData, ProjectRecord


logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 300.0


@dataclass(frozen=True)
class DashboardSnapshot:
    records: Tuple[ProjectRecord, ...]
    last_updated: Optional[datetime]
    loaded_at: datetime
    request_id: int
    source: str = ""

    def same_data(self, data: LoadedData) -> bool:
        return self.records == tuple(data.records) and self.last_updated == data.last_updated


@dataclass(frozen=True)
class DashboardView:
    criteria: FilterCriteria
    records: List[ProjectRecord]
    summary: Summary
    totals: Summary
    last_updated: Optional[datetime] = None
    loaded_at: Optional[datetime] = None


@dataclass
class RefreshOutcome:
    request_id: int
    applied: bool = False
    error: Optional[LoadError] = None


class DashboardController:
    def __init__(
        self,
        source,
        *,
        on_render: Optional[Callable[[DashboardView], None]] = None,
        on_error: Optional[Callable[[LoadError], None]] = None,
    ) -> None:
        self.source = source
        self.on_render = on_render
        self.on_error = on_error
        self.criteria = FilterCriteria()
        self.last_error: Optional[LoadError] = None
        self._snapshot: Optional[DashboardSnapshot] = None
        self._ids = itertools.count(1)
        self._latest_request = 0
        self.checked_at: Optional[datetime] = None
        self.attempted_at: Optional[datetime] = None

    @property
    def snapshot(self) -> Optional[DashboardSnapshot]:
        return self._snapshot

    @property
    def records(self) -> Tuple[ProjectRecord, ...]:
        snap = self._snapshot
        return snap.records if snap is not None else ()

    def begin_request(self) -> int:
        self.attempted_at = datetime.now(timezone.utc)
        self._latest_request = next(self._ids)
        return self._latest_request

    def is_current(self, request_id: int) -> bool:
        return request_id == self._latest_request

    def apply(self, request_id: int, data: LoadedData) -> bool:
        """Install `data` if it answers the latest request and differs from the current snapshot."""
        if not self.is_current(request_id):
            logger.warning("Dropping stale response #%d (latest is #%d)", request_id, self._latest_request)
            return False
        self.last_error = None
        self.checked_at = datetime.now(timezone.utc)
        current = self._snapshot
        if current is not None and current.same_data(data):
            logger.debug("Response #%d unchanged; skipping render", request_id)
            return False
        self._snapshot = DashboardSnapshot(
            records=tuple(data.records),
            last_updated=data.last_updated,
            loaded_at=self.checked_at,
            request_id=request_id,
            source=data.source,
        )
        logger.info("Loaded %d projects from %s (request #%d)", len(data.records), data.source or "source", request_id)
        self._render()
        return True

    def fail(self, request_id: int, error: LoadError) -> None:
        """Record a failed load; the current snapshot stays in place."""
        logger.error("Load #%d failed: %s (%s)", request_id, error, error.kind)
        if not self.is_current(request_id):
            return
        self.last_error = error
        if self.on_error is not None:
            self.on_error(error)

    def refresh(self) -> RefreshOutcome:
        request_id = self.begin_request()
        try:
            data = self.source.load()
        except LoadError as exc:
            self.fail(request_id, exc)
            return RefreshOutcome(request_id=request_id, error=exc)
        return RefreshOutcome(request_id=request_id, applied=self.apply(request_id, data))

    async def arefresh(self) -> RefreshOutcome:
        request_id = self.begin_request()
        try:
            data = await self.source.aload()
        except LoadError as exc:
            self.fail(request_id, exc)
            return RefreshOutcome(request_id=request_id, error=exc)
        return RefreshOutcome(request_id=request_id, applied=self.apply(request_id, data))

    def set_criteria(self, criteria: FilterCriteria) -> DashboardView:
        self.criteria = criteria
        return self._render()

    def view(self, criteria: Optional[FilterCriteria] = None) -> DashboardView:
        snap = self._snapshot
        records = snap.records if snap is not None else ()
        criteria = criteria or self.criteria
        filtered = filter_records(records, criteria)
        return DashboardView(
            criteria=criteria,
            records=filtered,
            summary=compute_summary(filtered),
            totals=compute_summary(records),
            last_updated=snap.last_updated if snap is not None else None,
            loaded_at=snap.loaded_at if snap is not None else None,
        )

    def _render(self) -> DashboardView:
        view = self.view()
        if self.on_render is not None:
            self.on_render(view)
        return view


async def poll(
    controller: DashboardController,
    interval: float = POLL_INTERVAL_SECONDS,
    *,
    iterations: Optional[int] = None,
    start_delay: float = 0.0,
) -> None:
    """Refresh `controller` every `interval` seconds until cancelled.

    `iterations` bounds the number of refreshes (None = forever). Load
    failures are handled by the controller and do not stop the loop.
    """
    if start_delay:
        await asyncio.sleep(start_delay)
    count = 0
    while True:
        await controller.arefresh()
        count += 1
        if iterations is not None and count >= iterations:
            return
        await asyncio.sleep(interval)
