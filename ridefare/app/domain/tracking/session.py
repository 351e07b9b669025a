"""
Per-trip GPS tracking session.

A session samples a location source at a fixed interval and appends each
sample to the location store until it is stopped. Each session owns its
cancellation event and background task; there is no shared registry, so
the caller keeps the session for as long as the trip runs.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ridefare.app.core.config import settings
from ridefare.app.domain.tracking.location_store import LocationSample, append_point

logger = logging.getLogger(__name__)

LocationSource = Callable[[], Awaitable[LocationSample]]

STOP_TIMEOUT_SECONDS = 10.0


class TripTrackingSession:

    def __init__(
        self,
        ride_id: int,
        driver_id: Optional[int],
        location_source: LocationSource,
        session_factory,
        interval_seconds: float,
    ):
        self.ride_id = ride_id
        self.driver_id = driver_id
        self.location_source = location_source
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.points_recorded = 0
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def is_tracking(self) -> bool:
        return self._task is not None and not self._task.done() and not self._stop_event.is_set()

    def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._run(), name=f"trip-tracking-{self.ride_id}")
        logger.info("GPS tracking started for ride %s every %ss", self.ride_id, self.interval_seconds)

    async def stop(self, timeout_seconds: float = STOP_TIMEOUT_SECONDS) -> int:
        """
        Stop sampling and wait for the loop to exit. Returns the points recorded.

        A loop still stuck in the location source after `timeout_seconds` is cancelled.
        """
        self._stop_event.set()
        if self._task is not None and not self._task.done():
            try:
                await asyncio.wait_for(self._task, timeout=timeout_seconds)
            except asyncio.TimeoutError:
                logger.warning("GPS tracking for ride %s did not stop in %ss, cancelled", self.ride_id, timeout_seconds)
        logger.info("GPS tracking stopped for ride %s, %d points recorded", self.ride_id, self.points_recorded)
        return self.points_recorded

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            await self._record_sample()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                continue

    async def _record_sample(self) -> None:
        try:
            sample = await self.location_source()
            async with self.session_factory() as db:
                await append_point(db, self.ride_id, self.driver_id, sample)
        except Exception:
            # A lost fix must not end the trip's tracking
            logger.exception("Failed to record GPS sample for ride %s", self.ride_id)
            return
        self.points_recorded += 1


def start_tracking(
    ride_id: int,
    driver_id: Optional[int],
    location_source: LocationSource,
    session_factory,
    interval_seconds: Optional[float] = None,
) -> TripTrackingSession:
    """
    Start sampling GPS for a ride. Must be called from a running event loop.

    Args:
        ride_id: Ride the samples belong to
        driver_id: Driver reporting the samples
        location_source: Coroutine function returning the current LocationSample
        session_factory: Async session factory (e.g. AsyncSessionLocal)
        interval_seconds: Sampling period, defaults to the configured interval

    Returns:
        The running TripTrackingSession
    """
    session = TripTrackingSession(
        ride_id=ride_id,
        driver_id=driver_id,
        location_source=location_source,
        session_factory=session_factory,
        interval_seconds=(
            settings.location_sample_interval_seconds if interval_seconds is None else interval_seconds
        ),
    )
    session.start()
    return session
