"""Refresh scheduler: fetch, map and write upstream observations."""
import enum
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from ow_exporter.client import FetchError, UpstreamClient
from ow_exporter.exposition import SelfMetrics
from ow_exporter.mapper import map_pollution, map_weather
from ow_exporter.registry import MetricRegistry

logger = logging.getLogger(__name__)


class CollectorState(str, enum.Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


@dataclass
class RefreshResult:
    """Outcome of one refresh cycle."""
    started_at: float
    duration_s: float = 0.0
    station: Optional[str] = None
    weather_written: int = 0
    pollution_written: int = 0
    pollution_attempted: bool = False
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class Collector:
    """Periodically refreshes the registry from the weather and pollution endpoints.

    The pollution fetch depends on the station id of the weather response, so a
    failed weather fetch ends the cycle early. A failed pollution fetch leaves
    the weather observations of the same cycle in place.
    """

    def __init__(
        self,
        registry: MetricRegistry,
        client: UpstreamClient,
        weather_url: str,
        pollution_url: str,
        interval_s: float = 300,
        self_metrics: Optional[SelfMetrics] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.registry = registry
        self.client = client
        self.weather_url = weather_url
        self.pollution_url = pollution_url
        self.interval_s = interval_s
        self.self_metrics = self_metrics
        self.clock = clock

        self.state = CollectorState.IDLE
        self.refresh_count = 0
        self.skipped_count = 0
        self.last_result: Optional[RefreshResult] = None
        self.running = False

        self._cycle_lock = threading.Lock()
        self._stop_event = threading.Event()

    def refresh(self) -> Optional[RefreshResult]:
        """Run one refresh cycle.

        Returns None without doing anything if another cycle is in progress.
        """
        if not self._cycle_lock.acquire(blocking=False):
            self.skipped_count += 1
            if self.self_metrics:
                self.self_metrics.record_skipped()
            logger.warning("Refresh skipped: previous cycle still running")
            return None

        try:
            self.state = CollectorState.REFRESHING
            result = self._run_cycle()
            self.refresh_count += 1
            self.last_result = result
            if self.self_metrics:
                self.self_metrics.record_refresh(result.duration_s)
            return result
        finally:
            self.state = CollectorState.IDLE
            self._cycle_lock.release()

    def _run_cycle(self) -> RefreshResult:
        start = time.monotonic()
        result = RefreshResult(started_at=self.clock())

        try:
            weather = self.client.fetch_weather(self.weather_url)
        except FetchError as e:
            self._report(result, e)
        else:
            self._record_success("weather")
            station, observations = map_weather(weather)
            result.station = station
            result.weather_written = self.registry.set_many(observations)

            result.pollution_attempted = True
            try:
                pollution = self.client.fetch_pollution(self.pollution_url)
            except FetchError as e:
                self._report(result, e)
            else:
                self._record_success("pollution")
                result.pollution_written = self.registry.set_many(
                    map_pollution(pollution, station)
                )

        result.duration_s = time.monotonic() - start
        if result.ok:
            logger.debug(
                f"Refresh for station {result.station}: {result.weather_written} weather, "
                f"{result.pollution_written} pollution observations in {result.duration_s:.3f}s"
            )
        return result

    def _report(self, result: RefreshResult, error: FetchError):
        result.errors[error.source] = str(error)
        logger.error(f"Error fetching {error.source} data: {error}")
        if self.self_metrics:
            self.self_metrics.record_fetch_error(error.source, error.kind)

    def _record_success(self, source: str):
        if self.self_metrics:
            self.self_metrics.record_success(source, self.clock())

    def run(self):
        """Refresh immediately, then on a fixed interval until stopped."""
        if self._stop_event.is_set():
            logger.info("Collector stopped before start, not running")
            return

        self.running = True
        logger.info(f"Starting collector, refresh interval {self.interval_s}s")

        next_tick = time.monotonic()
        while not self._stop_event.is_set():
            try:
                self.refresh()
            except Exception as e:
                logger.error(f"Error in refresh cycle: {e}", exc_info=True)

            next_tick += self.interval_s
            now = time.monotonic()
            if now > next_tick:
                missed = int((now - next_tick) // self.interval_s) + 1
                logger.warning(
                    f"Refresh overran the {self.interval_s}s interval, skipping {missed} tick(s)"
                )
                next_tick += missed * self.interval_s

            if self._stop_event.wait(next_tick - time.monotonic()):
                break

        self.running = False

    def stop(self):
        """Stop the refresh loop; an in-flight fetch is not cancelled."""
        logger.info("Stopping collector")
        self.running = False
        self._stop_event.set()

    def status(self) -> dict:
        result = self.last_result
        return {
            "state": self.state.value,
            "refresh_count": self.refresh_count,
            "skipped_count": self.skipped_count,
            "interval_s": self.interval_s,
            "series_count": len(self.registry),
            "last_refresh": None if result is None else {
                "started_at": result.started_at,
                "duration_s": round(result.duration_s, 3),
                "station": result.station,
                "weather_written": result.weather_written,
                "pollution_written": result.pollution_written,
                "errors": dict(result.errors),
            },
        }


def run_collector_thread(collector: Collector):
    """Run collector in a separate thread."""
    try:
        collector.run()
    except Exception as e:
        logger.error(f"Collector thread error: {e}", exc_info=True)
        collector.stop()
