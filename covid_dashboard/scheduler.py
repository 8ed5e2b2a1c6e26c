import threading

from covid_dashboard.builder import SnapshotBuilder
from covid_dashboard.logger import get_logger, log_debug, log_error, log_info
from covid_dashboard.models import NOT_READY


class RefreshHandle:
    """Cancellable handle for one running refresh loop."""

    def __init__(self, thread, stop_event):
        self._thread = thread
        self._stop_event = stop_event

    @property
    def active(self):
        return self._thread.is_alive() and not self._stop_event.is_set()

    def cancel(self, timeout=None):
        """Stop the loop and wait for an in-flight refresh to finish."""
        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout)


class SnapshotScheduler:
    """
    Owns the current Snapshot and regenerates it every `interval` seconds.

    Lifecycle:
      - construction: nothing published, current_snapshot() is NOT_READY
      - start(): publishes once synchronously, then refreshes on a daemon thread
      - stop(): cancels the loop; no publish happens after it returns

    Readers never lock. A refresh builds the whole Snapshot first and then
    swaps a single reference, so a reader sees either the old or the new
    snapshot. A failed refresh keeps the last good one.
    """

    def __init__(self, builder=None, interval=None):
        self.builder = builder or SnapshotBuilder()
        self.interval = self.builder.config.refresh_interval if interval is None else interval
        if self.interval <= 0:
            raise ValueError(f"refresh interval must be positive, got {self.interval}")

        self._current = NOT_READY
        self._generation = 0
        self._flight = threading.Lock()
        self._lifecycle = threading.Lock()
        self._handle = None
        self._log = get_logger("covid_dashboard.scheduler")

    # -------------------------------------------------
    # Reading
    # -------------------------------------------------

    def current_snapshot(self):
        return self._current

    @property
    def generation(self):
        """Number of snapshots published so far."""
        return self._generation

    @property
    def running(self):
        return self._handle is not None and self._handle.active

    # -------------------------------------------------
    # Regeneration
    # -------------------------------------------------

    def refresh(self):
        """
        Run one generation cycle and publish the result.

        Returns True when a new snapshot was published, False when the cycle
        was skipped (another refresh in flight) or the builder failed.
        """
        if not self._flight.acquire(blocking=False):
            log_debug(self._log, "refresh skipped, cycle already in flight")
            return False
        try:
            try:
                snapshot = self.builder.build()
            except Exception as exc:
                log_error(
                    self._log,
                    "snapshot generation failed, serving last good snapshot",
                    error=repr(exc),
                    generation=self._generation,
                )
                return False

            self._current = snapshot
            self._generation += 1
            log_info(
                self._log,
                "snapshot published",
                generation=self._generation,
                generated_at=snapshot.generated_at,
                series_points=len(snapshot.series),
                countries=len(snapshot.countries),
            )
            return True
        finally:
            self._flight.release()

    # -------------------------------------------------
    # Lifecycle
    # -------------------------------------------------

    def _run(self, stop_event):
        while not stop_event.wait(self.interval):
            self.refresh()

    def start(self):
        with self._lifecycle:
            if self._handle is not None and self._handle.active:
                return self._handle

            self.refresh()
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(stop_event,),
                name="snapshot-refresh",
                daemon=True,
            )
            self._handle = RefreshHandle(thread, stop_event)
            thread.start()
            log_info(self._log, "scheduler started", interval=self.interval)
            return self._handle

    def stop(self):
        with self._lifecycle:
            if self._handle is None:
                return
            self._handle.cancel()
            self._handle = None
            log_info(self._log, "scheduler stopped", generation=self._generation)
