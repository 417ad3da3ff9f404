"""Poll loop and backoff state machine.

`run_cycle` is one complete scan → rank → reconcile → activate pass and
decides how long to sleep; `PriorityWorker` repeats it on a QThread.
"""

from .core_ranking import *
from .core_reconcile import *
from .config import DaemonConfig

logger = logging.getLogger(__name__)


def _degrade(step: str, fn: Callable, empty):
    """Run one directory read; any directory failure becomes `empty`."""
    try:
        return fn()
    except WifiPriorityError as e:
        logger.warning("%s failed: %s", step, e)
        return empty


def run_cycle(
    directory: NetworkDirectory,
    backoff: BackoffState,
    config: Optional[DaemonConfig] = None,
) -> CycleReport:
    cfg = config or DaemonConfig()
    logger.info("Starting scan logic...")

    try:
        directory.request_scan()
    except ScanRequestError as e:
        logger.info("rescan request not accepted (%s); using cached scan results", e)

    known = _degrade("listing known networks", directory.list_known_ssids, set())
    visible = _degrade("listing visible networks", directory.scan_visible, [])
    current = _degrade("reading current network", directory.current_ssid, None)

    ranked = rank(visible, known, current)
    report = CycleReport(ranked=ranked, current_ssid=current)

    if not ranked:
        report.sleep_seconds = backoff.delay + cfg.interval
        logger.info("no networks found. retrying in %.2fs", report.sleep_seconds)
        report.backoff = backoff.grow(cfg.backoff_initial, cfg.backoff_factor, cfg.backoff_max)
        return report

    log_candidates(ranked)
    report.writes_ok, report.writes_failed = reconcile_priorities(
        directory, ranked, cfg.priority_offset
    )
    logger.info(
        "All connections processed (%d written, %d failed).",
        report.writes_ok,
        report.writes_failed,
    )
    report.activation_attempted, report.activated = activate_best(directory, ranked, current)
    report.sleep_seconds = cfg.interval
    report.backoff = backoff.reset()
    return report


# ─────────────────────────────────────────────────────────────────────────────
# Worker Thread
# ─────────────────────────────────────────────────────────────────────────────


class PriorityWorker(QThread):
    """Background thread: runs cycles back to back with a sleep in between."""

    cycle_done = pyqtSignal(object)  # CycleReport
    cycle_error = pyqtSignal(str)

    def __init__(self, directory: NetworkDirectory, config: Optional[DaemonConfig] = None):
        super().__init__()
        self._directory = directory
        self._config = config or DaemonConfig()
        self._backoff = BackoffState()
        self._stop_event = threading.Event()

    @property
    def backoff(self) -> BackoffState:
        return self._backoff

    def run(self):
        while not self._stop_event.is_set():
            sleep_for = self._config.interval
            try:
                report = run_cycle(self._directory, self._backoff, self._config)
                self._backoff = report.backoff
                sleep_for = report.sleep_seconds
                self.cycle_done.emit(report)
            except Exception as e:
                logger.debug("cycle aborted", exc_info=True)
                self.cycle_error.emit(str(e))
            # Shutdown is honoured here, never in the middle of a cycle.
            self._stop_event.wait(sleep_for)

    def stop(self, timeout_ms: Optional[int] = None):
        """Ask the loop to exit and block until the running cycle finishes."""
        self._stop_event.set()
        if timeout_ms is None:
            self.wait()
        else:
            self.wait(timeout_ms)
