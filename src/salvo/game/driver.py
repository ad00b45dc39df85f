"""Background driver that repeats a unit of work on a worker thread."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from salvo.game.errors import InvalidOperationError

_LOGGER = logging.getLogger(__name__)

StepFunction = Callable[[], bool]


class _DriverWorker(QObject):
    """Thread-affine worker looping over the step function."""

    round_completed = pyqtSignal(bool)  # finished
    stopped = pyqtSignal()
    failed = pyqtSignal(str)

    __slots__ = ("_step", "_stop_event", "_thread_ident", "last_error")

    def __init__(self, step: StepFunction) -> None:
        super().__init__()
        self._step = step
        self._stop_event = threading.Event()
        self._thread_ident: int | None = None
        self.last_error: BaseException | None = None

    @property
    def thread_ident(self) -> int | None:
        return self._thread_ident

    @pyqtSlot()
    def run(self) -> None:
        """Call the step function until it reports completion or stop is set."""
        self._thread_ident = threading.get_ident()
        self.last_error = None
        _LOGGER.debug("Driver loop started")
        try:
            while not self._stop_event.is_set():
                try:
                    finished = self._step()
                except Exception as exc:
                    _LOGGER.exception("Driver step failed")
                    self.last_error = exc
                    self.failed.emit(str(exc))
                    break
                self.round_completed.emit(finished)
                if finished:
                    break
        finally:
            self._thread_ident = None
            _LOGGER.debug("Driver loop exited")
            self.stopped.emit()
            thread = self.thread()
            if thread is not None:
                thread.quit()

    def request_stop(self) -> None:
        self._stop_event.set()

    def clear_stop(self) -> None:
        self._stop_event.clear()

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()


class Driver:
    """Owns the worker thread that advances a match.

    *step* is called repeatedly on a dedicated ``QThread`` until it returns
    True or :meth:`stop` is requested. Stop is cooperative: it is checked
    between steps only, so a step in progress always runs to completion.

    The worker's Qt signals (``round_completed``, ``stopped``, ``failed``) are
    exposed for observers living on other threads; they are delivered through
    the receivers' event loops.
    """

    __slots__ = ("_thread", "_worker")

    def __init__(self, step: StepFunction, parent: QObject | None = None) -> None:
        self._thread = QThread(parent)
        self._worker = _DriverWorker(step)
        self._worker.moveToThread(self._thread)
        self._thread.started.connect(self._worker.run)

    # ── Signals ──────────────────────────────────────────────────────────

    @property
    def round_completed(self) -> pyqtSignal:
        return self._worker.round_completed

    @property
    def stopped(self) -> pyqtSignal:
        return self._worker.stopped

    @property
    def failed(self) -> pyqtSignal:
        return self._worker.failed

    # ── State ────────────────────────────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self._thread.isRunning()

    @property
    def stop_requested(self) -> bool:
        return self._worker.stop_requested

    @property
    def last_error(self) -> BaseException | None:
        """Exception that ended the last run, if any."""
        return self._worker.last_error

    def is_driver_thread(self) -> bool:
        """Is the caller running on the driver's worker thread?"""
        return self._worker.thread_ident == threading.get_ident()

    # ── Commands ─────────────────────────────────────────────────────────

    def start(self) -> None:
        """Begin looping in the background. No-op while already running."""
        if self._thread.isRunning():
            return
        self._worker.clear_stop()
        self._thread.start()

    def stop(self) -> None:
        """Ask the loop to exit after the current step."""
        self._worker.request_stop()

    def join(self, timeout: float | None = None) -> bool:
        """Block until the loop has exited. Returns False on timeout."""
        if self.is_driver_thread():
            raise InvalidOperationError("The driver thread cannot join itself")
        if timeout is None:
            return self._thread.wait()
        return self._thread.wait(max(0, int(timeout * 1000)))
