"""TickLoop: 60 Hz animation tick source with drop-oldest overflow handling."""

from __future__ import annotations

import contextlib
import logging
import queue
import threading
import time

from redline.hotpath.engine import SimulationFrame

_logger = logging.getLogger(__name__)


class TickLoop:
    """Calls ``engine.tick()`` at *target_hz* and enqueues each :class:`SimulationFrame`.

    The loop thread is the only writer of the engine's progress state.  When
    the internal queue is full the *oldest* frame is discarded so the consumer
    always sees the most recent position.

    Parameters
    ----------
    engine:
        Object with ``tick() -> SimulationFrame``, usually a
        :class:`~redline.hotpath.engine.SimulationEngine`.
    target_hz:
        Tick frequency in Hz.
    queue_maxsize:
        Maximum number of frames buffered before drop-oldest kicks in.
    """

    def __init__(
        self,
        engine,
        target_hz: float = 60.0,
        queue_maxsize: int = 120,
    ) -> None:
        if target_hz <= 0:
            raise ValueError("target_hz must be > 0")
        self._engine = engine
        self._interval = 1.0 / target_hz
        self._queue: queue.Queue[SimulationFrame] = queue.Queue(maxsize=queue_maxsize)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.error: BaseException | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background tick thread."""
        self._stop_event.clear()
        self.error = None
        self._thread = threading.Thread(target=self._run, daemon=True, name="TickLoop")
        self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        """Signal the tick thread to stop and join it.

        Once this returns with :attr:`is_alive` False, no further ticks reach
        the engine.  If a tick is still blocked after *timeout* seconds the
        thread is kept and a warning is logged; it exits after that tick.
        """
        self._stop_event.set()
        if self._thread is None:
            return
        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            _logger.warning("Tick thread did not stop within %.1f s", timeout)
            return
        self._thread = None

    def get_frame(self, timeout: float = 0.1) -> SimulationFrame | None:
        """Return the next queued frame, or None if none arrives within *timeout* s."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def queue_size(self) -> int:
        """Return the current number of buffered frames."""
        return self._queue.qsize()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self) -> None:
        while not self._stop_event.is_set():
            t0 = time.monotonic()
            try:
                frame = self._engine.tick()
            except Exception as exc:
                _logger.exception("Tick failed; stopping tick loop")
                self.error = exc
                break
            self._enqueue(frame)
            elapsed = time.monotonic() - t0
            wait = self._interval - elapsed
            if wait > 0:
                self._stop_event.wait(wait)

    def _enqueue(self, frame: SimulationFrame) -> None:
        """Put *frame* in the queue; drop oldest if full."""
        try:
            self._queue.put_nowait(frame)
        except queue.Full:
            with contextlib.suppress(queue.Empty):
                self._queue.get_nowait()
            with contextlib.suppress(queue.Full):
                self._queue.put_nowait(frame)
