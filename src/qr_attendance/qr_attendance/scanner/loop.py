from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Tuple

from ..core.constants import DEFAULT_POLL_INTERVAL_MS, REAR_FACING
from ..core.enums import ScanState
from .camera import Camera
from .decoder import Decoder, to_buffer
from .timer import RepeatingTimer

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], RepeatingTimer]


class ScanLoopController:
    """Finite-state machine around one camera and a polling timer.

    IDLE -> ACQUIRING -> SCANNING -> STOPPING -> IDLE. ``stop`` is the only
    teardown path: it is idempotent, valid from every state, and releases the
    timer and the camera together exactly once per session. At most one payload
    is forwarded to ``on_decoded`` per session.
    """

    def __init__(
        self,
        camera: Camera,
        decoder: Decoder,
        *,
        on_decoded: Callable[[str], None],
        on_error: Optional[Callable[[Exception], None]] = None,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        facing: str = REAR_FACING,
        timer_factory: TimerFactory = RepeatingTimer,
    ):
        if int(poll_interval_ms) <= 0:
            raise ValueError("poll_interval_ms must be positive")
        self._camera = camera
        self._decoder = decoder
        self._on_decoded = on_decoded
        self._on_error = on_error
        self._interval = int(poll_interval_ms) / 1000.0
        self._facing = facing
        self._timer_factory = timer_factory

        self._lock = threading.RLock()
        self._stopped = threading.Condition(self._lock)
        self._stopping_thread: Optional[threading.Thread] = None
        self._state = ScanState.IDLE
        self._session_id = 0
        self._timer: Optional[RepeatingTimer] = None
        self._camera_acquired = False

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def is_scanning(self) -> bool:
        return self._state == ScanState.SCANNING

    @property
    def session_id(self) -> int:
        return self._session_id

    @property
    def poll_interval(self) -> float:
        return self._interval

    def start(self) -> bool:
        with self._lock:
            if self._state != ScanState.IDLE:
                logger.info("Scan start ignored: session %s is %s", self._session_id, self._state.value)
                return False

            self._session_id += 1
            self._state = ScanState.ACQUIRING
            session_id = self._session_id
            try:
                self._camera_acquired = True
                self._camera.open(self._facing)
            except Exception as exc:
                logger.warning("Camera unavailable for session %s: %s", session_id, exc)
                resources = self._begin_stop_locked()
                error = exc
            else:
                self._timer = self._timer_factory(self._interval, lambda: self.tick(session_id))
                self._state = ScanState.SCANNING
                self._timer.start()
                logger.info("Scan session %s started (every %.3fs)", session_id, self._interval)
                return True

        self._finish_stop(resources)
        if self._on_error is not None:
            self._on_error(error)
        return False

    def tick(self, session_id: Optional[int] = None) -> bool:
        """Poll one frame. Returns True when a payload was forwarded."""
        with self._lock:
            if self._state != ScanState.SCANNING:
                return False
            if session_id is not None and session_id != self._session_id:
                return False

            try:
                buffer = to_buffer(self._camera.read_frame())
                result = self._decoder.decode(buffer) if buffer is not None else None
            except Exception as exc:
                logger.exception("Frame capture failed in session %s", self._session_id)
                resources = self._begin_stop_locked()
                error = exc
            else:
                if result is None:
                    return False
                logger.info("Session %s decoded a badge", self._session_id)
                resources = self._begin_stop_locked()
                error = None

        self._finish_stop(resources)
        if error is not None:
            if self._on_error is not None:
                self._on_error(error)
            return False

        self._on_decoded(result.payload)
        return True

    def stop(self) -> None:
        """Release the session. Returns once the timer and camera are released,
        including when another thread is already tearing the session down."""
        with self._lock:
            if self._state == ScanState.STOPPING:
                if self._stopping_thread is not threading.current_thread():
                    self._stopped.wait_for(lambda: self._state != ScanState.STOPPING)
                return
            if self._state == ScanState.IDLE and self._timer is None and not self._camera_acquired:
                return
            resources = self._begin_stop_locked()

        self._finish_stop(resources)

    def _begin_stop_locked(self) -> Tuple[Optional[RepeatingTimer], bool]:
        self._state = ScanState.STOPPING
        self._stopping_thread = threading.current_thread()
        timer, self._timer = self._timer, None
        acquired, self._camera_acquired = self._camera_acquired, False
        return timer, acquired

    def _finish_stop(self, resources: Tuple[Optional[RepeatingTimer], bool]) -> None:
        # Outside the lock: a tick waiting on it must drain before the timer thread can join.
        try:
            self._release(*resources)
        finally:
            with self._lock:
                self._state = ScanState.IDLE
                self._stopping_thread = None
                self._stopped.notify_all()
        logger.info("Scan session %s stopped", self._session_id)

    def _release(self, timer: Optional[RepeatingTimer], camera_acquired: bool) -> None:
        if timer is not None:
            try:
                timer.cancel()
            except Exception:
                logger.exception("Cancelling the poll timer failed in session %s", self._session_id)
        if camera_acquired:
            try:
                self._camera.release()
            except Exception:
                logger.exception("Releasing the camera failed in session %s", self._session_id)

    def close(self) -> None:
        self.stop()

    def __enter__(self) -> "ScanLoopController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
