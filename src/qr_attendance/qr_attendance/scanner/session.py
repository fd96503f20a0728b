from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from ..attendance.model import ScanOutcome
from ..attendance.service import AttendanceRecorder
from ..core.constants import DEFAULT_POLL_INTERVAL_MS
from ..core.enums import ScanState
from .camera import Camera
from .decoder import Decoder
from .loop import ScanLoopController, TimerFactory
from .timer import RepeatingTimer

logger = logging.getLogger(__name__)

CAMERA_ERROR_MESSAGE = "Camera access denied or not available"


class ScanSession:
    """Kiosk workflow: scan one badge, mark attendance, keep the outcome for display.

    Stopping the session never cancels a mark already handed to the recorder;
    its outcome still lands in ``last_outcome`` when it completes.
    """

    def __init__(
        self,
        recorder: AttendanceRecorder,
        camera: Camera,
        decoder: Decoder,
        *,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        timer_factory: TimerFactory = RepeatingTimer,
    ):
        self._recorder = recorder
        self._outcome_lock = threading.Lock()
        self._last_outcome: Optional[ScanOutcome] = None
        self._listeners: List[Callable[[ScanOutcome], None]] = []
        self._loop = ScanLoopController(
            camera,
            decoder,
            on_decoded=self._handle_payload,
            on_error=self._handle_camera_error,
            poll_interval_ms=poll_interval_ms,
            timer_factory=timer_factory,
        )

    @property
    def loop(self) -> ScanLoopController:
        return self._loop

    @property
    def state(self) -> ScanState:
        return self._loop.state

    @property
    def last_outcome(self) -> Optional[ScanOutcome]:
        with self._outcome_lock:
            return self._last_outcome

    def subscribe(self, listener: Callable[[ScanOutcome], None]) -> None:
        self._listeners.append(listener)

    def start(self) -> bool:
        started = self._loop.start()
        if started:
            with self._outcome_lock:
                self._last_outcome = None
        return started

    def stop(self) -> None:
        self._loop.stop()

    def status(self) -> dict:
        outcome = self.last_outcome
        return {
            "state": self.state.value,
            "session": self._loop.session_id,
            "last_outcome": outcome.to_dict() if outcome else None,
        }

    def _handle_payload(self, payload: str) -> None:
        try:
            outcome = self._recorder.mark_attendance(payload)
        except Exception:
            logger.exception("Marking attendance failed for scanned badge %r", payload)
            outcome = ScanOutcome.failed()
        self._publish(outcome)

    def _handle_camera_error(self, exc: Exception) -> None:
        self._publish(ScanOutcome.failed(CAMERA_ERROR_MESSAGE))

    def _publish(self, outcome: ScanOutcome) -> None:
        with self._outcome_lock:
            self._last_outcome = outcome
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception:
                logger.exception("Scan outcome listener failed")
