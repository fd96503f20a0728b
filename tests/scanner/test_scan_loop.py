from __future__ import annotations

import threading

import numpy as np
import pytest

from src.qr_attendance.qr_attendance.core.enums import ScanState
from src.qr_attendance.qr_attendance.scanner.loop import ScanLoopController
from src.qr_attendance.qr_attendance.scanner.timer import RepeatingTimer

from tests.fakes import FakeCamera, FakeDecoder, ManualTimerFactory, blank_frame


def make_loop(camera, decoder, **kwargs):
    timers = ManualTimerFactory()
    decoded = []
    errors = []
    loop = ScanLoopController(
        camera,
        decoder,
        on_decoded=decoded.append,
        on_error=errors.append,
        timer_factory=timers,
        **kwargs,
    )
    return loop, timers, decoded, errors


def test_start_acquires_rear_camera_and_starts_timer():
    camera = FakeCamera()
    loop, timers, _, _ = make_loop(camera, FakeDecoder())

    assert loop.start() is True

    assert camera.open_calls == ["environment"]
    assert loop.state == ScanState.SCANNING
    assert timers.last.started
    assert timers.last.interval == pytest.approx(0.5)


def test_poll_interval_is_configurable():
    loop, timers, _, _ = make_loop(FakeCamera(), FakeDecoder(), poll_interval_ms=250)
    loop.start()

    assert timers.last.interval == pytest.approx(0.25)


def test_poll_interval_must_be_positive():
    with pytest.raises(ValueError):
        make_loop(FakeCamera(), FakeDecoder(), poll_interval_ms=0)


def test_second_start_collapses_to_one_session():
    camera = FakeCamera()
    loop, timers, _, _ = make_loop(camera, FakeDecoder())

    assert loop.start() is True
    assert loop.start() is False

    assert len(camera.open_calls) == 1
    assert len(timers.timers) == 1
    assert loop.session_id == 1


def test_stop_without_start_is_a_noop():
    camera = FakeCamera()
    loop, _, _, _ = make_loop(camera, FakeDecoder())

    loop.stop()
    loop.stop()

    assert loop.state == ScanState.IDLE
    assert camera.release_calls == 0
    assert not camera.is_open


def test_stop_twice_releases_once():
    camera = FakeCamera()
    loop, timers, _, _ = make_loop(camera, FakeDecoder())
    loop.start()

    loop.stop()
    loop.stop()

    assert loop.state == ScanState.IDLE
    assert camera.release_calls == 1
    assert timers.last.cancel_calls == 1
    assert not camera.is_open


def test_camera_failure_reports_error_and_returns_to_idle():
    camera = FakeCamera(fail_open=True)
    loop, timers, _, errors = make_loop(camera, FakeDecoder())

    assert loop.start() is False

    assert loop.state == ScanState.IDLE
    assert len(errors) == 1
    assert timers.timers == []
    assert not camera.is_open

    camera.fail_open = False
    assert loop.start() is True


@pytest.mark.parametrize("frame", [None, np.zeros((0, 0, 3), dtype=np.uint8), np.zeros((0, 640), dtype=np.uint8)])
def test_frame_not_ready_is_skipped(frame):
    camera = FakeCamera([frame])
    decoder = FakeDecoder(["E1"])
    loop, timers, decoded, _ = make_loop(camera, decoder)
    loop.start()

    timers.last.fire()

    assert decoder.buffers == []
    assert decoded == []
    assert loop.state == ScanState.SCANNING


def test_no_decode_keeps_scanning():
    camera = FakeCamera([blank_frame(), blank_frame()])
    decoder = FakeDecoder([None, None])
    loop, timers, decoded, _ = make_loop(camera, decoder)
    loop.start()

    timers.last.fire()
    timers.last.fire()

    assert len(decoder.buffers) == 2
    assert decoded == []
    assert loop.state == ScanState.SCANNING
    assert camera.release_calls == 0


def test_frames_are_handed_over_as_grayscale_buffers():
    decoder = FakeDecoder([None])
    loop, timers, _, _ = make_loop(FakeCamera([blank_frame(32, 24)]), decoder)
    loop.start()

    timers.last.fire()

    assert decoder.buffers[0].shape == (24, 32)
    assert decoder.buffers[0].dtype == np.uint8


def test_decode_forwards_once_and_tears_down():
    camera = FakeCamera([blank_frame(), blank_frame(), blank_frame()])
    decoder = FakeDecoder([None, "E1", "E2"])
    loop, timers, decoded, _ = make_loop(camera, decoder)
    loop.start()
    timer = timers.last

    assert loop.tick() is False
    assert loop.tick() is True
    assert loop.tick() is False

    assert decoded == ["E1"]
    assert loop.state == ScanState.IDLE
    assert timer.cancel_calls == 1
    assert camera.release_calls == 1
    assert len(decoder.buffers) == 2


def test_tick_from_previous_session_is_ignored():
    camera = FakeCamera()
    decoder = FakeDecoder(["E1"])
    loop, _, decoded, _ = make_loop(camera, decoder)
    loop.start()
    loop.stop()
    loop.start()
    camera.frames.append(blank_frame())

    assert loop.tick(session_id=1) is False
    assert loop.tick(session_id=2) is True
    assert decoded == ["E1"]


def test_restart_after_decode_opens_camera_again():
    camera = FakeCamera([blank_frame()])
    loop, _, decoded, _ = make_loop(camera, FakeDecoder(["E1", "E2"]))
    loop.start()
    loop.tick()

    camera.frames.append(blank_frame())
    assert loop.start() is True
    loop.tick()

    assert decoded == ["E1", "E2"]
    assert len(camera.open_calls) == 2
    assert camera.release_calls == 2


def test_context_manager_releases_on_error():
    camera = FakeCamera()
    loop, _, _, _ = make_loop(camera, FakeDecoder())

    with pytest.raises(RuntimeError):
        with loop:
            loop.start()
            raise RuntimeError("navigated away")

    assert loop.state == ScanState.IDLE
    assert camera.release_calls == 1


def test_capture_error_tears_down_and_reports():
    class BrokenCamera(FakeCamera):
        def read_frame(self):
            raise OSError("device unplugged")

    camera = BrokenCamera()
    loop, timers, decoded, errors = make_loop(camera, FakeDecoder(["E1"]))
    loop.start()

    assert loop.tick() is False

    assert decoded == []
    assert len(errors) == 1
    assert loop.state == ScanState.IDLE
    assert camera.release_calls == 1
    assert timers.last.cancel_calls == 1


class ReleaseFailsOnceCamera(FakeCamera):
    def release(self) -> None:
        super().release()
        if self.release_calls == 1:
            raise OSError("driver refused to close")


def test_failed_release_after_camera_error_still_returns_to_idle():
    camera = ReleaseFailsOnceCamera(fail_open=True)
    loop, _, _, errors = make_loop(camera, FakeDecoder(["E1"]))

    assert loop.start() is False
    assert loop.state == ScanState.IDLE
    assert len(errors) == 1

    loop.stop()
    camera.fail_open = False
    camera.frames.append(blank_frame())

    assert loop.start() is True
    assert loop.state == ScanState.SCANNING


def test_failed_release_after_decode_still_forwards_payload():
    camera = ReleaseFailsOnceCamera([blank_frame()])
    loop, _, decoded, errors = make_loop(camera, FakeDecoder(["E1"]))
    loop.start()

    assert loop.tick() is True

    assert decoded == ["E1"]
    assert errors == []
    assert loop.state == ScanState.IDLE


def test_stop_waits_for_teardown_in_progress_on_another_thread():
    class SlowReleaseCamera(FakeCamera):
        def __init__(self):
            super().__init__()
            self.releasing = threading.Event()
            self.may_finish = threading.Event()

        def release(self) -> None:
            self.releasing.set()
            self.may_finish.wait(2.0)
            super().release()

    camera = SlowReleaseCamera()
    loop, _, _, _ = make_loop(camera, FakeDecoder())
    loop.start()

    first = threading.Thread(target=loop.stop)
    first.start()
    assert camera.releasing.wait(2.0)

    second = threading.Thread(target=loop.stop)
    second.start()
    second.join(0.1)
    assert second.is_alive()

    camera.may_finish.set()
    first.join(2.0)
    second.join(2.0)

    assert not second.is_alive()
    assert camera.release_calls == 1
    assert loop.state == ScanState.IDLE


def test_decode_on_timer_thread_stops_its_own_timer():
    timers = []
    done = threading.Event()
    decoded = []

    def timer_factory(interval, callback):
        timer = RepeatingTimer(interval, callback)
        timers.append(timer)
        return timer

    def on_decoded(payload):
        decoded.append(payload)
        done.set()

    camera = FakeCamera([blank_frame() for _ in range(5)])
    loop = ScanLoopController(
        camera,
        FakeDecoder(["E1", "E2"]),
        on_decoded=on_decoded,
        poll_interval_ms=10,
        timer_factory=timer_factory,
    )
    loop.start()

    assert done.wait(2.0)
    assert timers[0].join(2.0)

    assert decoded == ["E1"]
    assert loop.state == ScanState.IDLE
    assert camera.release_calls == 1
