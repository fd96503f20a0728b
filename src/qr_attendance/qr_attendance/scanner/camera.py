from __future__ import annotations

import logging
from typing import Mapping, Optional, Protocol

import cv2
import numpy as np

from ..core.constants import DEFAULT_CAMERA_INDEX, REAR_FACING
from ..core.exceptions import CameraUnavailableError

logger = logging.getLogger(__name__)


class Camera(Protocol):
    """Camera capability used by the scan loop."""

    @property
    def is_open(self) -> bool:
        raise NotImplementedError

    def open(self, facing: str = REAR_FACING) -> None:
        raise NotImplementedError

    def read_frame(self) -> Optional[np.ndarray]:
        raise NotImplementedError

    def release(self) -> None:
        raise NotImplementedError


class OpenCVCamera:
    """Camera backed by ``cv2.VideoCapture``.

    OpenCV has no notion of facing mode, so the preference is mapped to a device
    index through ``indexes`` (e.g. ``{"environment": 1}``), falling back to
    ``default_index``.
    """

    def __init__(self, *, default_index: int = DEFAULT_CAMERA_INDEX, indexes: Optional[Mapping[str, int]] = None):
        self._default_index = int(default_index)
        self._indexes = dict(indexes or {})
        self._capture: Optional[cv2.VideoCapture] = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    def open(self, facing: str = REAR_FACING) -> None:
        if self._capture is not None:
            return

        index = self._indexes.get(facing, self._default_index)
        capture = cv2.VideoCapture(index)
        if not capture.isOpened():
            capture.release()
            raise CameraUnavailableError(f"Camera {index} is not available")

        self._capture = capture
        logger.info("Camera %s opened (facing=%s)", index, facing)

    def read_frame(self) -> Optional[np.ndarray]:
        if self._capture is None:
            return None
        ok, frame = self._capture.read()
        if not ok:
            return None
        return frame

    def release(self) -> None:
        capture, self._capture = self._capture, None
        if capture is not None:
            capture.release()
            logger.info("Camera released")
