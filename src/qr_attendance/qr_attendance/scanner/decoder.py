from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

import cv2
import numpy as np
from PIL import Image
from pyzbar.pyzbar import ZBarSymbol
from pyzbar.pyzbar import decode as pyzbar_decode


@dataclass(frozen=True)
class DecodeResult:
    payload: str
    polygon: Tuple[Tuple[int, int], ...] = ()


class Decoder(Protocol):
    def decode(self, buffer: np.ndarray) -> Optional[DecodeResult]:
        raise NotImplementedError


def to_buffer(frame: np.ndarray) -> Optional[np.ndarray]:
    """Copy a camera frame into an off-screen 8-bit grayscale buffer.

    Returns None for frames that are not ready yet (no pixels).
    """
    if frame is None or frame.size == 0 or frame.shape[0] == 0 or frame.shape[1] == 0:
        return None
    if frame.ndim == 3 and frame.shape[2] == 1:
        frame = frame[:, :, 0]
    elif frame.ndim == 3 and frame.shape[2] == 4:
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2GRAY)
    if frame.ndim == 3:
        return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
    return np.ascontiguousarray(frame, dtype=np.uint8)


class PyzbarDecoder:
    """QR decoder backed by zbar."""

    def __init__(self, *, encoding: str = "utf-8"):
        self._encoding = encoding

    def _first(self, decoded) -> Optional[DecodeResult]:
        for symbol in decoded:
            payload = symbol.data.decode(self._encoding, errors="replace").strip()
            if payload:
                polygon = tuple((int(p.x), int(p.y)) for p in symbol.polygon)
                return DecodeResult(payload=payload, polygon=polygon)
        return None

    def decode(self, buffer: np.ndarray) -> Optional[DecodeResult]:
        return self._first(pyzbar_decode(buffer, symbols=[ZBarSymbol.QRCODE]))

    def decode_image(self, image: Image.Image) -> Optional[DecodeResult]:
        return self._first(pyzbar_decode(image.convert("L"), symbols=[ZBarSymbol.QRCODE]))
