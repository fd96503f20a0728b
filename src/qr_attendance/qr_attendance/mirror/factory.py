from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.enums import MirrorBackend
from ..core.exceptions import ValidationError
from .background import BackgroundMirror
from .base import AttendanceMirror
from .log_mirror import LogMirror
from .workbook_mirror import WorkbookMirror


@dataclass
class MirrorFactory:
    """Factory Pattern: choose the spreadsheet mirror from settings."""

    workbook_path: str | Path = "instance/attendance_mirror.xlsx"
    background: bool = True

    def build(self, backend: str | MirrorBackend) -> Optional[AttendanceMirror]:
        try:
            backend = MirrorBackend(str(getattr(backend, "value", backend)).lower())
        except ValueError as exc:
            raise ValidationError(f"Unknown mirror backend: {backend!r}") from exc

        if backend == MirrorBackend.NONE:
            return None
        if backend == MirrorBackend.WORKBOOK:
            mirror: AttendanceMirror = WorkbookMirror(self.workbook_path)
        else:
            mirror = LogMirror()

        return BackgroundMirror(mirror) if self.background else mirror
