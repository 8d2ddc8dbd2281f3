"""
Frame driver - the single per-frame tick source.

A QTimer calls FocusVM.advance_frame(), which steps the layout
simulation and the camera flight. Everything runs on the Qt thread.
"""

import logging
from typing import Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from graphlens_core.domain.enums import AnimationState

from .focus_vm import FocusVM

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 16


class FrameDriver(QObject):
    """
    Drives a FocusVM at a fixed timer interval.

    Signals:
        frame_advanced: Emitted after every tick
        flight_finished: Emitted on the tick where the camera flight ends
    """

    frame_advanced = pyqtSignal()
    flight_finished = pyqtSignal()

    def __init__(
        self,
        focus_vm: FocusVM,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._focus_vm = focus_vm
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)
        self._frames = 0

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    @property
    def frame_count(self) -> int:
        return self._frames

    def start(self) -> None:
        if not self._timer.isActive():
            logger.debug("Frame driver started (%d ms)", self._timer.interval())
            self._timer.start()

    def stop(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
            logger.debug("Frame driver stopped after %d frames", self._frames)

    def _on_timeout(self) -> None:
        was_animating = self._focus_vm.animation_state == AnimationState.ANIMATING
        self._focus_vm.advance_frame()
        self._frames += 1
        self.frame_advanced.emit()
        if was_animating and self._focus_vm.animation_state == AnimationState.IDLE:
            self.flight_finished.emit()
