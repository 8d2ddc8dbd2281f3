"""
Camera Animation Engine - curved, eased camera flights.

Driven by explicit timestamps: the host calls `advance(now_ms)` once per
rendered frame. Flight time is wall-clock based, so frame-rate changes
affect smoothness only.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..domain.enums import AnimationState
from ..domain.models import CameraPose
from .framing import CameraFraming

logger = logging.getLogger(__name__)

DURATION_MS = 2350.0
MIN_BEND = 18.0
BEND_SPAN_FRACTION = 0.08
MIN_LIFT = 10.0
LIFT_SPAN_FRACTION = 0.05
CAMERA_CONTROL_T = 0.52
TARGET_CONTROL_T = 0.5
TARGET_BEND_FRACTION = 0.32
FALLBACK_BEND = (0.6, 0.1, 0.4)
UP = np.array([0.0, 1.0, 0.0])


def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4 * t * t * t
    return 1 - ((-2 * t + 2) ** 3) / 2


def quadratic_bezier(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray, t: float) -> np.ndarray:
    u = 1 - t
    return u * u * p0 + 2 * u * t * p1 + t * t * p2


@dataclass(frozen=True, eq=False)
class FlightPath:
    """Control points of the camera and look-target curves."""
    camera: tuple              # (start, control, end) as numpy arrays
    target: tuple

    def pose_at(self, eased_t: float) -> CameraPose:
        cam = quadratic_bezier(*self.camera, eased_t)
        tgt = quadratic_bezier(*self.target, eased_t)
        return CameraPose(
            position=tuple(float(c) for c in cam),
            target=tuple(float(c) for c in tgt),
        )


def build_flight_path(start: CameraPose, framing: CameraFraming) -> FlightPath:
    """
    Arc the flight sideways so the camera does not pass through the graph.

    The control points are offset perpendicular to the travel vector and
    the vertical axis, scaled by the focus span.
    """
    start_pos = np.asarray(start.position, dtype=float)
    start_target = np.asarray(start.target, dtype=float)
    final_pos = np.asarray(framing.position, dtype=float)
    final_target = np.asarray(framing.target, dtype=float)

    bend = np.cross(final_pos - start_pos, UP)
    if bend.dot(bend) < 0.001:
        bend = np.array(FALLBACK_BEND)
    bend = bend / np.linalg.norm(bend) * max(MIN_BEND, framing.span * BEND_SPAN_FRACTION)

    lift = np.array([0.0, max(MIN_LIFT, framing.span * LIFT_SPAN_FRACTION), 0.0])
    camera_control = start_pos + (final_pos - start_pos) * CAMERA_CONTROL_T + bend + lift
    target_control = (
        start_target
        + (final_target - start_target) * TARGET_CONTROL_T
        + bend * TARGET_BEND_FRACTION
    )

    return FlightPath(
        camera=(start_pos, camera_control, final_pos),
        target=(start_target, target_control, final_target),
    )


@dataclass
class _Flight:
    sequence: int
    started_at: float
    path: FlightPath


class CameraAnimator:
    """
    State machine with `idle` and `animating` states.

    A newer request replaces the in-flight animation; each flight reads only
    its own captured start pose, so superseding never leaks partial state.
    """

    def __init__(self, duration_ms: float = DURATION_MS):
        self._duration = duration_ms
        self._flight: Optional[_Flight] = None
        self._latest_sequence = -1

    @property
    def state(self) -> AnimationState:
        return AnimationState.ANIMATING if self._flight else AnimationState.IDLE

    @property
    def is_animating(self) -> bool:
        return self._flight is not None

    @property
    def sequence(self) -> int:
        """Sequence of the most recently accepted request."""
        return self._latest_sequence

    @property
    def duration(self) -> float:
        return self._duration

    def start(self, sequence: int, start: CameraPose, framing: CameraFraming, now: float) -> bool:
        """
        Begin a flight from `start` to the framed pose.

        Args:
            sequence: Focus request sequence; stale sequences are ignored
            start: Current camera pose
            framing: Target framing
            now: Current time in ms

        Returns:
            True if the flight replaced the current state
        """
        if sequence <= self._latest_sequence:
            logger.debug("Ignoring stale flight %d (latest %d)", sequence, self._latest_sequence)
            return False

        self._latest_sequence = sequence
        self._flight = _Flight(
            sequence=sequence,
            started_at=now,
            path=build_flight_path(start, framing),
        )
        return True

    def supersede(self, sequence: int) -> None:
        """Drop any flight older than `sequence` without starting a new one."""
        if sequence > self._latest_sequence:
            self._latest_sequence = sequence
        if self._flight and self._flight.sequence < self._latest_sequence:
            self._flight = None

    def progress(self, now: float) -> float:
        if self._flight is None:
            return 1.0
        if self._duration <= 0:
            return 1.0
        t = (now - self._flight.started_at) / self._duration
        return min(1.0, max(0.0, t))

    def advance(self, now: float) -> Optional[CameraPose]:
        """
        Evaluate the flight at `now`.

        Returns:
            The pose to apply, or None when idle
        """
        flight = self._flight
        if flight is None:
            return None
        if flight.sequence != self._latest_sequence:
            self._flight = None
            return None

        t = self.progress(now)
        pose = flight.path.pose_at(ease_in_out_cubic(t))
        if t >= 1:
            self._flight = None
            logger.debug("Flight %d finished", flight.sequence)
        return pose
