"""
Gesture signal, its latest-value holder, and the smoothed parent transform.

The hand tracker (an external collaborator) writes into ``GestureState``
from its own loop; the animator samples it once per frame and eases the
parent transform toward it. The transform moves the whole particle group
rigidly and never touches individual particles.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Optional, Protocol, Sequence, Tuple

import numpy as np

from cosmicparticles.core.smoothing import lerp

# MediaPipe hand landmark indices
WRIST = 0
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_TIP = 8
MIDDLE_MCP = 9
PINKY_MCP = 17
NUM_LANDMARKS = 21

POSITION_SPAN_X = 20.0
POSITION_SPAN_Y = 15.0
PINCH_GAIN = 15.0
MIN_SCALE = 0.5
MAX_SCALE = 5.0
ROTATION_GAIN = 2.0


@dataclass(frozen=True)
class GestureSignal:
    pitch: float = 0.0
    yaw: float = 0.0
    scale: float = 1.0
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)


class GestureSource(Protocol):
    def sample(self) -> Optional[GestureSignal]:
        ...


class GestureState:
    """
    Latest gesture value, with setters mirroring the tracker's outputs.

    ``sample()`` returns None until the first write (no active source).
    Each setter swaps in a new frozen signal, so readers never observe a
    partial update.
    """

    def __init__(self):
        self._signal = GestureSignal()
        self._active = False

    def set_rotation(self, pitch: float, yaw: float) -> None:
        self._publish(replace(self._signal, pitch=float(pitch), yaw=float(yaw)))

    def set_scale(self, scale: float) -> None:
        self._publish(replace(self._signal, scale=float(scale)))

    def set_position(self, x: float, y: float, z: float) -> None:
        self._publish(replace(self._signal, position=(float(x), float(y), float(z))))

    def set_signal(self, signal: GestureSignal) -> None:
        self._publish(signal)

    def reset(self) -> None:
        self._signal = GestureSignal()
        self._active = False

    def sample(self) -> Optional[GestureSignal]:
        return self._signal if self._active else None

    def _publish(self, signal: GestureSignal) -> None:
        self._signal = signal
        self._active = True


def signal_from_landmarks(landmarks: Sequence[Sequence[float]]) -> Optional[GestureSignal]:
    """
    Map one hand's 21 normalized landmarks (x, y, z) to a gesture signal.

    - wrist position -> translation (x mirrored for the webcam)
    - thumb/index tip pinch distance -> uniform scale
    - wrist->middle MCP tilt -> pitch; index->pinky MCP turn -> yaw

    Returns None when fewer than 21 landmarks are given.
    """
    pts = np.asarray(landmarks, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[0] < NUM_LANDMARKS or pts.shape[1] < 2:
        return None
    if pts.shape[1] == 2:
        pts = np.column_stack([pts, np.zeros(len(pts))])

    wrist = pts[WRIST]
    x = (0.5 - wrist[0]) * POSITION_SPAN_X
    y = (0.5 - wrist[1]) * POSITION_SPAN_Y

    pinch = math.hypot(pts[THUMB_TIP, 0] - pts[INDEX_TIP, 0], pts[THUMB_TIP, 1] - pts[INDEX_TIP, 1])
    scale = min(max(pinch * PINCH_GAIN, MIN_SCALE), MAX_SCALE)

    # Fingers straight up (dy < 0, dz = 0) is zero pitch
    up = pts[MIDDLE_MCP] - wrist
    pitch = -math.atan2(up[2], -up[1])

    # Palm flat to the camera (dx > 0, dz = 0) is zero yaw
    across = pts[PINKY_MCP] - pts[INDEX_MCP]
    yaw = math.atan2(across[2], across[0])

    return GestureSignal(
        pitch=pitch * ROTATION_GAIN,
        yaw=yaw * ROTATION_GAIN,
        scale=scale,
        position=(x, y, 0.0),
    )


@dataclass
class ParentTransform:
    """Rigid transform applied to the whole particle group by the renderer."""

    pitch: float = 0.0
    yaw: float = 0.0
    scale: float = 1.0
    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float64))

    def approach(self, signal: GestureSignal, factor: float) -> None:
        self.pitch = lerp(self.pitch, signal.pitch, factor)
        self.yaw = lerp(self.yaw, signal.yaw, factor)
        self.scale = lerp(self.scale, signal.scale, factor)
        self.position += (np.asarray(signal.position, dtype=np.float64) - self.position) * factor

    def as_tuple(self):
        return (self.pitch, self.yaw, self.scale, tuple(float(v) for v in self.position))
