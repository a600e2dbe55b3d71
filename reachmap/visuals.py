"""Scene content for capability and reachability maps: filtered, coloured markers."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import IntEnum

from .geometry import Quaternion
from .workspace import Pose, WorkSpace

log = logging.getLogger(__name__)

Vector = tuple[float, float, float]
Color = tuple[float, float, float, float]


class Disect(IntEnum):
    """Which slice of the sphere list to show."""

    FULL = 0
    FIRST_HALF = 1
    SECOND_HALF = 2
    MIDDLE_SLICE = 3
    END_SLICE = 4


class ShapeKind(IntEnum):
    """Kinds of marker a visual can hold."""

    SPHERE = 0
    CYLINDER = 1
    CONE = 2
    CUBE = 3
    ARROW = 4


# Capability shapes whose identifier equals this are drawn as spheres, others as cones.
SPHERE_IDENTIFIER = 2.0

# Arrows point along -z, so pose orientations are tilted by this before drawing.
_ARROW_TILT = Quaternion.from_rpy(0.0, -math.pi / 2, 0.0)

# Orientation given to reachability shapes, w = 0 and z = 1.
_SHAPE_ORIENTATION = Quaternion(0.0, 0.0, 1.0, 0.0)


@dataclass
class CapShape:
    """One entry of a capability map: a pose, its kind identifier and index."""

    identifier: float = 0.0
    ri: float = 0.0
    pose: Pose = field(default_factory=Pose)


@dataclass
class CapabilityMessage:
    cap_shapes: list[CapShape] = field(default_factory=list)


@dataclass
class Marker:
    """A drawable item placed in the visual's frame."""

    kind: ShapeKind
    position: Vector
    orientation: Quaternion
    ri: int | None = None
    color: Color | None = None
    scale: Vector | None = None


def disect_range(size: int, choice: Disect | int) -> tuple[int, int]:
    """Return the (start, stop) indices of the slice ``choice`` of ``size`` items."""
    if size < 0:
        raise ValueError("size must not be negative")
    choice = Disect(choice)
    if choice is Disect.FULL:
        return 0, size
    if choice is Disect.FIRST_HALF:
        return 0, size // 2
    if choice is Disect.SECOND_HALF:
        return size // 2, size
    if choice is Disect.MIDDLE_SLICE:
        return int(size / 2.2), int(size / 1.8)
    return 0, int(size / 1.1)


def reachability_color(ri: int) -> tuple[int, int, int]:
    """Colour (r, g, b) for a reachability index."""
    if ri >= 90:
        return (0, 0, 255)
    if ri >= 50:
        return (0, 255, 255)
    if ri >= 30:
        return (0, 255, 0)
    if ri >= 5:
        return (255, 255, 0)
    return (255, 0, 0)


def _position(pose: Pose) -> Vector:
    p = pose.position
    return (p.x, p.y, p.z)


def _quaternion(pose: Pose) -> Quaternion:
    o = pose.orientation
    return Quaternion(o.x, o.y, o.z, o.w)


def _safe_normalized(q: Quaternion) -> Quaternion | None:
    try:
        return q.normalized()
    except ValueError:
        return None


def _has_nan(values: tuple[float, ...]) -> bool:
    return any(math.isnan(v) for v in values)


def _quaternion_valid(q: Quaternion | None) -> bool:
    return q is not None and not _has_nan((q.x, q.y, q.z, q.w))


class CapMapVisual:
    """Markers for one capability map message."""

    def __init__(self) -> None:
        self.frame_position: Vector = (0.0, 0.0, 0.0)
        self.frame_orientation: Quaternion = Quaternion()
        self.shapes: list[Marker] = []

    def set_message(
        self,
        message: CapabilityMessage,
        low_ri: int,
        high_ri: int,
        disect: Disect | int = Disect.FULL,
    ) -> None:
        """Add a marker for each shape with low_ri < index <= high_ri.

        Stops at the first invalid pose, keeping what was added before it.
        """
        start, stop = disect_range(len(message.cap_shapes), disect)
        for shape in message.cap_shapes[start:stop]:
            ri = int(shape.ri)
            if not (low_ri < ri <= high_ri):
                continue
            kind = ShapeKind.SPHERE if shape.identifier == SPHERE_IDENTIFIER else ShapeKind.CONE
            position = _position(shape.pose)
            orientation = _safe_normalized(_quaternion(shape.pose))
            if _has_nan(position) or not _quaternion_valid(orientation):
                log.warning("received invalid pose")
                return
            self.shapes.append(Marker(kind, position, orientation, ri=ri))

    def set_frame_position(self, position: Vector) -> None:
        self.frame_position = tuple(position)

    def set_frame_orientation(self, orientation: Quaternion) -> None:
        self.frame_orientation = orientation

    def set_color(self, r: float, g: float, b: float, a: float) -> None:
        for marker in self.shapes:
            marker.color = (r, g, b, a)

    def set_color_by_ri(self, alpha: float) -> None:
        for marker in self.shapes:
            r, g, b = reachability_color(marker.ri)
            marker.color = (r, g, b, alpha)

    def set_size(self, length: float) -> None:
        for marker in self.shapes:
            marker.scale = (length, length, length)


class ReachMapVisual:
    """Arrows and shapes for one reachability workspace."""

    def __init__(self) -> None:
        self.frame_position: Vector = (0.0, 0.0, 0.0)
        self.frame_orientation: Quaternion = Quaternion()
        self.arrows: list[Marker] = []
        self.shapes: list[Marker] = []

    def set_message(
        self,
        workspace: WorkSpace,
        show_arrows: bool,
        show_shapes: bool,
        low_ri: int,
        high_ri: int,
        shape: ShapeKind | int = ShapeKind.SPHERE,
        disect: Disect | int = Disect.FULL,
    ) -> None:
        """Add arrows for poses and shapes for sphere centres in the index range.

        Arrows use low_ri < index <= high_ri; shapes use low_ri <= index and
        the raw index <= high_ri. Each part stops at its first invalid entry.
        """
        start, stop = disect_range(len(workspace.spheres), disect)
        spheres = workspace.spheres[start:stop]
        kind = ShapeKind(shape)
        if show_shapes and kind is ShapeKind.ARROW:
            raise ValueError("arrow is not a workspace shape")

        if show_arrows:
            if not self._add_arrows(spheres, low_ri, high_ri):
                return
        if show_shapes:
            for sphere in spheres:
                ri = int(sphere.ri)
                if not (low_ri <= ri and sphere.ri <= high_ri):
                    continue
                p = sphere.point
                position = (p.x, p.y, p.z)
                if _has_nan(position):
                    log.warning("received invalid sphere coordinate")
                    return
                self.shapes.append(Marker(kind, position, _SHAPE_ORIENTATION, ri=ri))

    def _add_arrows(self, spheres, low_ri: int, high_ri: int) -> bool:
        for sphere in spheres:
            for pose in sphere.poses:
                if not (low_ri < int(sphere.ri) <= high_ri):
                    continue
                position = _position(pose)
                orientation = _safe_normalized(_quaternion(pose) * _ARROW_TILT)
                if _has_nan(position) or not _quaternion_valid(orientation):
                    log.warning("received invalid pose")
                    return False
                self.arrows.append(Marker(ShapeKind.ARROW, position, orientation))
        return True

    def set_frame_position(self, position: Vector) -> None:
        self.frame_position = tuple(position)

    def set_frame_orientation(self, orientation: Quaternion) -> None:
        self.frame_orientation = orientation

    def set_color_arrow(self, r: float, g: float, b: float, a: float) -> None:
        for marker in self.arrows:
            marker.color = (r, g, b, a)

    def set_size_arrow(self, length: float) -> None:
        for marker in self.arrows:
            marker.scale = (length, length, length)

    def set_color_shape(self, r: float, g: float, b: float, a: float) -> None:
        for marker in self.shapes:
            marker.color = (r, g, b, a)

    def set_size_shape(self, length: float) -> None:
        for marker in self.shapes:
            marker.scale = (length, length, length)

    def set_color_shape_by_ri(self, alpha: float) -> None:
        for marker in self.shapes:
            r, g, b = reachability_color(marker.ri)
            marker.color = (r, g, b, alpha)