"""Collect candidate base placements and drive the robot to the best reachable one."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass

from .geometry import Quaternion, Transform
from .workspace import Orientation, Point, Pose

log = logging.getLogger(__name__)

TORSO_MIN = 0.03
TORSO_MAX = 0.34

# Offset from the torso lift link down to the base footprint.
_TORSO_TO_FOOTPRINT = Transform((0.062, 0.0, -0.888), Quaternion(0.0, 0.0, 0.0, 1.0))

_NOT_AVAILABLE = "Service not available at the moment - no poses stored"
_UNREACHABLE = "Couldn't reach any of the poses"

Navigate = Callable[[Pose], bool]
MoveTorso = Callable[[float], bool]


@dataclass
class TriggerResponse:
    """Outcome of a trigger request."""

    success: bool = False
    message: str = ""


class PoseCollectionClosed(RuntimeError):
    """Poses can no longer be received until the navigator is used or reset."""


def _empty_pose() -> Pose:
    return Pose()


def _orientation_from(q: Quaternion) -> Orientation:
    return Orientation(q.x, q.y, q.z, q.w)


def fix_base_orientation(pose: Pose) -> Pose:
    """Give a pose without orientation a yaw that faces the nearest table.

    Poses whose orientation has a non-zero x, y or z part are returned as they are.
    """
    result = copy.deepcopy(pose)
    o = result.orientation
    if o.x == 0 and o.y == 0 and o.z == 0:
        x, y = result.position.x, result.position.y
        yaw = 0.0
        if y > 0 or y <= -1.75:
            yaw = 1.565
        elif x > 0.35 or y >= -1.15:
            yaw = -1.58
        result.orientation = _orientation_from(Quaternion.from_rpy(0.0, 0.0, yaw).normalized())
    return result


def clamp_torso(value: float) -> float:
    """Keep a torso lift value inside the joint range."""
    if value < TORSO_MIN:
        return TORSO_MIN
    if value >= TORSO_MAX:
        return TORSO_MAX
    return value


def arm_to_base(arm_pose: Pose) -> tuple[Pose, float]:
    """Turn a torso lift link pose into a base footprint pose and torso height.

    Only the yaw of the arm pose is kept. The returned pose lies on the
    ground; the height it would have had becomes the clamped torso value.
    """
    p, o = arm_pose.position, arm_pose.orientation
    _, _, yaw = Quaternion(o.x, o.y, o.z, o.w).to_rpy()
    arm = Transform((p.x, p.y, p.z), Quaternion.from_rpy(0.0, 0.0, yaw).normalized())
    base = arm * _TORSO_TO_FOOTPRINT
    bx, by, bz = base.translation
    torso = clamp_torso(bz)
    pose = Pose(Point(bx, by, 0.0), _orientation_from(base.rotation.normalized()))
    return pose, torso


def _fmt(*values: float) -> str:
    return ",".join(f"{v:f}" for v in values)


class BasePlacementNavigator:
    """Stores received base placements and sends them to navigation in order.

    ``navigate`` receives a goal pose in the map frame and returns whether it
    was reached. ``move_torso`` receives a torso lift value and returns
    whether the torso got there.
    """

    def __init__(self, navigate: Navigate, move_torso: MoveTorso | None = None) -> None:
        self.navigate = navigate
        self.move_torso = move_torso
        self._poses: list[Pose] = [_empty_pose()]
        self.receiving = True
        self.service_available = False

    @property
    def poses(self) -> list[Pose]:
        return copy.deepcopy(self._poses)

    def receive_pose(self, pose: Pose) -> None:
        """Store a candidate pose; an empty pose marks the one before it as best."""
        if not self.receiving:
            raise PoseCollectionClosed(
                "Can't receive new base placement to go to - move to the stored poses or reset"
            )
        if pose == _empty_pose():
            self._poses[0] = self._poses[-1]
            self._poses.pop()
            log.info("Saved best pose - storing all poses")
            self.receiving = False
            self.service_available = True
        else:
            self._poses.append(copy.deepcopy(pose))

    def reset(self) -> None:
        """Forget stored poses and accept new ones."""
        self.service_available = False
        self._poses = [_empty_pose()]
        self.receiving = True

    def move_robot(self) -> TriggerResponse:
        """Navigate to the stored poses in order until one is reached."""
        if not self.service_available:
            log.error(_NOT_AVAILABLE)
            return TriggerResponse(False, _NOT_AVAILABLE)
        response = TriggerResponse()
        last = len(self._poses) - 1
        for index, pose in enumerate(self._poses):
            log.info("Sending goal")
            if self.navigate(fix_base_orientation(pose)):
                p, o = pose.position, pose.orientation
                response = TriggerResponse(
                    True,
                    f"Reached pose {index} ({_fmt(p.x, p.y, p.z)}) ({_fmt(o.x, o.y, o.z, o.w)})",
                )
                break
            if index == last:
                log.error(_UNREACHABLE)
                response = TriggerResponse(False, _UNREACHABLE)
            log.info("pose %d failed - attempting next pose", index + 1)
        log.info("Resetting the poses array and the node to be used again")
        self.reset()
        return response

    def move_arm(self) -> TriggerResponse:
        """Treat stored poses as arm base poses, navigate, then raise the torso."""
        if not self.service_available:
            log.error(_NOT_AVAILABLE)
            return TriggerResponse(False, _NOT_AVAILABLE)
        response = TriggerResponse()
        last = len(self._poses) - 1
        for index, pose in enumerate(self._poses):
            goal, torso = arm_to_base(pose)
            log.info("Sending goal")
            if self.navigate(goal):
                p, o = goal.position, goal.orientation
                response = TriggerResponse(
                    True,
                    f"Reached pose {index + 1} (torso value= {torso:f}) "
                    f"({_fmt(p.x, p.y, p.z)}) ({_fmt(o.x, o.y, o.z, o.w)})",
                )
                if self.move_torso is not None and self.move_torso(torso):
                    log.info("torso position adjusted to meet arm base pose")
                else:
                    log.error("failed to position the torso, retry manually")
                break
            if index == last:
                log.error(_UNREACHABLE)
                response = TriggerResponse(False, _UNREACHABLE)
            log.info("pose %d failed - attempting next pose", index + 1)
        log.info("Resetting the poses array and the node to be used again")
        self.reset()
        return response