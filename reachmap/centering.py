"""Shift a workspace so that it is expressed relative to the arm base position."""

from __future__ import annotations

import copy
import logging

from .workspace import Orientation, Point, Pose, WorkSpace, WsSphere, pose_and_sphere_size

log = logging.getLogger(__name__)


class Centering:
    """Moves every sphere centre and pose by minus the arm base position."""

    def __init__(self, arm_base_pose: Pose) -> None:
        self.arm_base_pose = copy.deepcopy(arm_base_pose)
        self._initial = WorkSpace()
        self._final = WorkSpace()
        self._sphere_count = 0
        self._pose_count = 0

    def set_initial_workspace(self, workspace: WorkSpace) -> None:
        self._initial = copy.deepcopy(workspace)
        self._sphere_count, self._pose_count = pose_and_sphere_size(self._initial)

    def _shift(self, point: Point) -> Point:
        base = self.arm_base_pose.position
        return Point(point.x - base.x, point.y - base.y, point.z - base.z)

    def create_centered_workspace(self) -> bool:
        """Build the centred workspace from the initial one.

        Positions are translated only; orientations and reachability
        indices are kept as they are.
        """
        final = WorkSpace(resolution=self._initial.resolution)
        total = self._sphere_count
        for index, sphere in enumerate(self._initial.spheres[:total], start=1):
            log.debug("Centering sphere: %d / %d", index, total)
            poses = [
                Pose(
                    self._shift(pose.position),
                    Orientation(
                        pose.orientation.x,
                        pose.orientation.y,
                        pose.orientation.z,
                        pose.orientation.w,
                    ),
                )
                for pose in sphere.poses
            ]
            final.spheres.append(WsSphere(point=self._shift(sphere.point), ri=sphere.ri, poses=poses))
        self._final = final
        return True

    def final_workspace(self) -> WorkSpace:
        return copy.deepcopy(self._final)