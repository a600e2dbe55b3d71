"""Filter a workspace down to the poses an inverse-kinematics solver can reach."""

from __future__ import annotations

import copy
import logging
import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from .geometry import Transform
from .workspace import Pose, WorkSpace, WsSphere, point_to_vector, pose_and_sphere_size, pose_to_vector, vector_to_point, vector_to_pose

log = logging.getLogger(__name__)

IK_TIMEOUT = 0.1

RobotState = Mapping[str, float]


class IKServiceError(RuntimeError):
    """The inverse-kinematics service could not be called."""


@dataclass(frozen=True)
class IKRequest:
    """A position IK query for one planning group."""

    group_name: str
    frame_id: str
    pose: Pose
    avoid_collisions: bool
    timeout: float = IK_TIMEOUT


IKSolver = Callable[[IKRequest], "RobotState | None"]


def transform_task_pose(base_pose: Pose, pose: Pose) -> Pose:
    """Express ``pose`` relative to a robot placed at ``base_pose``."""
    return (Transform.from_pose(pose) * Transform.from_pose(base_pose).inverse()).to_pose()


class ReachAbility:
    """Asks an IK solver which workspace poses are reachable.

    ``solver`` takes an :class:`IKRequest` and returns a mapping of joint
    names to positions when a solution exists, or ``None`` when it does not.
    It raises :class:`IKServiceError` when the service cannot be reached.
    """

    def __init__(
        self,
        solver: IKSolver,
        group_name: str,
        joint_names: Sequence[str],
        check_collision: bool = False,
        planning_frame: str = "",
    ) -> None:
        self.solver = solver
        self.group_name = group_name
        self.joint_names = list(joint_names)
        self.check_collision = check_collision
        self.planning_frame = planning_frame
        self._initial = WorkSpace()
        self._final = WorkSpace()
        self._sphere_count = 0
        self._pose_count = 0

    def set_initial_workspace(self, workspace: WorkSpace) -> None:
        self._initial = copy.deepcopy(workspace)
        self._sphere_count, self._pose_count = pose_and_sphere_size(self._initial)

    def final_workspace(self) -> WorkSpace:
        return copy.deepcopy(self._final)

    def _request(self, pose: Pose) -> IKRequest:
        return IKRequest(
            group_name=self.group_name,
            frame_id=self.planning_frame,
            pose=copy.deepcopy(pose),
            avoid_collisions=self.check_collision,
        )

    def _joints(self, state: RobotState) -> list[float]:
        missing = [name for name in self.joint_names if name not in state]
        if missing:
            raise ValueError(f"IK solution lacks joints: {', '.join(missing)}")
        return [state[name] for name in self.joint_names]

    def ik_solution(self, pose: Pose) -> RobotState | None:
        """Return the robot state reaching ``pose``, or ``None``."""
        p, o = pose.position, pose.orientation
        log.debug("Requesting IK solution for position (%f, %f, %f) orientation (%f, %f, %f, %f)",
                  p.x, p.y, p.z, o.x, o.y, o.z, o.w)
        return self.solver(self._request(pose))

    def joint_solution(self, pose: Pose) -> list[float] | None:
        """Return the group's joint positions reaching ``pose``, or ``None``."""
        state = self.solver(self._request(pose))
        return None if state is None else self._joints(state)

    def ik_solution_from_base(self, base_pose: Pose, pose: Pose) -> RobotState | None:
        return self.solver(self._request(transform_task_pose(base_pose, pose)))

    def joint_solution_from_base(self, base_pose: Pose, pose: Pose) -> list[float] | None:
        state = self.solver(self._request(transform_task_pose(base_pose, pose)))
        return None if state is None else self._joints(state)

    def create_reachable_workspace(self) -> bool:
        """Keep reachable poses and give each sphere its reachability index.

        Spheres come out ordered by centre coordinates; a sphere with no
        reachable pose is dropped.
        """
        reached: dict[tuple[float, ...], list[list[float]]] = {}
        total = self._sphere_count
        for index, sphere in enumerate(self._initial.spheres[:total], start=1):
            log.info("Processing sphere: %d / %d", index, total)
            key = tuple(point_to_vector(sphere.point))
            for pose in sphere.poses:
                if self.ik_solution(pose) is not None:
                    log.debug("SUCCESS: Pose was reached!")
                    reached.setdefault(key, []).append(pose_to_vector(pose))
                else:
                    log.debug("FAIL: Pose was not reached")

        per_sphere = self._pose_count // self._sphere_count if self._sphere_count else 0
        final = WorkSpace(resolution=self._initial.resolution)
        for key in sorted(reached):
            poses = reached[key]
            ri = len(poses) / per_sphere * 100 if per_sphere else math.inf
            final.spheres.append(
                WsSphere(
                    point=vector_to_point(key),
                    ri=float(ri),
                    poses=[vector_to_pose(vec) for vec in poses],
                )
            )
        self._final = final
        return True