"""Generate a reachability map: discretise, filter by IK, optionally centre, save."""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Callable

from .centering import Centering
from .discretization import Discretization
from .reachability import ReachAbility
from .workspace import Pose, WorkSpace, create_name, pose_and_sphere_size

log = logging.getLogger(__name__)

Saver = Callable[[str, WorkSpace], object]


class MapGeneration:
    """Runs the map generation pipeline for one planning group.

    ``saver`` is called with the full output file name and the workspace to
    store.
    """

    def __init__(
        self,
        arm_pose: Pose,
        reachability: ReachAbility,
        saver: Saver,
        group_name: str,
        path: str,
        filename: str,
        pkg_name: str,
        resolution: float,
        radius: float,
        do_centering: bool = False,
    ) -> None:
        self.arm_pose = copy.deepcopy(arm_pose)
        self.reachability = reachability
        self.saver = saver
        self.group_name = group_name
        self.path = path
        self.filename = filename
        self.pkg_name = pkg_name
        self.resolution = resolution
        self.radius = radius
        self.do_centering = do_centering
        self.initial_size = (0, 0)
        self.final_size = (0, 0)

    def output_name(self) -> str:
        """File name of the map; "default" derives it from package, group and resolution."""
        if self.filename == "default":
            return create_name(self.pkg_name, self.group_name, self.resolution)
        return self.filename

    def _discretize(self) -> WorkSpace:
        log.info("Discretizing workspace with resolution %f and radius %f", self.resolution, self.radius)
        disc = Discretization(self.arm_pose, self.resolution, self.radius)
        disc.discretize()
        workspace = disc.initial_workspace()
        self.initial_size = pose_and_sphere_size(workspace)
        log.info("Initial workspace has %d spheres and %d poses", *self.initial_size)
        return workspace

    def _filter(self, workspace: WorkSpace) -> WorkSpace:
        self.reachability.set_initial_workspace(workspace)
        self.reachability.create_reachable_workspace()
        filtered = self.reachability.final_workspace()
        self.final_size = pose_and_sphere_size(filtered)
        return filtered

    def _center(self, workspace: WorkSpace) -> WorkSpace:
        centering = Centering(self.arm_pose)
        centering.set_initial_workspace(workspace)
        centering.create_centered_workspace()
        centered = centering.final_workspace()
        self.final_size = pose_and_sphere_size(centered)
        return centered

    def generate(self) -> WorkSpace:
        """Build and save the map; return the workspace that was saved."""
        start = time.monotonic()
        position = self.arm_pose.position
        log.info("Center of workspace   x:%f, y:%f, z:%f", position.x, position.y, position.z)
        initial = self._discretize()
        discretize_time = time.monotonic() - start
        log.info("Time for discretizing workspace %.2f seconds.", discretize_time)
        result = self._filter(initial)
        filter_time = time.monotonic() - start
        log.info("Time for creating reachable workspace is %.2f seconds.", filter_time)
        if self.do_centering:
            result = self._center(result)
        name = self.output_name()
        self.saver(self.path + name, copy.deepcopy(result))
        log.info("%s saved to %s", name, self.path)
        log.info("Final workspace has %d spheres and %d poses", *self.final_size)
        log.info("Completed")
        return result