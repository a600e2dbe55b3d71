"""Voxel discretisation of the space around an arm and sampled poses per voxel."""

from __future__ import annotations

import copy
import math
import struct
from collections.abc import Iterator

from .geometry import Quaternion
from .workspace import Orientation, Point, Pose, WorkSpace, WsSphere

_FLOAT32 = struct.Struct("f")
_TREE_MAX_VAL = 32768
_KEY_DEPTH = 16
_POSES_PER_SPHERE = 2 * 5 * 5


def _f32(value: float) -> float:
    return _FLOAT32.unpack(_FLOAT32.pack(value))[0]


def _axis_values(start: float, stop: float, step: float) -> Iterator[float]:
    value = _f32(start)
    while value <= stop:
        yield value
        value = _f32(value + step)


def _morton(key: tuple[int, int, int]) -> int:
    kx, ky, kz = key
    code = 0
    for bit in range(_KEY_DEPTH):
        code |= ((kx >> bit) & 1) << (3 * bit)
        code |= ((ky >> bit) & 1) << (3 * bit + 1)
        code |= ((kz >> bit) & 1) << (3 * bit + 2)
    return code


def box_tree_centers(origin: Point, resolution: float, diameter: float) -> list[Point]:
    """Voxel centres of a box grid around ``origin``, in octree leaf order.

    Grid points are stepped by ``resolution`` (in single precision) over
    +/-1.5 * ``diameter`` in x and y and from 0 up to origin z + 1.5 * ``diameter``
    in z; each lands in a voxel of half the resolution.
    """
    if resolution <= 0:
        raise ValueError("resolution must be positive")
    ox, oy, oz = _f32(origin.x), _f32(origin.y), _f32(origin.z)
    extent = diameter * 1.5
    tree_res = _f32(resolution) / 2
    factor = 1.0 / tree_res

    keys: set[tuple[int, int, int]] = set()
    for x in _axis_values(ox - extent, ox + extent, resolution):
        for y in _axis_values(oy - extent, oy + extent, resolution):
            for z in _axis_values(0.0, oz + extent, resolution):
                key = tuple(math.floor(factor * c) + _TREE_MAX_VAL for c in (x, y, z))
                if all(0 <= k < 2 * _TREE_MAX_VAL for k in key):
                    keys.add(key)

    def coordinate(k: int) -> float:
        return _f32(((k - _TREE_MAX_VAL) + 0.5) * tree_res)

    return [Point(*(coordinate(k) for k in key)) for key in sorted(keys, key=_morton)]


def _sphere_directions() -> tuple[tuple[tuple[float, float, float], Quaternion], ...]:
    delta = math.pi / 5.0
    directions = []
    phi = 0.0
    while phi < 2 * math.pi:
        theta = 0.0
        while theta < math.pi:
            unit = (math.cos(phi) * math.sin(theta), math.sin(phi) * math.sin(theta), math.cos(theta))
            directions.append((unit, Quaternion.from_rpy(0.0, math.pi / 2 + theta, phi).normalized()))
            theta += delta
        phi += delta
    return tuple(directions[:_POSES_PER_SPHERE])


_DIRECTIONS = _sphere_directions()


def poses_on_sphere(center: Point, radius: float) -> list[Pose]:
    """Fifty poses on a sphere around ``center``, each pointing at the centre."""
    return [
        Pose(
            Point(radius * ux + center.x, radius * uy + center.y, radius * uz + center.z),
            Orientation(q.x, q.y, q.z, q.w),
        )
        for (ux, uy, uz), q in _DIRECTIONS
    ]


class Discretization:
    """Builds the initial, unfiltered workspace around an arm base pose."""

    def __init__(
        self,
        pose: Pose | None = None,
        resolution: float | None = None,
        radius: float | None = None,
    ) -> None:
        if pose is None:
            self._center = Point()
            default_resolution, default_radius = 0.08, 1.0
        else:
            self._center = Point(pose.position.x, pose.position.y, pose.position.z)
            default_resolution, default_radius = 0.1, 0.8
        self.resolution = default_resolution if resolution is None else resolution
        self.radius = default_radius if radius is None else radius
        self._centers: list[Point] = []
        self._poses: list[Pose] = []
        self._workspace = WorkSpace()

    def discretize(self) -> None:
        """Fill the workspace with voxel centres and their sampled poses."""
        self._centers = box_tree_centers(self._center, self.resolution, self.radius)
        self._poses = []
        workspace = WorkSpace(resolution=self.resolution)
        for center in self._centers:
            sphere_poses = poses_on_sphere(center, self.resolution)
            self._poses.extend(sphere_poses)
            workspace.spheres.append(WsSphere(point=copy.copy(center), poses=sphere_poses))
        self._workspace = workspace

    def num_spheres(self) -> int:
        return len(self._centers)

    def num_poses(self) -> int:
        return len(self._poses)

    def initial_workspace(self) -> WorkSpace:
        return copy.deepcopy(self._workspace)

    def centers(self) -> list[Point]:
        return [copy.copy(point) for point in self._centers]