"""Workspace data types and conversions between poses and flat vectors."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass
class Point:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Orientation:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0


@dataclass
class Pose:
    position: Point = field(default_factory=Point)
    orientation: Orientation = field(default_factory=Orientation)


@dataclass
class WsSphere:
    """A workspace voxel: its centre, reachability index and poses."""

    point: Point = field(default_factory=Point)
    ri: float = 0.0
    poses: list[Pose] = field(default_factory=list)


@dataclass
class WorkSpace:
    resolution: float = 0.0
    spheres: list[WsSphere] = field(default_factory=list)


def point_to_vector(point: Point) -> list[float]:
    return [float(point.x), float(point.y), float(point.z)]


def vector_to_point(data: Sequence[float]) -> Point:
    if len(data) < 3:
        raise ValueError(f"a point needs 3 values, got {len(data)}")
    return Point(data[0], data[1], data[2])


def pose_to_vector(pose: Pose) -> list[float]:
    p, o = pose.position, pose.orientation
    return [float(v) for v in (p.x, p.y, p.z, o.x, o.y, o.z, o.w)]


def vector_to_pose(data: Sequence[float]) -> Pose:
    if len(data) < 7:
        raise ValueError(f"a pose needs 7 values, got {len(data)}")
    return Pose(Point(data[0], data[1], data[2]), Orientation(data[3], data[4], data[5], data[6]))


def pose_and_sphere_size(workspace: WorkSpace) -> tuple[int, int]:
    """Return (number of spheres, total number of poses)."""
    return len(workspace.spheres), sum(len(sphere.poses) for sphere in workspace.spheres)


def get_robot_name(pkg_name: str) -> str:
    """Return the part of a MoveIt package name before "_moveit", or ""."""
    found = pkg_name.find("_moveit")
    return pkg_name[:found] if found != -1 else ""


def create_name(pkg_name: str, group_name: str, resolution: float) -> str:
    """Default reachability map file name for a robot group and resolution."""
    return f"{get_robot_name(pkg_name)}_{group_name}_{resolution:g}_reachability.h5"