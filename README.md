# reachmap

`reachmap` builds and inspects reachability maps for robot arms. A map
covers the space around the arm with spheres. Each sphere holds the poses
that the arm can reach, and a reachability index (RI). The RI is the
number of reachable poses on the sphere as a percentage of the poses tried
per sphere.

The package is pure Python. It has no dependencies outside the standard
library.

## Modules

- `reachmap.geometry` has two classes.
  - `Quaternion` supports `from_rpy`, `to_rpy`, `normalized`, `rotate`
    and multiplication.
  - `Transform` is a rotation plus a translation. It supports
    `from_pose`, `to_pose`, `inverse`, `apply` and composition with `*`.
- `reachmap.workspace` holds the map's data types: `Point`,
  `Orientation`, `Pose`, `WsSphere` and `WorkSpace`. It also has these
  helpers:
  - `point_to_vector`, `vector_to_point`, `pose_to_vector` and
    `vector_to_pose`.
  - `pose_and_sphere_size`, which returns `(spheres, poses)`.
  - `get_robot_name`, which returns the part of a package name before
    `_moveit`.
  - `create_name`, which builds the default map file name
    `<robot>_<group>_<resolution>_reachability.h5`.
- `reachmap.discretization` has three parts.
  - `box_tree_centers` returns voxel centres on a grid around an origin.
  - `poses_on_sphere` returns 50 poses on a sphere, each pointing at its
    centre.
  - `Discretization` combines the two into the initial, unfiltered
    `WorkSpace`.
- `reachmap.reachability` has these parts.
  - `ReachAbility` asks an IK solver callback about every pose. It keeps
    the reachable ones and gives each sphere its RI. Spheres with no
    reachable pose are dropped, and the rest come out ordered by their
    centre coordinates.
  - The solver receives an `IKRequest`. It returns a mapping from joint
    name to position, or `None` when the pose is unreachable. It raises
    `IKServiceError` when it cannot be called at all.
  - `transform_task_pose` expresses a pose relative to a given base pose.
- `reachmap.centering`: `Centering` subtracts the arm base position from
  every sphere centre and pose position. Orientations and RI values stay
  as they are.
- `reachmap.map_generation`: `MapGeneration` runs the steps in order:
  discretize, filter by IK, and centre if asked. It passes the result to
  a saver callback you supply, along with `path + output_name()`. When
  the file name is `"default"`, `output_name()` builds it with
  `create_name`. `generate()` returns the saved workspace.
- `reachmap.visuals` builds scene models that do not depend on any
  renderer.
  - `CapMapVisual` and `ReachMapVisual` turn messages into `Marker`
    objects.
  - They filter by an RI range and by a `Disect` slice (see
    `disect_range`).
  - They can colour markers either with a fixed colour or by RI (see
    `reachability_color`).
- `reachmap.displays`: `CapMapDisplay` and `ReachMapDisplay` hold the
  display settings and keep one visual per processed message.
  - Settings cover colours, alpha, size, shape kind, RI bounds and the
    disect choice.
  - Colours are 8-bit and are passed to the visuals scaled to 0..1.
- `reachmap.navigation` works with candidate base poses.
  - `BasePlacementNavigator` collects the poses. An empty pose marks the
    pose received just before it as the best one and closes collection.
    Receiving a pose after that raises `PoseCollectionClosed`.
  - `move_robot` and `move_arm` try the stored poses in order through a
    navigation callback. Each returns a `TriggerResponse` and then resets
    the navigator.
  - `fix_base_orientation` gives a pose that has no orientation a yaw
    that faces a table.
  - `arm_to_base` converts a torso lift link pose into a ground-level
    base pose plus a torso height. `clamp_torso` limits that height to
    the range 0.03–0.34.

## Example

```python
from reachmap.workspace import Point, Pose
from reachmap.reachability import ReachAbility
from reachmap.map_generation import MapGeneration

arm_base = Pose(position=Point(0.0, 0.0, 0.5))

def solver(request):
    # Pretend everything below 1 m is reachable.
    if request.pose.position.z < 1.0:
        return {"j1": 0.0, "j2": 0.0}
    return None

saved = {}

def saver(name, workspace):
    saved[name] = workspace

reach = ReachAbility(solver, "arm", ["j1", "j2"], False, "base_link")
workspace = MapGeneration(
    arm_base, reach, saver, "arm", "maps/", "default",
    "myrobot_moveit_config", 0.5, 0.5, True,
).generate()

print(list(saved))  # ['maps/myrobot_arm_0.5_reachability.h5']
print(len(workspace.spheres))
```

## What the package does not do

The package works through callbacks and in-memory data. You supply the
following pieces yourself:

- **Map files.** The package does not read or write HDF5 (or any other)
  files. `MapGeneration` only hands the finished `WorkSpace` to your saver.
- **Inverse kinematics.** No IK solver is included. `ReachAbility` calls
  the solver you pass in.
- **Robot and rendering.** No robot middleware, navigation stack, torso
  controller or 3D viewer is included. The navigator calls your
  `navigate` and `move_torso` functions. The visuals and displays only
  hold `Marker` data and do not draw anything.
- **Command line.** The package has no command-line program.

## Running the tests

```
pip install .[test]
pytest
```