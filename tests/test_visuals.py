import math

import pytest

from reachmap.geometry import Quaternion
from reachmap.visuals import (
    CapabilityMessage,
    CapMapVisual,
    CapShape,
    Disect,
    ReachMapVisual,
    ShapeKind,
    disect_range,
    reachability_color,
)
from reachmap.workspace import Orientation, Point, Pose, WorkSpace, WsSphere


def _pose(x=0.0, y=0.0, z=0.0, w=1.0):
    return Pose(Point(x, y, z), Orientation(0.0, 0.0, 0.0, w))


def _cap_message(ris, identifier=2.0):
    return CapabilityMessage([CapShape(identifier, ri, _pose(x=float(i))) for i, ri in enumerate(ris)])


def _workspace(ris, poses_per_sphere=2):
    return WorkSpace(
        resolution=0.1,
        spheres=[
            WsSphere(Point(float(i), 0.0, 0.0), ri, [_pose(x=float(i)) for _ in range(poses_per_sphere)])
            for i, ri in enumerate(ris)
        ],
    )


@pytest.mark.parametrize("size", [0, 1, 7, 10, 123])
def test_disect_full_and_halves_partition(size):
    assert disect_range(size, Disect.FULL) == (0, size)
    first = disect_range(size, Disect.FIRST_HALF)
    second = disect_range(size, Disect.SECOND_HALF)
    assert first[0] == 0 and second[1] == size
    assert first[1] == second[0]


@pytest.mark.parametrize("size", [0, 5, 10, 99])
def test_disect_slices_stay_in_bounds(size):
    for choice in (Disect.MIDDLE_SLICE, Disect.END_SLICE):
        low, up = disect_range(size, choice)
        assert 0 <= low <= up <= size


def test_disect_invalid_choice():
    with pytest.raises(ValueError):
        disect_range(10, 7)
    with pytest.raises(ValueError):
        disect_range(-1, Disect.FULL)


def test_reachability_color_thresholds():
    assert reachability_color(100) == (0, 0, 255)
    assert reachability_color(90) == (0, 0, 255)
    assert reachability_color(50) == (0, 255, 255)
    assert reachability_color(30) == (0, 255, 0)
    assert reachability_color(5) == (255, 255, 0)
    assert reachability_color(4) == (255, 0, 0)
    assert reachability_color(-3) == (255, 0, 0)


def test_cap_visual_low_bound_is_exclusive():
    visual = CapMapVisual()
    visual.set_message(_cap_message([10, 50, 95]), 10, 100)
    assert [m.ri for m in visual.shapes] == [50, 95]


def test_cap_visual_shape_kind_by_identifier():
    visual = CapMapVisual()
    visual.set_message(_cap_message([50], identifier=2.0), 0, 100)
    visual.set_message(_cap_message([50], identifier=1.0), 0, 100)
    assert [m.kind for m in visual.shapes] == [ShapeKind.SPHERE, ShapeKind.CONE]


def test_cap_visual_normalises_orientation():
    message = CapabilityMessage([CapShape(2.0, 50, _pose(w=2.0))])
    visual = CapMapVisual()
    visual.set_message(message, 0, 100)
    q = visual.shapes[0].orientation
    assert (q.x, q.y, q.z, q.w) == pytest.approx((0.0, 0.0, 0.0, 1.0))


def test_cap_visual_stops_at_invalid_pose():
    message = _cap_message([50, 50, 50])
    message.cap_shapes[1].pose.position.y = math.nan
    visual = CapMapVisual()
    visual.set_message(message, 0, 100)
    assert len(visual.shapes) == 1


def test_cap_visual_disect_first_half():
    visual = CapMapVisual()
    visual.set_message(_cap_message([50] * 6), 0, 100, Disect.FIRST_HALF)
    assert len(visual.shapes) == disect_range(6, Disect.FIRST_HALF)[1]


def test_cap_visual_colors_and_size():
    visual = CapMapVisual()
    visual.set_message(_cap_message([95, 3]), 0, 100)
    visual.set_color_by_ri(0.5)
    assert [m.color for m in visual.shapes] == [(0, 0, 255, 0.5), (255, 0, 0, 0.5)]
    visual.set_color(0.1, 0.2, 0.3, 0.4)
    assert all(m.color == (0.1, 0.2, 0.3, 0.4) for m in visual.shapes)
    visual.set_size(0.25)
    assert all(m.scale == (0.25, 0.25, 0.25) for m in visual.shapes)


def test_frame_position_and_orientation():
    visual = CapMapVisual()
    q = Quaternion.from_rpy(0.0, 0.0, 1.0)
    visual.set_frame_position((1.0, 2.0, 3.0))
    visual.set_frame_orientation(q)
    assert visual.frame_position == (1.0, 2.0, 3.0)
    assert visual.frame_orientation == q


def test_reach_visual_shapes_low_bound_inclusive():
    visual = ReachMapVisual()
    visual.set_message(_workspace([10, 50, 95]), False, True, 10, 100, ShapeKind.CUBE)
    assert [m.ri for m in visual.shapes] == [10, 50, 95]
    assert all(m.kind is ShapeKind.CUBE for m in visual.shapes)
    assert visual.arrows == []


def test_reach_visual_shape_orientation():
    visual = ReachMapVisual()
    visual.set_message(_workspace([50]), False, True, 0, 100)
    q = visual.shapes[0].orientation
    assert (q.x, q.y, q.z, q.w) == (0.0, 0.0, 1.0, 0.0)


def test_reach_visual_arrows_count_and_tilt():
    visual = ReachMapVisual()
    visual.set_message(_workspace([10, 50, 95], poses_per_sphere=3), True, False, 10, 100)
    assert len(visual.arrows) == 6
    expected = Quaternion.from_rpy(0.0, -math.pi / 2, 0.0).normalized()
    q = visual.arrows[0].orientation
    assert (q.x, q.y, q.z, q.w) == pytest.approx((expected.x, expected.y, expected.z, expected.w))
    assert visual.shapes == []


def test_reach_visual_invalid_arrow_stops_everything():
    workspace = _workspace([50, 50])
    workspace.spheres[0].poses[0].orientation = Orientation(0.0, 0.0, 0.0, 0.0)
    visual = ReachMapVisual()
    visual.set_message(workspace, True, True, 0, 100)
    assert visual.arrows == [] and visual.shapes == []


def test_reach_visual_invalid_sphere_stops_shapes():
    workspace = _workspace([50, 50, 50])
    workspace.spheres[1].point.z = math.nan
    visual = ReachMapVisual()
    visual.set_message(workspace, False, True, 0, 100)
    assert len(visual.shapes) == 1


def test_reach_visual_rejects_arrow_shape():
    with pytest.raises(ValueError):
        ReachMapVisual().set_message(_workspace([50]), False, True, 0, 100, ShapeKind.ARROW)
    with pytest.raises(ValueError):
        ReachMapVisual().set_message(_workspace([50]), False, True, 0, 100, 9)


def test_reach_visual_colors_and_sizes():
    visual = ReachMapVisual()
    visual.set_message(_workspace([60, 20]), True, True, 0, 100)
    visual.set_color_shape_by_ri(1.0)
    assert [m.color for m in visual.shapes] == [(0, 255, 255, 1.0), (255, 255, 0, 1.0)]
    visual.set_color_shape(1, 2, 3, 4)
    assert all(m.color == (1, 2, 3, 4) for m in visual.shapes)
    visual.set_color_arrow(5, 6, 7, 8)
    assert all(m.color == (5, 6, 7, 8) for m in visual.arrows)
    visual.set_size_arrow(0.5)
    visual.set_size_shape(0.75)
    assert all(m.scale == (0.5, 0.5, 0.5) for m in visual.arrows)
    assert all(m.scale == (0.75, 0.75, 0.75) for m in visual.shapes)