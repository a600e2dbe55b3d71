import math

import pytest

from reachmap.geometry import Quaternion, Transform
from reachmap.workspace import Orientation, Point, Pose


def _q(q):
    return (q.x, q.y, q.z, q.w)


def _same_rotation(a, b):
    va, vb = _q(a.normalized()), _q(b.normalized())
    if va[3] * vb[3] < 0 or (va[3] == 0 and sum(x * y for x, y in zip(va, vb)) < 0):
        vb = tuple(-c for c in vb)
    return va == pytest.approx(vb, abs=1e-9)


def test_zero_angles_give_identity():
    assert _q(Quaternion.from_rpy(0.0, 0.0, 0.0)) == (0.0, 0.0, 0.0, 1.0)


@pytest.mark.parametrize("rpy", [(0.3, -0.4, 1.2), (0.0, 0.0, -1.58), (-1.0, 0.7, 2.9)])
def test_rpy_round_trip(rpy):
    assert Quaternion.from_rpy(*rpy).to_rpy() == pytest.approx(rpy, abs=1e-9)


def test_from_rpy_is_unit_length():
    q = Quaternion.from_rpy(0.5, 1.1, -2.0)
    assert q.length == pytest.approx(1.0)


def test_normalized_has_unit_length_and_same_direction():
    q = Quaternion(1.0, 2.0, 3.0, 4.0).normalized()
    assert q.length == pytest.approx(1.0)
    assert q.y / q.x == pytest.approx(2.0)


def test_normalizing_zero_raises():
    with pytest.raises(ValueError):
        Quaternion(0.0, 0.0, 0.0, 0.0).normalized()


def test_rotate_preserves_norm():
    q = Quaternion.from_rpy(0.2, -0.9, 1.4)
    v = (0.3, -1.2, 2.5)
    assert math.dist((0, 0, 0), q.rotate(v)) == pytest.approx(math.dist((0, 0, 0), v))


def test_quarter_turn_about_z():
    q = Quaternion.from_rpy(0.0, 0.0, math.pi / 2)
    assert q.rotate((1.0, 0.0, 0.0)) == pytest.approx((0.0, 1.0, 0.0), abs=1e-12)


def test_yaw_composition_adds_angles():
    combined = Quaternion.from_rpy(0, 0, 0.4) * Quaternion.from_rpy(0, 0, 0.9)
    assert combined.to_rpy() == pytest.approx((0.0, 0.0, 1.3), abs=1e-9)


def test_multiplication_rejects_other_types():
    with pytest.raises(TypeError):
        Quaternion() * 2.0


def test_product_rotation_matches_sequential_rotation():
    a = Quaternion.from_rpy(0.1, 0.2, 0.3)
    b = Quaternion.from_rpy(-0.5, 0.4, 1.0)
    v = (1.0, -2.0, 0.5)
    assert (a * b).rotate(v) == pytest.approx(a.rotate(b.rotate(v)))


def test_transform_pose_round_trip():
    q = Quaternion.from_rpy(0.1, 0.2, 0.3)
    pose = Pose(Point(1.0, -2.0, 3.0), Orientation(q.x, q.y, q.z, q.w))
    assert Transform.from_pose(pose).to_pose() == pose


def test_transform_times_inverse_is_identity():
    t = Transform((0.5, -1.0, 2.0), Quaternion.from_rpy(0.3, -0.2, 1.1))
    ident = t * t.inverse()
    assert ident.translation == pytest.approx((0.0, 0.0, 0.0), abs=1e-12)
    assert _same_rotation(ident.rotation, Quaternion())


def test_transform_composition_is_associative():
    a = Transform((1.0, 0.0, 0.0), Quaternion.from_rpy(0, 0, 0.5))
    b = Transform((0.0, 2.0, -1.0), Quaternion.from_rpy(0.2, 0, 0))
    c = Transform((0.3, 0.3, 0.3), Quaternion.from_rpy(0, -0.4, 0))
    left, right = (a * b) * c, a * (b * c)
    assert left.translation == pytest.approx(right.translation)
    assert _same_rotation(left.rotation, right.rotation)


def test_inverse_of_product():
    a = Transform((1.0, 2.0, 3.0), Quaternion.from_rpy(0.1, 0.5, -0.3))
    b = Transform((-1.0, 0.5, 0.0), Quaternion.from_rpy(-0.7, 0.0, 0.9))
    lhs, rhs = (a * b).inverse(), b.inverse() * a.inverse()
    assert lhs.translation == pytest.approx(rhs.translation)
    assert _same_rotation(lhs.rotation, rhs.rotation)


def test_apply_then_inverse_returns_point():
    t = Transform((0.2, 0.4, -0.6), Quaternion.from_rpy(1.0, 0.1, -0.4))
    p = (3.0, -1.0, 0.25)
    assert t.inverse().apply(t.apply(p)) == pytest.approx(p)