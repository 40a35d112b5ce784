import math

import numpy as np
import pytest

from robot_console_tf.robo_utils.coordinates import (
    Pose2D,
    RigidTransform,
    quaternion_to_matrix,
    yaw_to_quaternion,
)


def test_identity_matrix():
    np.testing.assert_allclose(RigidTransform.identity().as_matrix(), np.eye(4))


def test_yaw_rotation_moves_x_axis_to_y_axis():
    transform = RigidTransform.from_xyz_rpy(5.0, 10.0, 0.0, 0.0, 0.0, math.pi / 2)
    np.testing.assert_allclose(transform.apply((1.0, 0.0, 0.0)), (5.0, 11.0, 0.0), atol=1e-12)


def test_apply_accepts_planar_points():
    transform = RigidTransform((1.0, 2.0, 3.0))
    result = transform.apply(np.asarray([[0.0, 0.0], [1.0, 1.0]]))
    np.testing.assert_allclose(result, [[1.0, 2.0, 3.0], [2.0, 3.0, 3.0]])


def test_inverse_undoes_transform():
    transform = RigidTransform.from_xyz_rpy(1.0, -2.0, 0.5, 0.1, -0.4, 2.0)
    composed = transform.inverse() @ transform
    assert composed.allclose(RigidTransform.identity(), atol=1e-12)
    np.testing.assert_allclose(
        transform.inverse().as_matrix(), np.linalg.inv(transform.as_matrix()), atol=1e-12
    )


def test_composition_applies_right_operand_first():
    a = RigidTransform((10.0, 0.0, 0.0))
    b = RigidTransform.from_xyz_rpy(0.0, 0.0, 0.0, 0.0, 0.0, math.pi / 2)
    np.testing.assert_allclose((a @ b).apply((1.0, 0.0, 0.0)), (10.0, 1.0, 0.0), atol=1e-12)
    np.testing.assert_allclose((b @ a).apply((1.0, 0.0, 0.0)), (0.0, 11.0, 0.0), atol=1e-12)


def test_from_matrix_returns_unit_quaternion():
    transform = RigidTransform.from_xyz_rpy(0.0, 0.0, 0.0, 0.3, 0.2, 0.1)
    rebuilt = RigidTransform.from_matrix(transform.as_matrix())
    assert np.linalg.norm(rebuilt.rotation) == pytest.approx(1.0)
    assert rebuilt.allclose(transform, atol=1e-12)


def test_nan_passes_through_without_raising():
    matrix = RigidTransform((0.0, 0.0, 0.0), (np.nan, 0.0, 0.0, 1.0)).as_matrix()
    rebuilt = RigidTransform.from_matrix(matrix)
    assert np.all(np.isnan(rebuilt.rotation))


def test_allclose_ignores_quaternion_sign():
    q = yaw_to_quaternion(0.7)
    assert RigidTransform(rotation=q).allclose(RigidTransform(rotation=-q))


def test_quaternion_to_matrix_matches_known_rotation():
    expected = np.asarray([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
    np.testing.assert_allclose(quaternion_to_matrix(yaw_to_quaternion(math.pi / 2)), expected, atol=1e-12)


def test_pose2d_from_transform():
    pose = Pose2D.from_transform(RigidTransform.from_xyz_rpy(3.0, 4.0, 0.0, 0.0, 0.0, -1.2))
    assert pose.as_tuple() == pytest.approx((3.0, 4.0, -1.2))
    assert pose.to_transform().allclose(RigidTransform.from_xyz_rpy(3.0, 4.0, 0.0, 0.0, 0.0, -1.2))
