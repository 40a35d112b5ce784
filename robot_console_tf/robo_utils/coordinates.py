from __future__ import annotations

import math
from typing import Optional

import numpy as np
from scipy.spatial.transform import Rotation

_IDENTITY_QUAT = (0.0, 0.0, 0.0, 1.0)


def yaw_to_quaternion(yaw: float) -> np.ndarray:
    half = yaw * 0.5
    return np.asarray([0.0, 0.0, math.sin(half), math.cos(half)])


def quaternion_to_matrix(quat: np.ndarray) -> np.ndarray:
    """Rotation matrix of an (x, y, z, w) quaternion. The input is used as-is, not normalized."""
    x, y, z, w = (float(v) for v in quat)
    x2, y2, z2 = x + x, y + y, z + z
    xx, xy, xz = x * x2, x * y2, x * z2
    yy, yz, zz = y * y2, y * z2, z * z2
    wx, wy, wz = w * x2, w * y2, w * z2
    return np.asarray(
        [
            [1.0 - (yy + zz), xy - wz, xz + wy],
            [xy + wz, 1.0 - (xx + zz), yz - wx],
            [xz - wy, yz + wx, 1.0 - (xx + yy)],
        ]
    )


def matrix_to_quaternion(rot_matrix: np.ndarray) -> np.ndarray:
    if not np.all(np.isfinite(rot_matrix)):
        return np.full((4,), np.nan)
    return Rotation.from_matrix(rot_matrix).as_quat()


class RigidTransform:
    def __init__(
        self,
        translation: Optional[(tuple | np.ndarray)] = None,
        rotation: Optional[(tuple | np.ndarray)] = None,
    ):
        if translation is None:
            translation = (0.0, 0.0, 0.0)
        if rotation is None:
            rotation = _IDENTITY_QUAT
        self.translation: np.ndarray = np.asarray(translation, dtype=np.float64).reshape((-1,))
        self.rotation: np.ndarray = np.asarray(rotation, dtype=np.float64).reshape((-1,))
        assert self.translation.shape == (3,), f"translation has shape {self.translation.shape}!"
        assert self.rotation.shape == (4,), f"rotation has shape {self.rotation.shape}!"

    @classmethod
    def identity(cls) -> RigidTransform:
        return cls()

    @classmethod
    def from_xyz_quat(cls, x: float, y: float, z: float, qx: float, qy: float, qz: float, qw: float) -> RigidTransform:
        return cls((x, y, z), (qx, qy, qz, qw))

    @classmethod
    def from_xyz_rpy(
        cls, x: float, y: float, z: float, roll: float, pitch: float, yaw: float, degrees: bool = False
    ) -> RigidTransform:
        quat = Rotation.from_euler("xyz", [roll, pitch, yaw], degrees=degrees).as_quat()
        return cls((x, y, z), quat)

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> RigidTransform:
        matrix = np.asarray(matrix, dtype=np.float64)
        assert matrix.shape == (4, 4), f"matrix has shape {matrix.shape}!"
        return cls(matrix[:3, 3].copy(), matrix_to_quaternion(matrix[:3, :3]))

    def rot_matrix(self) -> np.ndarray:
        return quaternion_to_matrix(self.rotation)

    def as_matrix(self) -> np.ndarray:
        matrix = np.eye(4)
        matrix[:3, :3] = self.rot_matrix()
        matrix[:3, 3] = self.translation
        return matrix

    def inverse(self) -> RigidTransform:
        qx, qy, qz, qw = self.rotation
        conjugate = np.asarray([-qx, -qy, -qz, qw])
        translation = -(self.rot_matrix().T @ self.translation)
        return RigidTransform(translation, conjugate)

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Map points of shape (3,), (N, 3) or (N, 2) through the transform; a missing z is 0."""
        points = np.asarray(points, dtype=np.float64)
        single = points.ndim == 1
        pts = points.reshape((1, -1)) if single else points
        if pts.shape[1] == 2:
            pts = np.hstack([pts, np.zeros((pts.shape[0], 1))])
        assert pts.shape[1] == 3, f"points have shape {points.shape}!"
        result = pts @ self.rot_matrix().T + self.translation
        return result[0] if single else result

    def yaw(self) -> float:
        _, _, yaw = Rotation.from_quat(self.rotation).as_euler("xyz")
        return float(yaw)

    def allclose(self, other: RigidTransform, atol: float = 1e-9) -> bool:
        if not np.allclose(self.translation, other.translation, atol=atol):
            return False
        # q and -q are the same rotation
        return bool(
            np.allclose(self.rotation, other.rotation, atol=atol)
            or np.allclose(self.rotation, -other.rotation, atol=atol)
        )

    def __matmul__(self, other):
        assert isinstance(other, RigidTransform), f"other is type {type(other)}!"
        return RigidTransform.from_matrix(self.as_matrix() @ other.as_matrix())

    def __str__(self):
        coords = ", ".join(f"{v:.3f}" for v in self.translation)
        quat = ", ".join(f"{v:.3f}" for v in self.rotation)
        return f"RigidTransform(translation=({coords}), rotation=({quat}))"

    def __repr__(self):
        return self.__str__()


class Pose2D:
    def __init__(self, x: float = 0.0, y: float = 0.0, theta: float = 0.0):
        self.x = float(x)
        self.y = float(y)
        self.theta = float(theta)

    @staticmethod
    def from_transform(transform: RigidTransform) -> Pose2D:
        return Pose2D(transform.translation[0], transform.translation[1], transform.yaw())

    def to_transform(self) -> RigidTransform:
        return RigidTransform((self.x, self.y, 0.0), yaw_to_quaternion(self.theta))

    def as_tuple(self) -> tuple:
        return (self.x, self.y, self.theta)

    def __str__(self):
        return f"Pose2D(x={self.x:.2f}, y={self.y:.2f}, theta={self.theta:.2f})"

    def __repr__(self):
        return self.__str__()
