"""
FrameTransformer for resolving transforms between frames of a FrameRegistry.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ..frame_registry import FrameRegistry, normalize_frame_id
from .coordinates import RigidTransform


def _rigid_inverse(matrix: np.ndarray) -> np.ndarray:
    inverse = np.eye(4)
    rot_t = matrix[:3, :3].T
    inverse[:3, :3] = rot_t
    inverse[:3, 3] = -(rot_t @ matrix[:3, 3])
    return inverse


class FrameTransformer:
    def __init__(self, registry: FrameRegistry, logger=None):
        self.registry = registry
        self.logger = logger or logging.getLogger(__name__)

    def _chains(self, target_frame: str, source_frame: str):
        target = self.registry.get_frame(target_frame)
        source = self.registry.get_frame(source_frame)
        if target is None or source is None:
            missing = target_frame if target is None else source_frame
            self.logger.debug(f"Frame '{missing}' is not known yet")
            return None
        source_chain = self.registry.ancestor_indices(source.index)
        target_chain = self.registry.ancestor_indices(target.index)
        if source_chain is None or target_chain is None:
            return None
        return source_chain, target_chain

    @staticmethod
    def _common_ancestor(source_chain: list[int], target_chain: list[int]) -> Optional[int]:
        target_members = set(target_chain)
        for index in source_chain:
            if index in target_members:
                return index
        return None

    def lowest_common_ancestor(self, frame_a: str, frame_b: str) -> Optional[str]:
        chains = self._chains(frame_b, frame_a)
        if chains is None:
            return None
        common = self._common_ancestor(*chains)
        return None if common is None else self.registry.frame_at(common).id

    def _edge_matrix(self, index: int) -> np.ndarray:
        transform = self.registry.frame_at(index).transform_to_parent
        if transform is None:
            return np.eye(4)
        return transform.as_matrix()

    def get_tf_matrix(self, target_frame: str, source_frame: str) -> Optional[np.ndarray]:
        """
        4x4 matrix taking points expressed in source_frame to target_frame,
        or None if the frames are not (yet) connected.
        """
        if normalize_frame_id(target_frame) == normalize_frame_id(source_frame):
            return np.eye(4)

        chains = self._chains(target_frame, source_frame)
        if chains is None:
            return None
        source_chain, target_chain = chains
        common = self._common_ancestor(source_chain, target_chain)
        if common is None:
            self.logger.debug(f"No common ancestor for '{source_frame}' and '{target_frame}'")
            return None

        # source -> common: each edge is child pose in parent, so it wraps what we have so far
        result = np.eye(4)
        for index in source_chain[: source_chain.index(common)]:
            result = self._edge_matrix(index) @ result

        # common -> target: inverted edges, starting next to the common ancestor
        target_leg = target_chain[: target_chain.index(common)]
        for index in reversed(target_leg):
            result = _rigid_inverse(self._edge_matrix(index)) @ result
        return result

    def resolve(self, target_frame: str, source_frame: str) -> Optional[RigidTransform]:
        if normalize_frame_id(target_frame) == normalize_frame_id(source_frame):
            return RigidTransform.identity()
        matrix = self.get_tf_matrix(target_frame, source_frame)
        if matrix is None:
            return None
        return RigidTransform.from_matrix(matrix)

    def transform_points(self, points: np.ndarray, source_frame: str, target_frame: str) -> Optional[np.ndarray]:
        transform = self.resolve(target_frame, source_frame)
        if transform is None:
            return None
        return transform.apply(points)

    def transform(self, start_frame: str, end_frame: str, start_pose: RigidTransform) -> Optional[RigidTransform]:
        """Re-express a pose given in start_frame in end_frame."""
        transform = self.resolve(end_frame, start_frame)
        if transform is None:
            return None
        return transform @ start_pose
