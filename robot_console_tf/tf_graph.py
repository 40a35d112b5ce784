#!/usr/bin/env python3
import logging
import threading
from typing import Iterable, List, Optional

import numpy as np

from robot_console_tf.change_notifier import ChangeNotifier
from robot_console_tf.frame_registry import FrameRegistry, normalize_frame_id
from robot_console_tf.robo_utils.coordinates import Pose2D, RigidTransform
from robot_console_tf.robo_utils.frame_transformer import FrameTransformer
from robot_console_tf.tf_messages import TransformStamped


class TransformGraph:
  """
  The transform graph of one console session.
  Aggregates the frame registry, the path resolver and the change notifier.
  Pass one instance to every consumer that needs to place things in a frame.
  """
  def __init__(self, registry=None, notifier=None, logger=None):
    self.logger = logger or logging.getLogger(__name__)
    self.registry = registry if registry is not None else FrameRegistry(logger=self.logger)
    self.notifier = notifier if notifier is not None else ChangeNotifier()
    self.transformer = FrameTransformer(self.registry, logger=self.logger)
    self._lock = threading.RLock()

  # --- ingestion -------------------------------------------------------

  def add_transforms(self, records: Iterable[TransformStamped]) -> int:
    """Fold a batch of static or dynamic records into the graph; notifies once per batch."""
    count = 0
    with self._lock:
      for record in records:
        self.registry.upsert_edge(record.child_frame_id, record.parent_frame_id, record.transform)
        count += 1
      if count:
        self.notifier.notify()
    return count

  def add_transform(self, record: TransformStamped) -> None:
    self.add_transforms([record])

  def clear(self) -> None:
    """Forget every frame (connection torn down) and tell subscribers."""
    with self._lock:
      self.registry.clear()
      self.notifier.notify()
    self.logger.info("Transform graph cleared")

  def on_transform_change(self, callback):
    return self.notifier.subscribe(callback)

  # --- queries ---------------------------------------------------------

  def has_frame(self, frame_id) -> bool:
    with self._lock:
      return self.registry.has_frame(frame_id)

  def frame_ids(self) -> List[str]:
    with self._lock:
      return self.registry.frame_ids()

  @staticmethod
  def are_frames_equal(frame_a, frame_b) -> bool:
    return normalize_frame_id(frame_a) == normalize_frame_id(frame_b)

  def lookup(self, target_frame, source_frame) -> Optional[RigidTransform]:
    with self._lock:
      return self.transformer.resolve(target_frame, source_frame)

  def get_transform_matrix(self, source_frame, target_frame) -> Optional[np.ndarray]:
    with self._lock:
      return self.transformer.get_tf_matrix(target_frame, source_frame)

  def transform_point(self, point, source_frame, target_frame) -> Optional[np.ndarray]:
    transform = self.lookup(target_frame, source_frame)
    if transform is None:
      return None
    return transform.apply(np.asarray(point, dtype=np.float64).reshape((-1,)))

  def transform_points(self, points, source_frame, target_frame) -> Optional[np.ndarray]:
    """Points as an (N, 2) or (N, 3) array-like; a missing z is taken as 0."""
    transform = self.lookup(target_frame, source_frame)
    if transform is None:
      return None
    pts = np.asarray(points, dtype=np.float64)
    if pts.size == 0:
      return np.zeros((0, 3))
    return transform.apply(pts.reshape((len(pts), -1)))

  def robot_pose(self, map_frame='map', base_frame='base_link') -> Optional[Pose2D]:
    transform = self.lookup(map_frame, base_frame)
    if transform is None:
      return None
    return Pose2D.from_transform(transform)

  def format_tree(self) -> str:
    with self._lock:
      lines = []
      stack = [(self.registry.get_frame(root_id), 0) for root_id in reversed(self.registry.root_ids())]
      while stack:
        frame, depth = stack.pop()
        lines.append(f"{'  ' * depth}{frame.id}")
        for child in reversed(list(frame.children)):
          stack.append((self.registry.frame_at(child), depth + 1))
      return "\n".join(lines)
