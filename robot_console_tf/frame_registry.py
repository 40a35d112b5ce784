#!/usr/bin/env python3
import logging
from typing import Dict, List, Optional

from robot_console_tf.robo_utils.coordinates import RigidTransform


def normalize_frame_id(frame_id):
  """'/map' and 'map' name the same frame."""
  if not isinstance(frame_id, str):
    raise TypeError(f"Frame id must be a string, got {type(frame_id).__name__}")
  return frame_id[1:] if frame_id.startswith('/') else frame_id


class Frame:
  """
  A named coordinate frame. Parent and children are arena indices into the
  owning FrameRegistry, never direct references.
  """
  def __init__(self, index: int, frame_id: str):
    self.index = index
    self.id = frame_id
    self.parent: Optional[int] = None
    # dict keys keep insertion order
    self.children: Dict[int, None] = {}
    self.transform_to_parent: Optional[RigidTransform] = None

  @property
  def is_root(self):
    return self.parent is None

  def __repr__(self):
    return f"Frame(id={self.id!r}, parent={self.parent}, children={list(self.children)})"


class FrameRegistry:
  """
  Owns every frame of one session. Frames are created lazily the first time
  an edge names them and are only dropped by clear().
  """
  def __init__(self, logger=None):
    self.logger = logger or logging.getLogger(__name__)
    self._frames: List[Frame] = []
    self._index: Dict[str, int] = {}

  def __len__(self):
    return len(self._frames)

  def _get_or_create(self, frame_id: str) -> Frame:
    index = self._index.get(frame_id)
    if index is not None:
      return self._frames[index]
    frame = Frame(len(self._frames), frame_id)
    self._frames.append(frame)
    self._index[frame_id] = frame.index
    self.logger.debug(f"Registered frame '{frame_id}' (#{frame.index})")
    return frame

  def _would_create_cycle(self, child: Frame, parent: Frame) -> bool:
    current = parent.index
    for _ in range(len(self._frames)):
      if current == child.index:
        return True
      current = self._frames[current].parent
      if current is None:
        return False
    # walk never reached a root: the graph is already malformed
    return True

  def upsert_edge(self, child_id, parent_id, transform: RigidTransform) -> bool:
    """
    Set the latest transform of child_id expressed in parent_id.
    Returns False if the edge was rejected because it would close a cycle.
    """
    child_id = normalize_frame_id(child_id)
    parent_id = normalize_frame_id(parent_id)
    parent = self._get_or_create(parent_id)
    child = self._get_or_create(child_id)

    if child.parent != parent.index and self._would_create_cycle(child, parent):
      self.logger.warning(
        f"Rejected transform '{parent_id}' -> '{child_id}': '{child_id}' would become its own ancestor"
      )
      return False

    if child.parent is not None and child.parent != parent.index:
      old_parent = self._frames[child.parent]
      old_parent.children.pop(child.index, None)
      self.logger.debug(f"Re-parented '{child_id}' from '{old_parent.id}' to '{parent_id}'")

    child.parent = parent.index
    child.transform_to_parent = transform
    parent.children[child.index] = None
    return True

  def get_frame(self, frame_id) -> Optional[Frame]:
    index = self._index.get(normalize_frame_id(frame_id))
    return None if index is None else self._frames[index]

  def frame_at(self, index: int) -> Frame:
    return self._frames[index]

  def has_frame(self, frame_id) -> bool:
    return normalize_frame_id(frame_id) in self._index

  def frame_ids(self) -> List[str]:
    return [frame.id for frame in self._frames]

  def root_ids(self) -> List[str]:
    return [frame.id for frame in self._frames if frame.is_root]

  def parent_id(self, frame_id) -> Optional[str]:
    frame = self.get_frame(frame_id)
    if frame is None or frame.parent is None:
      return None
    return self._frames[frame.parent].id

  def children_ids(self, frame_id) -> List[str]:
    frame = self.get_frame(frame_id)
    if frame is None:
      return []
    return [self._frames[i].id for i in frame.children]

  def ancestor_indices(self, index: int) -> Optional[List[int]]:
    """
    The chain index, parent, grandparent, ... root. Bounded by the number of
    frames; returns None if the bound is hit.
    """
    chain = []
    current = index
    limit = len(self._frames)
    while current is not None:
      if len(chain) >= limit:
        self.logger.error(f"Ancestor walk from '{self._frames[index].id}' exceeded {limit} frames")
        return None
      chain.append(current)
      current = self._frames[current].parent
    return chain

  def clear(self) -> None:
    self._frames = []
    self._index = {}
