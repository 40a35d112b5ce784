#!/usr/bin/env python3
from dataclasses import dataclass, field
from typing import Any, List

from robot_console_tf.robo_utils.coordinates import RigidTransform


def _stamp_to_sec(stamp):
  if not stamp:
    return 0.0
  if isinstance(stamp, dict):
    sec = stamp.get('sec', stamp.get('secs', 0))
    nsec = stamp.get('nanosec', stamp.get('nsec', stamp.get('nsecs', 0)))
  else:
    sec = getattr(stamp, 'sec', 0)
    nsec = getattr(stamp, 'nanosec', 0)
  return float(sec) + float(nsec) * 1e-9


@dataclass
class TransformStamped:
  """
  One decoded transform record: the pose of child_frame_id expressed in
  parent_frame_id. The stamp is informational; the latest record always wins.
  """
  parent_frame_id: str
  child_frame_id: str
  transform: RigidTransform = field(default_factory=RigidTransform.identity)
  stamp: float = 0.0

  @staticmethod
  def from_dict(data: dict) -> "TransformStamped":
    """Decode the rosbridge JSON form of geometry_msgs/TransformStamped."""
    try:
      header = data['header']
      t = data['transform']['translation']
      r = data['transform']['rotation']
      return TransformStamped(
        parent_frame_id=header['frame_id'],
        child_frame_id=data['child_frame_id'],
        transform=RigidTransform.from_xyz_quat(
          t['x'], t['y'], t['z'], r['x'], r['y'], r['z'], r['w']
        ),
        stamp=_stamp_to_sec(header.get('stamp')),
      )
    except (KeyError, TypeError) as e:
      raise ValueError(f"Malformed transform record: {e!r}") from e

  @staticmethod
  def from_msg(msg: Any) -> "TransformStamped":
    """Decode a geometry_msgs/TransformStamped message object."""
    t = msg.transform.translation
    r = msg.transform.rotation
    return TransformStamped(
      parent_frame_id=msg.header.frame_id,
      child_frame_id=msg.child_frame_id,
      transform=RigidTransform.from_xyz_quat(t.x, t.y, t.z, r.x, r.y, r.z, r.w),
      stamp=_stamp_to_sec(msg.header.stamp),
    )


def parse_tf_message(message: Any) -> List[TransformStamped]:
  """Records of a tf2_msgs/TFMessage, given as a rosbridge dict or a message object."""
  if isinstance(message, dict):
    transforms = message.get('transforms')
    if not isinstance(transforms, list):
      return []
    return [TransformStamped.from_dict(item) for item in transforms]

  transforms = getattr(message, 'transforms', None)
  if transforms is None:
    return []
  return [TransformStamped.from_msg(item) for item in transforms]
