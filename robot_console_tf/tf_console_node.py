#!/usr/bin/env python3
import rclpy
from rclpy.node import Node
from rclpy.qos import DurabilityPolicy, QoSProfile
from geometry_msgs.msg import PoseStamped
from tf2_msgs.msg import TFMessage

from robot_console_tf.robo_utils.coordinates import Pose2D
from robot_console_tf.robo_utils.recursive_config import Config
from robot_console_tf.tf_graph import TransformGraph
from robot_console_tf.tf_messages import parse_tf_message


class TfConsoleNode(Node):
  """
  Feeds /tf and /tf_static into a TransformGraph and publishes the robot pose
  in the map frame for the operator console.
  """
  def __init__(self, config=None):
    super().__init__('tf_console_node')
    tf_cfg = (config or Config()).section('tf')

    self.declare_parameter('map_frame', tf_cfg.get('map_frame', 'map'))
    self.declare_parameter('base_frame', tf_cfg.get('base_frame', 'base_link'))
    self.declare_parameter('pose_period_sec', float(tf_cfg.get('pose_period_sec', 0.5)))
    self.declare_parameter('log_tree', bool(tf_cfg.get('log_tree', False)))
    self.map_frame = self.get_parameter('map_frame').value
    self.base_frame = self.get_parameter('base_frame').value
    self.log_tree = self.get_parameter('log_tree').value
    pose_period = self.get_parameter('pose_period_sec').value

    self.graph = TransformGraph(logger=self.get_logger())
    self._unsubscribe = self.graph.on_transform_change(self._on_graph_change)
    self._known_frames = 0

    self.tf_sub = self.create_subscription(
      TFMessage,
      tf_cfg.get('tf_topic', '/tf'),
      self.tf_callback,
      100
    )
    static_qos = QoSProfile(depth=100)
    static_qos.durability = DurabilityPolicy.TRANSIENT_LOCAL
    self.tf_static_sub = self.create_subscription(
      TFMessage,
      tf_cfg.get('tf_static_topic', '/tf_static'),
      self.tf_callback,
      static_qos
    )

    self.pose_pub = self.create_publisher(PoseStamped, tf_cfg.get('pose_topic', '/console/robot_pose'), 10)
    self.pose_timer = self.create_timer(pose_period, self.publish_robot_pose)

    self.get_logger().info(f"TF console ready ({self.map_frame} <- {self.base_frame})")

  def tf_callback(self, msg):
    try:
      records = parse_tf_message(msg)
    except ValueError as e:
      self.get_logger().error(f"Dropping TF message: {e}")
      return
    self.graph.add_transforms(records)

  def _on_graph_change(self):
    frame_count = len(self.graph.frame_ids())
    if frame_count != self._known_frames:
      self._known_frames = frame_count
      self.get_logger().info(f"TF graph now has {frame_count} frames")
      if self.log_tree:
        self.get_logger().info("\n" + self.graph.format_tree())

  def publish_robot_pose(self):
    transform = self.graph.lookup(self.map_frame, self.base_frame)
    if transform is None:
      # keep the last published pose; the transform may not have arrived yet
      self.get_logger().debug(
        f"No transform {self.map_frame} <- {self.base_frame}, known frames: {self.graph.frame_ids()}"
      )
      return

    pose = PoseStamped()
    pose.header.stamp = self.get_clock().now().to_msg()
    pose.header.frame_id = self.map_frame
    pose.pose.position.x = float(transform.translation[0])
    pose.pose.position.y = float(transform.translation[1])
    pose.pose.position.z = float(transform.translation[2])
    qx, qy, qz, qw = (float(v) for v in transform.rotation)
    pose.pose.orientation.x = qx
    pose.pose.orientation.y = qy
    pose.pose.orientation.z = qz
    pose.pose.orientation.w = qw
    self.pose_pub.publish(pose)
    self.get_logger().debug(f"Robot pose: {Pose2D.from_transform(transform)}")

  def shutdown(self):
    self._unsubscribe()
    self.graph.clear()


def main(args=None):
  rclpy.init(args=args)
  node = TfConsoleNode()

  try:
    rclpy.spin(node)
  except KeyboardInterrupt:
    pass
  finally:
    node.shutdown()
    node.destroy_node()
    try:
      rclpy.shutdown()
    except Exception:
      pass  # Already shut down by signal handler

if __name__ == '__main__':
  main()
