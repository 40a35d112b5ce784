#!/usr/bin/env python3
"""
TF Console Launch File

Starts the transform graph node that mirrors /tf and /tf_static for the
operator console and publishes the robot pose in the map frame.

Usage:
    ros2 launch robot_console_tf tf_console.launch.py
    ros2 launch robot_console_tf tf_console.launch.py base_frame:=base_footprint

Then:
    ros2 topic echo /console/robot_pose
"""

from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node


def generate_launch_description():
    ld = LaunchDescription()

    map_frame_arg = DeclareLaunchArgument(
        "map_frame",
        default_value="map",
        description="Fixed frame the robot pose is expressed in",
    )
    base_frame_arg = DeclareLaunchArgument(
        "base_frame",
        default_value="base_link",
        description="Robot body frame",
    )
    log_tree_arg = DeclareLaunchArgument(
        "log_tree",
        default_value="false",
        description="Log the full frame tree whenever the frame set changes",
    )

    ld.add_action(map_frame_arg)
    ld.add_action(base_frame_arg)
    ld.add_action(log_tree_arg)

    tf_console_node = Node(
        package="robot_console_tf",
        executable="tf_console_node",
        name="tf_console_node",
        output="screen",
        parameters=[{
            "map_frame": LaunchConfiguration("map_frame"),
            "base_frame": LaunchConfiguration("base_frame"),
            "log_tree": LaunchConfiguration("log_tree"),
        }],
    )
    ld.add_action(tf_console_node)

    return ld
