"""
ROS 2 ingestion for the lidar plotter.

Subscribes to a ``sensor_msgs/LaserScan`` topic and runs the plot pipeline
once per message on the executor thread. rclpy and sensor_msgs come from the
ROS 2 distribution, not from PyPI.
"""

from __future__ import annotations

from typing import Any

import rclpy
from rclpy.node import Node
from rclpy.qos import qos_profile_sensor_data
from sensor_msgs.msg import LaserScan

from lidarplot.messages import ScanMessage
from lidarplot.pipeline import ScanPipeline


def scan_from_ros(msg: LaserScan) -> ScanMessage:
    return ScanMessage.from_laser_scan(msg)


class LidarPlotNode(Node):
    """Feeds every LaserScan on ``topic`` through a ScanPipeline."""

    def __init__(self, pipeline: ScanPipeline, topic: str = "/scan", node_name: str = "lidarplot") -> None:
        super().__init__(node_name)
        self.pipeline = pipeline
        self.pipeline.listeners.append(self.on_event)
        self.sub = self.create_subscription(LaserScan, topic, self.on_scan, qos_profile_sensor_data)
        self.get_logger().info(f"Plotting LaserScan from {topic}")

    def on_scan(self, msg: LaserScan) -> None:
        self.pipeline(scan_from_ros(msg))

    def on_event(self, event: Any) -> None:
        record = event.to_record()
        kind = record["event"]
        log = self.get_logger()
        if kind == "frame_rendered":
            log.info(f"I heard a laser scan {record['frame_id']} [{record['declared_count']}]:")
            log.info(f"angle_range : [{record['angle_min']:f}, {record['angle_max']:f}]")
            log.debug(
                f"plotted={record['plotted']} invalid={record['invalid']} "
                f"out_of_range={record['out_of_range']} out_of_frame={record['out_of_frame']} "
                f"clamped={record['clamped']}"
            )
        elif kind == "recording_unavailable":
            log.warning("Failed to open video writer, video will not be saved.")
        elif kind == "frame_failed":
            log.error(f"Dropped frame {record['frame_id']}: {record['error']}")


def run(pipeline: ScanPipeline, topic: str = "/scan", node_name: str = "lidarplot") -> None:
    """Spin until shutdown or until the display window asks to quit."""
    rclpy.init()
    node = LidarPlotNode(pipeline, topic=topic, node_name=node_name)
    try:
        while rclpy.ok() and not pipeline.quit_requested:
            rclpy.spin_once(node, timeout_sec=0.1)
            pipeline.sink.display.poll()
    except KeyboardInterrupt:
        pass
    finally:
        node.destroy_node()
        if rclpy.ok():
            rclpy.shutdown()
