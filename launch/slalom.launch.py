from launch import LaunchDescription
from launch_ros.actions import Node


def generate_launch_description():
    return LaunchDescription([
        Node(
            package='robot_slalom',
            executable='slalom_controller',
            name='slalom_controller',
            output='screen',
            parameters=[{
                'depth_topic': '/camera/depth/image_raw',
                'blobs_topic': '/blobs',
                'cmd_vel_topic': 'cmd_vel_mux/input/teleop',
            }],
        ),
    ])
