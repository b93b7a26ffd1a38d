from setuptools import find_packages, setup
from glob import glob
import os

package_name = 'robot_slalom'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        (os.path.join('share', package_name, 'launch'), glob('launch/*.py')),
    ],
    install_requires=['setuptools', 'numpy', 'opencv-python'],
    zip_safe=True,
    maintainer='slalom',
    maintainer_email='slalom@todo.todo',
    description='Reactive slalom controller blending cone tracking, obstacle avoidance and goal seeking',
    license='Apache-2.0',
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'slalom_controller = robot_slalom.controller:main',
        ],
    },
)
