import os
from glob import glob
from setuptools import find_packages, setup

package_name = 'robot_console_tf'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test']),
    package_data={
        package_name + '.robo_utils': ['configs/*.yaml'],
    },
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        (os.path.join('share', package_name, 'launch'), glob('launch/*.launch.py')),
    ],
    install_requires=['setuptools', 'numpy', 'scipy', 'PyYAML'],
    zip_safe=True,
    maintainer='ritz',
    maintainer_email='riddheshmore311@gmail.com',
    description='Robot console TF - transform graph resolver for the operator console',
    license='MIT',
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'tf_console_node = robot_console_tf.tf_console_node:main',
        ],
    },
)
