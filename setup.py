"""
Setup script for the Fitbit TCX exporter.
Usage: pip install -e .[test]
"""
from setuptools import setup, find_packages

setup(
    name='fitbit-tcx',
    version='1.0.0',
    description='Export Fitbit activities as TCX files other fitness services accept',
    packages=find_packages(include=['fitbit_tcx', 'fitbit_tcx.*']),
    py_modules=['run_export'],
    python_requires='>=3.9',
    install_requires=[
        'requests>=2.28',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'fitbit-tcx=fitbit_tcx.app:main',
        ],
    },
)
