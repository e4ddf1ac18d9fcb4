"""
Setup script for Holecast.

Usage:
    pip install -e .           # Editable install
    pip install -e ".[dev]"    # With dev dependencies

Modules under src/holecast import each other with flat imports
(`from holecast_engine import run`); importing the `holecast` package puts
src/holecast on sys.path first.
"""

from setuptools import setup, find_namespace_packages


setup(
    name='holecast',
    version='0.1.0',
    description='Places wall openings where duct and pipe centerlines penetrate walls',
    python_requires='>=3.9',
    package_dir={'': 'src'},
    packages=find_namespace_packages(where='src', include=['holecast', 'holecast.*']),
    install_requires=[
        'numpy',
    ],
    extras_require={
        'dev': [
            'pytest',
        ],
    },
)
