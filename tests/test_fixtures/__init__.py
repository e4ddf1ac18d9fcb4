"""Test fixtures and utilities for Holecast testing.

Organized into logical modules:
- mocks: Scripted ray casters and sample host projects
- assertions: Custom assertion functions (assert_point_close, assert_placements)
"""

from .mocks import (
    ScriptedRayCaster,
    FailingRayCaster,
    hit,
    make_linear_element,
    SampleProject,
    build_sample_project,
)
from .assertions import assert_point_close, assert_placements

__all__ = [
    'ScriptedRayCaster',
    'FailingRayCaster',
    'hit',
    'make_linear_element',
    'SampleProject',
    'build_sample_project',
    'assert_point_close',
    'assert_placements',
]
