"""
Entities Module
===============
Celestial bodies in the orrery.

- BodyConfig: Typed static parameters of one body
- Body: Config plus live transform and drawable handle
- BodyRegistry: The fixed, validated set of bodies
"""

from .body import Body, BodyConfig, parse_color
from .registry import BodyRegistry

__all__ = [
    'Body',
    'BodyConfig',
    'parse_color',
    'BodyRegistry'
]
