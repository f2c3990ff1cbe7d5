"""
Orrery
======
Interactive 3D Solar System Visualization

Kinematic circular orbits, a parent/child orbit hierarchy (the Moon around
the Earth) and pointer picking with an info panel.
"""

__version__ = "0.1.0"
__author__ = "Orrery Development Team"
