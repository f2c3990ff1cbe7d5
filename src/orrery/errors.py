"""
Orrery Errors
=============
Exception taxonomy for configuration and asset problems.

Configuration errors are fatal and raised while the registry is built.
Asset failures are isolated per body and never reach the update loop.
"""

from typing import Optional


class OrreryError(Exception):
    """Base class for all orrery errors."""


class ConfigurationError(OrreryError):
    """Invalid body or simulation configuration."""


class MissingParentReference(ConfigurationError):
    """A body names a parent that is not in the registry."""

    def __init__(self, body_id: str, parent_id: str):
        self.body_id = body_id
        self.parent_id = parent_id
        super().__init__(f"Body '{body_id}' references unknown parent '{parent_id}'")


class HierarchyCycleError(ConfigurationError):
    """Parent references form a cycle."""

    def __init__(self, cycle):
        self.cycle = list(cycle)
        super().__init__("Orbit hierarchy contains a cycle: " + " -> ".join(self.cycle))


class DuplicateBodyError(ConfigurationError):
    """Two bodies share an identifier."""

    def __init__(self, body_id: str):
        self.body_id = body_id
        super().__init__(f"Duplicate body id '{body_id}'")


class CentralBodyError(ConfigurationError):
    """There is not exactly one central body (radius 0, no parent)."""


class AssetLoadFailure(OrreryError):
    """Loading the drawable for one body failed."""

    def __init__(self, body_id: str, path: str, cause: Optional[BaseException] = None):
        self.body_id = body_id
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to load asset '{path}' for body '{body_id}'{detail}")
