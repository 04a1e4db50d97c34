"""Startgate - startup dependency validation gate.

Verifies that a service's dependencies are reachable and correctly configured
before it binds a listener.
"""

from startgate.version import __version__

__all__ = ["__version__"]
