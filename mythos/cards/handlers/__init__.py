"""
Card effect handlers.

Importing this package registers every handler and selection routine
with the shared effect registry.
"""

from . import helpers, characters, uncommon, rare, missions  # noqa: F401
