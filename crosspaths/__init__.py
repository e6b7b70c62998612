"""Crossed Paths — proximity-crossing engine for venue visits.

Invariants:
    - Package root exposes only the version (no import side effects)
"""

__version__ = "1.0.0"
