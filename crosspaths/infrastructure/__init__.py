"""Infrastructure Layer — database sessions, dialect-specific SQL, logging setup.

Invariants:
    - Storage exceptions are mapped to core error types before leaving this layer
"""
