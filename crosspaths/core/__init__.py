"""Core Layer — pure domain logic: pair identity, result types, errors, store contracts.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Functions here are pure and deterministic
"""
