"""Services Layer — stores backed by SQLAlchemy and the crossing engine that drives them.

Invariants:
    - Each store owns exactly one table
    - Stores receive an AsyncSession; only the engine opens sessions
"""
