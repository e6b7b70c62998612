"""Declarative Base — metadata shared by venues, visits, crossing counts and relationships.

Invariants:
    - Every crossed-paths table is declared on Base, so create_all and alembic
      autogenerate see venues, visits, crossing_counts and crossed_path_relationships
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all crossed-paths ORM models."""
