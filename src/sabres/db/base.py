"""
sabres.db.base

SQLAlchemy declarative base.

Responsibilities:
- Provide a shared DeclarativeBase for the internal bookkeeping models.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# --- Module Notes -----------------------------------------------------------
# User object tables are not mapped here; they are created from schema descriptors.
