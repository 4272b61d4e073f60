"""
sabres.db.models

Internal bookkeeping tables.

Responsibilities:
- Define the schema-storage table that mirrors registered descriptors into the
  database file.
"""

from __future__ import annotations

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from sabres.db.base import Base

SCHEMA_TABLE = "_Schema"


class SchemaEntry(Base):
    __tablename__ = SCHEMA_TABLE

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    object_name: Mapped[str] = mapped_column("object", String(128), nullable=False)
    key: Mapped[str] = mapped_column(String(128), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    referenced_type: Mapped[str | None] = mapped_column("pointer", String(128), nullable=True)

    __table_args__ = (UniqueConstraint("object", "key", name="uq_schema_object_key"),)


# --- Module Notes -----------------------------------------------------------
# The catalog introspector hides this table and the indices it owns.
