"""
sabres.db

Persistence package (SQLAlchemy over an embedded SQLite file).

Responsibilities:
- Provide the engine factory, the serialized connection handle and the
  schema-storage model.
"""

from sabres.db.connection import Database
from sabres.db.session import create_engine

__all__ = ["Database", "create_engine"]


# --- Module Notes -----------------------------------------------------------
# Everything above the connection handle speaks plain SQL text; SQLAlchemy is the driver seam.
