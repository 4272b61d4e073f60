"""
sabres

Schema-aware local persistence: declare typed objects, query them fluently,
store them in an embedded SQLite file.

Responsibilities:
- Expose package version metadata and the public entry points.
"""

from sabres.app import create_database
from sabres.db.connection import Database
from sabres.errors import (
    InvalidIncludeType,
    ObjectNotFound,
    SabresError,
    SchemaConflict,
    StorageError,
    UnrecognizedKey,
    UnsupportedValueType,
)
from sabres.objects import SabresObject
from sabres.query import SabresQuery
from sabres.schema import Descriptor, DescriptorType, schema
from sabres.where import Where

__all__ = [
    "Database",
    "Descriptor",
    "DescriptorType",
    "InvalidIncludeType",
    "ObjectNotFound",
    "SabresError",
    "SabresObject",
    "SabresQuery",
    "SchemaConflict",
    "StorageError",
    "UnrecognizedKey",
    "UnsupportedValueType",
    "Where",
    "__version__",
    "create_database",
    "schema",
]

__version__ = "0.1.0"
