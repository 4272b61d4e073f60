"""
sabres.errors

Error taxonomy surfaced by every synchronous and background operation.

Responsibilities:
- Define one exception class per failure kind, each with a stable numeric code.
- Normalize foreign exceptions (driver, threading) into the taxonomy.
"""

from __future__ import annotations


class SabresError(Exception):
    """Base class; `code` is part of the public contract."""

    code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code}, message={self.message!r})"


class StorageError(SabresError):
    # The driver's exception is kept as __cause__.
    code = 100


class ObjectNotFound(SabresError, LookupError):
    code = 101


class UnrecognizedKey(SabresError, ValueError):
    code = 102

    def __init__(self, key: str, object_name: str) -> None:
        super().__init__(f"Unrecognized key {key} in Object {object_name}")
        self.key = key
        self.object_name = object_name


class InvalidIncludeType(SabresError):
    code = 103


class UnsupportedValueType(SabresError, ValueError):
    code = 104

    def __init__(self, value: object) -> None:
        super().__init__(f"No rule to stringify Object of class {type(value).__name__}")
        self.value_type = type(value)


class SchemaConflict(SabresError):
    code = 105


def construct(exc: BaseException | None) -> SabresError | None:
    if exc is None:
        return None
    if isinstance(exc, SabresError):
        return exc
    err = StorageError(str(exc) or type(exc).__name__)
    err.__cause__ = exc
    return err


# --- Module Notes -----------------------------------------------------------
# Table-missing is an ObjectNotFound for `get` but an empty result for `find`;
# that asymmetry lives in `sabres.query`, not here.
