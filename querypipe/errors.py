"""
error taxonomy for query pipelines.

every error is raised by the operator that detects it and chained to the
exception that caused it, so `__cause__` keeps the original traceback.
"""
from functools import wraps
from typing import Any, Callable

# exceptions a key/extractor function raises when a record lacks what it reads
_EXTRACTION_ERRORS = (AttributeError, KeyError, IndexError, TypeError)


class QueryError(Exception):
    """base class for every error raised by querypipe"""
    pass


class InvalidKeyError(QueryError, LookupError):
    """a key, extractor or predicate could not compute a value for a record."""

    def __init__(self, record: Any, role: str, reason: str):
        self.record = record
        self.role = role
        self.reason = reason
        super().__init__(f"{role} failed for record {record!r}: {reason}")


class EmptySequenceError(QueryError, ValueError, ZeroDivisionError):
    """an operation that needs at least one element got none."""
    pass


class TypeMismatchError(QueryError, TypeError):
    """keys or values of incompatible shapes met in a comparison or aggregate."""
    pass


def guarded(func: Callable[[Any], Any], role: str) -> Callable[[Any], Any]:
    """wrap a per-record function so extraction failures name the record."""
    @wraps(func)
    def wrapper(item):
        try:
            return func(item)
        except QueryError:
            raise
        except _EXTRACTION_ERRORS as e:
            raise InvalidKeyError(item, role, f"{type(e).__name__}: {e}") from e
    return wrapper
