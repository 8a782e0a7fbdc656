"""
Tabular query results handed out by the QueryExecutor.

Rows are materialised while the session is open so that callers can consume
them after the future resolves. Field lookup is typed; a missing field and a
NULL column are both treated as absent.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Iterator, List, Mapping, Optional, Type, TypeVar
from uuid import UUID

from statboard.utils.stats_exceptions import MalformedRow

T = TypeVar('T')


def _coerce(name: str, raw: Any, type_: Type[T]) -> T:
    if isinstance(raw, type_) and not (type_ is int and isinstance(raw, bool)):
        return raw
    try:
        if type_ is Decimal:
            return Decimal(str(raw))
        if type_ is str:
            if isinstance(raw, (bytes, bytearray)):
                return raw.decode("utf-8")
            raise TypeError(f"{type(raw).__name__} is not text")
        if type_ is UUID:
            return UUID(str(raw))
        if type_ is int and isinstance(raw, (float, Decimal)):
            if raw != int(raw):
                raise ValueError(f"{raw!r} is not integral")
            return int(raw)
        return type_(raw)
    except (ValueError, TypeError, InvalidOperation, UnicodeDecodeError) as e:
        raise MalformedRow(name, f"cannot read {raw!r} as {type_.__name__}") from e


class ResultRow:
    """Single result row with typed field access by column name."""
    
    def __init__(self, values: Mapping[str, Any]):
        self._values = dict(values)
    
    def get(self, name: str, type_: Type[T]) -> T:
        """
        Required field lookup.
        
        Raises:
            MalformedRow: If the field is absent, NULL or not convertible
        """
        raw = self._values.get(name)
        if raw is None:
            raise MalformedRow(name, "field is missing")
        return _coerce(name, raw, type_)
    
    def get_optional(self, name: str, type_: Type[T]) -> Optional[T]:
        """
        Optional field lookup; absent or NULL fields give None.
        
        Raises:
            MalformedRow: If the field is present but not convertible
        """
        raw = self._values.get(name)
        if raw is None:
            return None
        return _coerce(name, raw, type_)
    
    def __repr__(self):
        return f"<ResultRow({self._values!r})>"


class ResultSet:
    """Ordered rows of one query result, in the order storage returned them."""
    
    def __init__(self, rows: List[ResultRow]):
        self.rows = rows
    
    @classmethod
    def from_mappings(cls, mappings) -> "ResultSet":
        return cls([ResultRow(mapping) for mapping in mappings])
    
    def first(self) -> Optional[ResultRow]:
        return self.rows[0] if self.rows else None
    
    def __iter__(self) -> Iterator[ResultRow]:
        return iter(self.rows)
    
    def __len__(self):
        return len(self.rows)
    
    def __bool__(self):
        return bool(self.rows)
