"""
In-memory table storage for models.

Tables are dicts of primary key -> row dict. A table exists only after
create_table(); a model whose table is missing counts as not provisioned,
so its sanitization declarations are skipped.

    >>> storage = MemoryStorage()
    >>> storage.create_table("people")
    >>> pk = storage.insert("people", {"name": "Ada"})
    >>> storage.fetch("people", pk)
    {'name': 'Ada', 'id': 1}
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional

from ..faults import StorageFault

logger = logging.getLogger("sanitization.models.storage")

__all__ = ["MemoryStorage"]


class MemoryStorage:
    """In-memory table storage for development and testing."""

    def __init__(self):
        self._tables: Dict[str, Dict[int, Dict[str, Any]]] = {}
        self._sequences: Dict[str, int] = {}

    def create_table(self, name: str) -> bool:
        """Create ``name``; returns False if it already existed."""
        if name in self._tables:
            return False
        self._tables[name] = {}
        self._sequences[name] = 0
        logger.debug(f"Created table '{name}'")
        return True

    def drop_table(self, name: str) -> bool:
        """Drop ``name``; returns False if it did not exist."""
        existed = self._tables.pop(name, None) is not None
        self._sequences.pop(name, None)
        return existed

    def data_source_exists(self, name: str) -> bool:
        return name in self._tables

    def tables(self) -> List[str]:
        return list(self._tables)

    def _table(self, name: str) -> Dict[int, Dict[str, Any]]:
        table = self._tables.get(name)
        if table is None:
            raise StorageFault(name, "table does not exist")
        return table

    def insert(self, name: str, row: Dict[str, Any], pk_name: str = "id") -> int:
        """Store a new row and return its generated primary key."""
        table = self._table(name)
        self._sequences[name] += 1
        pk = self._sequences[name]
        stored = copy.deepcopy(row)
        stored[pk_name] = pk
        table[pk] = stored
        return pk

    def update(self, name: str, pk: Any, row: Dict[str, Any]) -> None:
        table = self._table(name)
        if pk not in table:
            raise StorageFault(name, f"no row with primary key {pk!r}")
        table[pk].update(copy.deepcopy(row))

    def fetch(self, name: str, pk: Any) -> Optional[Dict[str, Any]]:
        row = self._table(name).get(pk)
        return copy.deepcopy(row) if row is not None else None

    def rows(self, name: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(row) for row in self._table(name).values()]

    def __repr__(self) -> str:
        return f"<MemoryStorage tables={self.tables()}>"
