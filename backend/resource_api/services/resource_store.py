"""
In-memory keyed collection with a monotonically increasing identifier.

One lock guards both the collection and the counter, so every operation is
observed as atomic by concurrent request handlers (FastAPI runs sync handlers
on a worker thread pool).
"""

import logging
import threading
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

Fields = Union[BaseModel, Mapping[str, Any]]


def _fields_to_dict(fields: Fields) -> Dict[str, Any]:
    if isinstance(fields, BaseModel):
        return fields.model_dump()
    return dict(fields)


def _changes_to_dict(changes: Fields) -> Dict[str, Any]:
    """Keep only the fields the caller actually supplied (None means absent)."""
    if isinstance(changes, BaseModel):
        data = changes.model_dump(exclude_none=True)
    else:
        data = {k: v for k, v in changes.items() if v is not None}
    data.pop("id", None)
    return data


class ResourceStore(Generic[R]):
    """Keyed collection of immutable records.

    Absence of an identifier is reported as ``None``; callers cannot tell a
    never-created record from a deleted one.
    """

    def __init__(self, record_type: Type[R], first_id: int = 0, name: Optional[str] = None):
        self._record_type = record_type
        self._name = name or record_type.__name__.lower()
        self._lock = threading.Lock()
        self._records: Dict[int, R] = {}
        self._next_id = first_id

    @property
    def name(self) -> str:
        return self._name

    def list(self) -> List[R]:
        with self._lock:
            return list(self._records.values())

    def get(self, record_id: int) -> Optional[R]:
        with self._lock:
            return self._records.get(record_id)

    def create(self, fields: Fields) -> R:
        data = _fields_to_dict(fields)
        data.pop("id", None)
        with self._lock:
            record = self._record_type(id=self._next_id, **data)
            self._records[self._next_id] = record
            self._next_id += 1
        logger.debug("Created %s %d", self._name, record.id)
        return record

    def update(self, record_id: int, changes: Fields) -> Optional[R]:
        data = _changes_to_dict(changes)
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return None
            updated = current.model_copy(update=data)
            self._records[record_id] = updated
        logger.debug("Updated %s %d fields=%s", self._name, record_id, sorted(data))
        return updated

    def delete(self, record_id: int) -> Optional[R]:
        with self._lock:
            removed = self._records.pop(record_id, None)
        if removed is not None:
            logger.debug("Deleted %s %d", self._name, record_id)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        with self._lock:
            return record_id in self._records
