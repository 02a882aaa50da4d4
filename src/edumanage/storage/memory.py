from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Dict, List, Optional

from . import mapper as m
from .base import TableStorage
from .fixtures import seed_sample_data

logger = logging.getLogger(__name__)


class InMemoryStorage(TableStorage):
    """Identity maps plus monotonic counters, one pair per entity.

    Every write goes through the Field Mapper so stored values are normalized
    exactly as the other adapters normalize them. The lock makes id allocation
    and read-modify-write updates (stock) atomic within the process.
    """

    name = "memory"

    def __init__(self, *, seed_password_hash: Optional[str] = None):
        self._lock = threading.RLock()
        self._tables: Dict[str, Dict[int, Any]] = {mapper.table: {} for mapper in m.ALL_MAPPERS}
        self._counters: Dict[str, int] = {mapper.table: 0 for mapper in m.ALL_MAPPERS}
        if seed_password_hash is not None:
            seed_sample_data(self, password_hash=seed_password_hash)

    def _insert(self, mapper: m.EntityMapper, draft: Any, **extra: Any) -> Any:
        row = mapper.to_native(draft)
        row.update(mapper.to_native(extra))
        with self._lock:
            self._counters[mapper.table] += 1
            row["id"] = self._counters[mapper.table]
            entity = mapper.to_domain(row)
            self._tables[mapper.table][entity.id] = entity
        return entity

    def _get(self, mapper: m.EntityMapper, entity_id: int) -> Optional[Any]:
        return self._tables[mapper.table].get(int(entity_id))

    def _list(self, mapper: m.EntityMapper, **criteria: Any) -> List[Any]:
        expected = mapper.to_native(criteria)
        with self._lock:
            table = self._tables[mapper.table]
            entities = [table[k] for k in sorted(table)]
        if not expected:
            return entities
        out = []
        for entity in entities:
            row = mapper.to_native(entity)
            if all(row.get(k) == v for k, v in expected.items()):
                out.append(entity)
        return out

    def _update(self, mapper: m.EntityMapper, entity_id: int, **changes: Any) -> Optional[Any]:
        patch = mapper.to_native(changes)
        with self._lock:
            current = self._get(mapper, entity_id)
            if current is None:
                return None
            row = mapper.to_native(current)
            row.update(patch)
            entity = mapper.to_domain(row)
            self._tables[mapper.table][entity.id] = entity
            return entity

    def _count(self, mapper: m.EntityMapper) -> int:
        return len(self._tables[mapper.table])

    def _take_copy(self, note_id: int) -> None:
        with self._lock:
            note = self._get(m.PUBLICATION_NOTES, note_id)
            if note is None:
                logger.warning("Lending recorded for unknown publication note %s", note_id)
                return
            if note.available_stock <= 0:
                logger.warning("Publication note %s has no available stock; keeping it at 0", note_id)
                return
            self._tables[m.PUBLICATION_NOTES.table][note.id] = replace(note, available_stock=note.available_stock - 1)
