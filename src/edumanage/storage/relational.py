from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..core.constants import STOCK_CAS_ATTEMPTS
from ..core.exceptions import PersistenceError
from . import mapper as m
from .base import TableStorage
from .postgrest import PostgrestClient

logger = logging.getLogger(__name__)


class RelationalStorage(TableStorage):
    """Hosted Postgres reached over its PostgREST HTTP interface.

    Tables use snake_case columns and server-generated integer ids (see
    ``database/schema.sql``). Backend errors surface as ``PersistenceError``.
    """

    name = "relational"

    def __init__(self, client: PostgrestClient):
        self._client = client

    def _insert(self, mapper: m.EntityMapper, draft: Any, **extra: Any) -> Any:
        row = mapper.to_native(draft)
        row.update(mapper.to_native(extra))
        return mapper.to_domain(self._client.insert(mapper.table, row))

    def _get(self, mapper: m.EntityMapper, entity_id: int) -> Optional[Any]:
        rows = self._client.select(mapper.table, {"id": int(entity_id)}, limit=1)
        return mapper.to_domain(rows[0]) if rows else None

    def _list(self, mapper: m.EntityMapper, **criteria: Any) -> List[Any]:
        rows = self._client.select(mapper.table, mapper.to_native(criteria))
        return [mapper.to_domain(row) for row in rows]

    def _update(self, mapper: m.EntityMapper, entity_id: int, **changes: Any) -> Optional[Any]:
        rows = self._client.update(mapper.table, {"id": int(entity_id)}, mapper.to_native(changes))
        return mapper.to_domain(rows[0]) if rows else None

    def _count(self, mapper: m.EntityMapper) -> int:
        return self._client.count(mapper.table)

    def _take_copy(self, note_id: int) -> None:
        # Compare-and-swap: the PATCH only matches while stock still has the value we read.
        table = m.PUBLICATION_NOTES.table
        for _ in range(STOCK_CAS_ATTEMPTS):
            note = self._get(m.PUBLICATION_NOTES, note_id)
            if note is None:
                logger.warning("Lending recorded for unknown publication note %s", note_id)
                return
            if note.available_stock <= 0:
                logger.warning("Publication note %s has no available stock; keeping it at 0", note_id)
                return
            changed = self._client.update(
                table,
                {"id": note.id, "available_stock": note.available_stock},
                {"available_stock": note.available_stock - 1},
            )
            if changed:
                return
            logger.info("Stock of publication note %s changed concurrently; retrying", note_id)
        raise PersistenceError(
            f"Could not update stock of publication note {note_id}: too many concurrent changes",
            operation=f"PATCH {table}",
        )
