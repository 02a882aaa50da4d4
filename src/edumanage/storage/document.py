from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from ..core.exceptions import PersistenceError
from . import mapper as m
from .base import TableStorage

logger = logging.getLogger(__name__)

COUNTERS = "counters"

# Lookup indexes mirroring the relational schema's foreign keys.
INDEXES = {
    m.USERS.table: ["role"],
    m.STUDENTS.table: ["user_id"],
    m.CLASSES.table: ["teacher_id"],
    m.ATTENDANCE.table: ["class_id", "student_id", "date"],
    m.TEST_RESULTS.table: ["class_id", "student_id"],
    m.INSTALLMENTS.table: ["student_id", "status"],
    m.TEACHER_PAYMENTS.table: ["teacher_id", "month", "status"],
    m.PUBLICATION_NOTES.table: ["subject", "grade"],
    m.STUDENT_NOTES.table: ["student_id", "note_id"],
}


@contextmanager
def mongo_call(operation: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        logger.error("Document store failed during %s: %s", operation, exc)
        raise PersistenceError(str(exc), operation=operation) from exc


class DocumentStorage(TableStorage):
    """MongoDB adapter. One collection per entity, named like the SQL tables.

    Documents keep integer ids in ``_id``, allocated from the ``counters``
    collection, so ids round-trip losslessly between layers.
    """

    name = "document"

    def __init__(self, database: Database):
        self._db = database

    @classmethod
    def from_uri(cls, uri: str, *, database_name: Optional[str] = None, timeout_ms: int = 5000) -> "DocumentStorage":
        client: MongoClient = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
        database = client[database_name] if database_name else client.get_default_database("edumanage")
        return cls(database)

    def ensure_indexes(self) -> None:
        with mongo_call("create_index"):
            self._db[m.USERS.table].create_index("username", unique=True)
            for table, keys in INDEXES.items():
                for key in keys:
                    self._db[table].create_index(key)
        logger.info("Document store indexes ready in %s", self._db.name)

    def _next_id(self, table: str) -> int:
        counter = self._db[COUNTERS].find_one_and_update(
            {"_id": table},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(counter["seq"])

    def _insert(self, mapper: m.EntityMapper, draft: Any, **extra: Any) -> Any:
        doc = mapper.to_native(draft, id_key="_id")
        doc.update(mapper.to_native(extra, id_key="_id"))
        with mongo_call(f"insert {mapper.table}"):
            doc["_id"] = self._next_id(mapper.table)
            self._db[mapper.table].insert_one(doc)
        return mapper.to_domain(doc, id_key="_id")

    def _get(self, mapper: m.EntityMapper, entity_id: int) -> Optional[Any]:
        with mongo_call(f"find {mapper.table}"):
            doc = self._db[mapper.table].find_one({"_id": int(entity_id)})
        return mapper.to_domain(doc, id_key="_id") if doc else None

    def _list(self, mapper: m.EntityMapper, **criteria: Any) -> List[Any]:
        query = mapper.to_native(criteria, id_key="_id")
        with mongo_call(f"find {mapper.table}"):
            docs = list(self._db[mapper.table].find(query).sort("_id", ASCENDING))
        return [mapper.to_domain(doc, id_key="_id") for doc in docs]

    def _update(self, mapper: m.EntityMapper, entity_id: int, **changes: Any) -> Optional[Any]:
        with mongo_call(f"update {mapper.table}"):
            doc = self._db[mapper.table].find_one_and_update(
                {"_id": int(entity_id)},
                {"$set": mapper.to_native(changes, id_key="_id")},
                return_document=ReturnDocument.AFTER,
            )
        return mapper.to_domain(doc, id_key="_id") if doc else None

    def _count(self, mapper: m.EntityMapper) -> int:
        with mongo_call(f"count {mapper.table}"):
            return self._db[mapper.table].count_documents({})

    def _take_copy(self, note_id: int) -> None:
        with mongo_call(f"update {m.PUBLICATION_NOTES.table}"):
            note = self._db[m.PUBLICATION_NOTES.table].find_one_and_update(
                {"_id": int(note_id), "available_stock": {"$gt": 0}},
                {"$inc": {"available_stock": -1}},
            )
        if note is None:
            logger.warning("Publication note %s missing or out of stock; stock not decremented", note_id)
