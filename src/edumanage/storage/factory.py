from __future__ import annotations

import logging
from typing import Optional

from ..config import AppConfig
from ..core.enums import StorageBackend
from .document import DocumentStorage
from .fixtures import seed_sample_data
from .memory import InMemoryStorage
from .port import StoragePort
from .postgrest import PostgrestClient, RestConfig
from .relational import RelationalStorage

logger = logging.getLogger(__name__)


def build_storage(config: AppConfig, *, seed_password_hash: Optional[str] = None) -> StoragePort:
    """Construct the one adapter named by ``config.storage_backend``.

    When ``config.seed_sample_data`` is set, an empty store receives the demo
    dataset with every account using ``seed_password_hash``.
    """
    seed = config.seed_sample_data and seed_password_hash is not None

    if config.storage_backend is StorageBackend.MEMORY:
        storage: StoragePort = InMemoryStorage(seed_password_hash=seed_password_hash if seed else None)
        logger.info("Using in-memory storage (data is lost on restart)")
        return storage

    if config.storage_backend is StorageBackend.RELATIONAL:
        client = PostgrestClient(RestConfig(url=config.supabase_url, api_key=config.supabase_api_key))
        storage = RelationalStorage(client)
        logger.info("Using relational storage at %s", config.supabase_url)
    else:
        document = DocumentStorage.from_uri(config.mongodb_uri)
        document.ensure_indexes()
        storage = document
        logger.info("Using document storage")

    if seed:
        seed_sample_data(storage, password_hash=seed_password_hash)
    return storage
