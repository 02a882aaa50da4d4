from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from pymongo import MongoClient

from .academics.service import AttendanceService, ClassService, EventService, GradingService
from .auth.credentials import CredentialChecker
from .auth.service import AuthService
from .auth.sessions import MemorySessionStore, MongoSessionStore, SessionStore
from .config import AppConfig
from .core.constants import DEMO_PASSWORD
from .core.enums import SessionBackend
from .finance.service import BillingService, PayrollService
from .publications.service import LendingService
from .storage.factory import build_storage
from .storage.port import StoragePort
from .users.service import UserService

logger = logging.getLogger(__name__)

SESSIONS_COLLECTION = "sessions"


@dataclass(frozen=True)
class Container:
    config: AppConfig
    storage: StoragePort
    sessions: SessionStore
    credentials: CredentialChecker

    auth_service: AuthService
    user_service: UserService
    class_service: ClassService
    attendance_service: AttendanceService
    grading_service: GradingService
    event_service: EventService
    billing_service: BillingService
    payroll_service: PayrollService
    lending_service: LendingService


def build_session_store(config: AppConfig) -> SessionStore:
    if config.session_backend is SessionBackend.DOCUMENT:
        client: MongoClient = MongoClient(config.mongodb_uri, serverSelectionTimeoutMS=5000)
        store = MongoSessionStore(client.get_default_database("edumanage")[SESSIONS_COLLECTION])
        store.ensure_indexes()
        logger.info("Sessions stored in the document store")
        return store
    logger.info("Sessions stored in process memory")
    return MemorySessionStore()


def build_container(
    config: AppConfig,
    *,
    storage: Optional[StoragePort] = None,
    sessions: Optional[SessionStore] = None,
) -> Container:
    credentials = CredentialChecker.default(
        legacy_enabled=config.legacy_credentials_enabled,
        legacy_password=config.legacy_fixed_password,
    )
    if storage is None:
        seed_hash = credentials.hash_password(DEMO_PASSWORD) if config.seed_sample_data else None
        storage = build_storage(config, seed_password_hash=seed_hash)
    if sessions is None:
        sessions = build_session_store(config)

    return Container(
        config=config,
        storage=storage,
        sessions=sessions,
        credentials=credentials,
        auth_service=AuthService(storage, credentials, debug_identity_enabled=config.debug_identity_enabled),
        user_service=UserService(storage, storage),
        class_service=ClassService(storage),
        attendance_service=AttendanceService(storage),
        grading_service=GradingService(storage),
        event_service=EventService(storage),
        billing_service=BillingService(storage),
        payroll_service=PayrollService(storage),
        lending_service=LendingService(storage, storage),
    )
