"""Server-side sessions.

The cookie only carries a signed, opaque session id; session data lives in a
Session Store and expires after a fixed time-to-live.
"""
from __future__ import annotations

import logging
import secrets
import threading
import time
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from flask import Flask
from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from werkzeug.datastructures import CallbackDict

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_SESSION_TTL_SECONDS
from ..core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def get(self, sid: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def set(self, sid: str, data: Dict[str, Any], ttl_seconds: int) -> None:
        raise NotImplementedError

    def destroy(self, sid: str) -> None:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    """Process-local store; entries expire ``ttl_seconds`` after their last write.

    Expired entries are evicted on every write, so abandoned sessions do not
    accumulate.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[float, Dict[str, Any]]] = {}

    def __len__(self) -> int:
        with self._lock:
            self._prune(self._clock())
            return len(self._entries)

    def get(self, sid: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(sid)
            if entry is None:
                return None
            expires_at, data = entry
            if expires_at <= self._clock():
                del self._entries[sid]
                return None
            return dict(data)

    def set(self, sid: str, data: Dict[str, Any], ttl_seconds: int) -> None:
        with self._lock:
            now = self._clock()
            self._prune(now)
            self._entries[sid] = (now + ttl_seconds, dict(data))

    def destroy(self, sid: str) -> None:
        with self._lock:
            self._entries.pop(sid, None)

    def _prune(self, now: float) -> None:
        # caller holds the lock
        for sid in [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]:
            del self._entries[sid]


class MongoSessionStore(SessionStore):
    """Sessions as documents ``{_id: sid, data, expires_at}``.

    A TTL index removes expired documents; reads also ignore them so expiry
    does not depend on the TTL monitor's schedule.
    """

    def __init__(self, collection: Collection):
        self._collection = collection

    def ensure_indexes(self) -> None:
        try:
            self._collection.create_index("expires_at", expireAfterSeconds=0)
        except PyMongoError as exc:
            raise PersistenceError(str(exc), operation="create_index sessions") from exc

    @staticmethod
    def _now():
        # BSON dates come back naive (UTC) unless the client is tz-aware.
        return now_utc().replace(tzinfo=None)

    def get(self, sid: str) -> Optional[Dict[str, Any]]:
        try:
            doc = self._collection.find_one({"_id": sid, "expires_at": {"$gt": self._now()}})
        except PyMongoError as exc:
            raise PersistenceError(str(exc), operation="find sessions") from exc
        return dict(doc["data"]) if doc else None

    def set(self, sid: str, data: Dict[str, Any], ttl_seconds: int) -> None:
        doc = {"_id": sid, "data": dict(data), "expires_at": self._now() + timedelta(seconds=ttl_seconds)}
        try:
            self._collection.replace_one({"_id": sid}, doc, upsert=True)
        except PyMongoError as exc:
            raise PersistenceError(str(exc), operation="replace sessions") from exc

    def destroy(self, sid: str) -> None:
        try:
            self._collection.delete_one({"_id": sid})
        except PyMongoError as exc:
            raise PersistenceError(str(exc), operation="delete sessions") from exc


class ServerSession(CallbackDict, SessionMixin):
    def __init__(self, initial: Optional[Dict[str, Any]] = None, *, sid: str, new: bool = False):
        def on_update(self):
            self.modified = True

        CallbackDict.__init__(self, initial, on_update)
        self.sid = sid
        self.new = new
        self.modified = False
        self.previous_sid: Optional[str] = None

    def regenerate(self) -> None:
        """Move the data to a fresh id; the old store entry is dropped on save."""
        if self.previous_sid is None and not self.new:
            self.previous_sid = self.sid
        self.sid = new_sid()
        self.modified = True


def new_sid() -> str:
    return secrets.token_urlsafe(32)


class StoreSessionInterface(SessionInterface):
    """Flask session interface backed by a ``SessionStore``."""

    salt = "edumanage-session"

    def __init__(self, store: SessionStore, *, ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS):
        self.store = store
        self.ttl_seconds = ttl_seconds

    def _signer(self, app: Flask) -> Optional[Signer]:
        if not app.secret_key:
            return None
        return Signer(app.secret_key, salt=self.salt, key_derivation="hmac")

    def open_session(self, app: Flask, request) -> Optional[ServerSession]:
        signer = self._signer(app)
        if signer is None:
            return None
        cookie = request.cookies.get(self.get_cookie_name(app))
        if not cookie:
            return ServerSession(sid=new_sid(), new=True)
        try:
            sid = signer.unsign(cookie).decode("utf-8")
        except BadSignature:
            logger.info("Ignoring session cookie with a bad signature")
            return ServerSession(sid=new_sid(), new=True)
        data = self.store.get(sid)
        if data is None:
            return ServerSession(sid=new_sid(), new=True)
        return ServerSession(data, sid=sid)

    def save_session(self, app: Flask, session: ServerSession, response) -> None:
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)

        if session.previous_sid is not None:
            self.store.destroy(session.previous_sid)
            session.previous_sid = None

        if not session:
            if session.modified:
                self.store.destroy(session.sid)
                response.delete_cookie(name, domain=domain, path=path)
            return

        if not self.should_set_cookie(app, session):
            return

        self.store.set(session.sid, dict(session), self.ttl_seconds)
        signed = self._signer(app).sign(session.sid.encode("utf-8")).decode("utf-8")
        response.set_cookie(
            name,
            signed,
            max_age=self.ttl_seconds,
            httponly=self.get_cookie_httponly(app),
            secure=self.get_cookie_secure(app),
            samesite=self.get_cookie_samesite(app),
            domain=domain,
            path=path,
        )
