from __future__ import annotations

import json
from collections import defaultdict
from typing import Any, Callable, Optional

import httpx
import mongomock
import pytest

from edumanage.storage.document import DocumentStorage
from edumanage.storage.memory import InMemoryStorage
from edumanage.storage.postgrest import PostgrestClient, RestConfig
from edumanage.storage.relational import RelationalStorage


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _matches(row: dict, filters: dict) -> bool:
    for column, expr in filters.items():
        op, _, expected = expr.partition(".")
        if op == "is" and expected == "null":
            if row.get(column) is not None:
                return False
        elif op == "eq":
            if row.get(column) is None or _text(row[column]) != expected:
                return False
        else:
            raise AssertionError(f"unsupported filter {column}={expr}")
    return True


class FakePostgrest:
    """Just enough of PostgREST for the relational adapter: eq filters, id order, limit, exact count."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = defaultdict(list)
        self.ids: dict[str, int] = defaultdict(int)
        self.requests: list[httpx.Request] = []
        self.error: Optional[tuple[int, str]] = None
        self.before_patch: Optional[Callable[[str], None]] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error:
            status, message = self.error
            return httpx.Response(status, json={"code": "PGRST000", "message": message})

        table = request.url.path.rsplit("/", 1)[-1]
        params = dict(request.url.params)
        filters = {k: v for k, v in params.items() if k not in ("select", "order", "limit")}

        if request.method == "GET":
            rows = sorted((r for r in self.tables[table] if _matches(r, filters)), key=lambda r: r["id"])
            total = len(rows)
            if "limit" in params:
                rows = rows[: int(params["limit"])]
            if params.get("select") == "id":
                rows = [{"id": r["id"]} for r in rows]
            headers = {}
            if "count=exact" in request.headers.get("Prefer", ""):
                headers["Content-Range"] = f"0-{len(rows) - 1}/{total}" if rows else f"*/{total}"
            return httpx.Response(200, json=[dict(r) for r in rows], headers=headers)

        if request.method == "POST":
            body = json.loads(request.content)
            self.ids[table] += 1
            row = {"id": self.ids[table], **body}
            self.tables[table].append(row)
            return httpx.Response(201, json=[dict(row)])

        if request.method == "PATCH":
            if self.before_patch is not None:
                hook, self.before_patch = self.before_patch, None
                hook(table)
            body = json.loads(request.content)
            changed = [r for r in self.tables[table] if _matches(r, filters)]
            for row in changed:
                row.update(body)
            return httpx.Response(200, json=[dict(r) for r in changed])

        return httpx.Response(405, json={"message": f"method {request.method} not allowed"})


@pytest.fixture
def fake_postgrest() -> FakePostgrest:
    return FakePostgrest()


@pytest.fixture
def relational_storage(fake_postgrest: FakePostgrest) -> RelationalStorage:
    client = PostgrestClient(
        RestConfig(url="https://example.supabase.co", api_key="anon-key"),
        transport=httpx.MockTransport(fake_postgrest.handler),
    )
    yield RelationalStorage(client)
    client.close()


@pytest.fixture
def document_storage() -> DocumentStorage:
    storage = DocumentStorage(mongomock.MongoClient()["edumanage_test"])
    storage.ensure_indexes()
    return storage


@pytest.fixture(params=["memory", "relational", "document"])
def storage(request):
    """The same Storage Port contract, run against every adapter."""
    if request.param == "memory":
        return InMemoryStorage()
    if request.param == "relational":
        return request.getfixturevalue("relational_storage")
    return request.getfixturevalue("document_storage")
