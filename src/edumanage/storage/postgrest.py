from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional

import httpx

from ..core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

RETURN_REPRESENTATION = {"Prefer": "return=representation"}


@dataclass
class RestConfig:
    url: str
    api_key: str
    schema: str = "public"
    timeout: float = 10.0


@contextmanager
def rest_call(operation: str) -> Iterator[None]:
    """Turn transport failures into ``PersistenceError`` carrying the backend message."""
    try:
        yield
    except httpx.HTTPError as exc:
        logger.error("Relational backend unreachable during %s: %s", operation, exc)
        raise PersistenceError(str(exc) or exc.__class__.__name__, operation=operation) from exc


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def eq_filters(filters: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for column, value in (filters or {}).items():
        params[column] = "is.null" if value is None else f"eq.{_literal(value)}"
    return params


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text or f"HTTP {response.status_code}"


class PostgrestClient:
    """Thin synchronous client for a PostgREST endpoint (e.g. Supabase ``/rest/v1``).

    Rows travel as plain dicts with snake_case columns; translation to entities
    is the caller's job.
    """

    def __init__(self, config: RestConfig, *, transport: Optional[httpx.BaseTransport] = None):
        self._config = config
        self._http = httpx.Client(
            base_url=config.url.rstrip("/") + "/rest/v1",
            headers={
                "apikey": config.api_key,
                "Authorization": f"Bearer {config.api_key}",
                "Accept-Profile": config.schema,
                "Content-Profile": config.schema,
            },
            timeout=config.timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        params = {"select": "*", "order": "id.asc", **eq_filters(filters)}
        if limit is not None:
            params["limit"] = str(limit)
        return self._request("GET", table, params=params)

    def insert(self, table: str, row: Mapping[str, Any]) -> Dict[str, Any]:
        rows = self._request("POST", table, json=dict(row), headers=RETURN_REPRESENTATION)
        if not rows:
            raise PersistenceError("No row returned after insert", operation=f"POST {table}")
        return rows[0]

    def update(
        self,
        table: str,
        filters: Mapping[str, Any],
        values: Mapping[str, Any],
    ) -> List[Dict[str, Any]]:
        """PATCH every row matching ``filters``; returns the rows actually changed."""
        return self._request(
            "PATCH",
            table,
            params=eq_filters(filters),
            json=dict(values),
            headers=RETURN_REPRESENTATION,
        )

    def count(self, table: str) -> int:
        operation = f"GET {table}"
        with rest_call(operation):
            response = self._http.get(
                f"/{table}",
                params={"select": "id", "limit": "1"},
                headers={"Prefer": "count=exact"},
            )
        self._raise_for_error(response, operation)
        total = response.headers.get("Content-Range", "").rpartition("/")[2]
        if total.isdigit():
            return int(total)
        # Without an exact count header, fall back to a full id scan.
        return len(self._request("GET", table, params={"select": "id"}))

    def _request(self, method: str, table: str, **kwargs: Any) -> List[Dict[str, Any]]:
        operation = f"{method} {table}"
        with rest_call(operation):
            response = self._http.request(method, f"/{table}", **kwargs)
        self._raise_for_error(response, operation)
        if not response.content:
            return []
        data = response.json()
        return data if isinstance(data, list) else [data]

    @staticmethod
    def _raise_for_error(response: httpx.Response, operation: str) -> None:
        if response.is_error:
            message = _error_message(response)
            logger.error("Relational backend rejected %s (%s): %s", operation, response.status_code, message)
            raise PersistenceError(message, operation=operation)
