from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from flask import jsonify, request

from ..core.exceptions import ValidationError
from .validators import parse_int_id


def json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def query_int(name: str) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    return parse_int_id(raw, name)


def query_flag(name: str) -> bool:
    return str(request.args.get(name, "")).strip().lower() in {"1", "true", "yes", "on"}


def wire_list(mapper, entities: Iterable[Any]):
    return jsonify([mapper.to_wire(e) for e in entities])


def found_or_404(mapper, entity: Any, message: str):
    if entity is None:
        return jsonify({"message": message}), 404
    return jsonify(mapper.to_wire(entity))
