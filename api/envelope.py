"""
Response envelopes.

Success:
    {"success": true, "data": ..., "meta": null | {...}, "context": {...}}
Error (built in api.errors):
    {"success": false, "error": {...}, "context": {...}}
"""
from __future__ import annotations

from flask import g, jsonify, request

from services.pagination import ListResult, page_meta
from utils.clock import utcnow


def request_context(status: int) -> dict:
    return {
        "requestId": getattr(g, "request_id", None) or request.headers.get("X-Request-Id", ""),
        "path": request.full_path.rstrip("?") if request.query_string else request.path,
        "method": request.method,
        "status": status,
        "timestamp": utcnow().isoformat().replace("+00:00", "Z"),
    }


def ok(data, status: int = 200, meta: dict | None = None):
    payload = {
        "success": True,
        "data": data,
        "meta": meta,
        "context": request_context(status),
    }
    return jsonify(payload), status


def paginated(result: ListResult, page: int, limit: int, dump=None):
    """Wrap one page of results; `dump` turns the rows into JSON-ready data."""
    items = dump(result.items) if dump else result.items
    return ok(items, meta=page_meta(page, limit, result.total))


def no_content():
    return ("", 204)
