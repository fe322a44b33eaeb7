"""
Per-request hooks: request id propagation and access logging.
"""
import logging
import time
import uuid

from flask import g, request

logger = logging.getLogger("api.requests")

REQUEST_ID_HEADER = "X-Request-Id"


def register_request_hooks(app):
    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        g.request_started = time.perf_counter()
        logger.info(
            "Incoming Request: %s %s - IP: %s - User-Agent: %s",
            request.method,
            request.path,
            request.remote_addr,
            request.user_agent.string,
            extra={"request_id": g.request_id},
        )

    @app.after_request
    def log_response(response):
        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        started = getattr(g, "request_started", None)
        elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        logger.info(
            "Response: %s %s - %s - %.0fms",
            request.method,
            request.path,
            response.status_code,
            elapsed_ms,
            extra={"request_id": request_id},
        )
        return response
