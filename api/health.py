from flask import Blueprint, current_app

from api.envelope import ok
from models import storage

bp = Blueprint("health", __name__)

VERSION = "1.0.0"


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            version:
              type: string
              example: 1.0.0
            database:
              type: boolean
    """
    database = storage.health_check()
    data = {
        "status": "ok" if database else "degraded",
        "version": VERSION,
        "database": database,
    }
    collector = current_app.extensions.get("query_metrics")
    if collector is not None:
        data["queries"] = collector.summary()
    return ok(data)
