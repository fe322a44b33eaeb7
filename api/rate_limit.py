"""
Global request throttle (Flask-Limiter), keyed by client address.

Every route shares one limit: THROTTLE_LIMIT requests per THROTTLE_TTL
seconds. RATELIMIT_ENABLED=false switches it off; RATELIMIT_STORAGE_URI
points the counters at a shared backend when running several workers.
"""
from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address


def default_limit(config) -> str:
    return f"{config['THROTTLE_LIMIT']} per {config['THROTTLE_TTL']} second"


def init_limiter(app: Flask) -> Limiter:
    # one Limiter per app, so apps built by tests never share counters
    return Limiter(
        get_remote_address,
        app=app,
        default_limits=[default_limit(app.config)],
    )
