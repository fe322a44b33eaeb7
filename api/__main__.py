"""
Development server: python -m api
Production deployments should serve api:create_app() from a WSGI server.
"""
import logging
import os

from . import create_app

logger = logging.getLogger(__name__)


def main():
    # APP_ENV picks the config class (see get_config())
    app = create_app()
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8080"))
    debug = os.getenv("FLASK_DEBUG", str(app.config.get("DEBUG", False))).lower() in ("1", "true", "yes")
    logger.info("Starter API listening on http://%s:%d%s (env=%s)", host, port, app.config["API_PREFIX"], app.config["APP_ENV"])
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    main()
