"""
Entrypoint for running the API in development.
In production run create_app() through a WSGI server (gunicorn/uwsgi).
"""
import os
from . import create_app

# Respect APP_ENV for configuration selection (handled in get_config())
app = create_app()

if __name__ == "__main__":
    host = os.getenv("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_RUN_PORT", os.getenv("PORT", "3001")))
    debug = bool(os.getenv("FLASK_DEBUG", str(app.config.get("DEBUG", True))).lower() in ("1", "true", "yes"))
    app.run(host=host, port=port, debug=debug)
