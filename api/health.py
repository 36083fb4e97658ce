from datetime import datetime, timezone

from flask import Blueprint

bp = Blueprint("health", __name__)

API_VERSION = "1.0.0"


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
            ok:
              type: boolean
            status:
              type: string
              example: ok
            backend:
              type: string
              example: server
            version:
              type: string
              example: 1.0.0
    """
    return {
        "ok": True,
        "status": "ok",
        "backend": "server",
        "version": API_VERSION,
        "ts": datetime.now(timezone.utc).isoformat(),
    }, 200
