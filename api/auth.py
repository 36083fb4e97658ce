"""
Authentication blueprint:
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- GET  /auth/me (admin only)
- POST /bootstrap-admin

The implementation:
- Uses argon2 for password and refresh-token hashing (via utils.security)
- Issues short-lived JWT access tokens and opaque, single-use refresh tokens
- Rotates refresh tokens on every successful /auth/refresh
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.auth import LoginSchema, RefreshSchema, BootstrapSchema, ClaimsOutSchema
from utils import sessions
from utils.decorators import admin_required

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()
refresh_schema = RefreshSchema()
bootstrap_schema = BootstrapSchema()
claims_out_schema = ClaimsOutSchema()


@bp.post("/auth/login")
def login():
    """
    Login: returns accessToken and refreshToken
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             identifier: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: Missing fields
      401:
        description: Invalid credentials
    """
    payload = request.get_json(silent=True) or {}
    data = login_schema.load(payload)
    pair = sessions.login(data["identifier"], data["password"])
    return jsonify(pair.to_dict()), 200


@bp.post("/auth/refresh")
def refresh():
    """
    Exchange a refresh token for a new token pair (rotation)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: OK (returns rotated tokens)
      400:
        description: Missing refreshToken
      401:
        description: Invalid or expired refresh token
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_schema.load(payload)
    pair = sessions.refresh(data["refreshToken"])
    return jsonify(pair.to_dict()), 200


@bp.post("/auth/logout")
def logout():
    """
    Logout: revokes the given refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      204:
        description: ""
    """
    payload = request.get_json(silent=True) or {}
    token = payload.get("refreshToken")
    if isinstance(token, str) and token:
        sessions.revoke(token)
    return ("", 204)


@bp.get("/auth/me")
@admin_required()
def me():
    """
    Claims of the current access token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      403:
        description: Forbidden
    """
    return jsonify({"claims": claims_out_schema.dump(g.current_claims)}), 200


@bp.post("/bootstrap-admin")
def bootstrap_admin():
    """
    Create the first admin account (one time only)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             token: { type: string, description: "shared bootstrap secret" }
             identifier: { type: string }
             password: { type: string }
    responses:
      200:
        description: Admin created
      400:
        description: Missing token, invalid email or short password
      403:
        description: Wrong bootstrap secret
      409:
        description: An admin already exists
    """
    payload = request.get_json(silent=True) or {}
    data = bootstrap_schema.load(payload)
    sessions.bootstrap(data["token"], data["identifier"], data["password"])
    return jsonify({"ok": True}), 200
