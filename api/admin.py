"""
Admin back-office endpoints. Every route here sits behind admin_required().

- /admin-deals             GET list, POST create, PUT update, PATCH toggle, DELETE
- /admin-site-settings     PUT copy fields, PATCH content merge
- /admin-early-access      GET signups
- /admin-storage-settings  GET / PUT provider config
- /admin-db-status         GET diagnostics
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app, abort
from sqlalchemy.orm.attributes import flag_modified

from models import storage
from models.deal import Deal
from models.site_settings import (
    EarlyAccessSignup,
    get_or_create_site_settings,
    get_or_create_storage_settings,
)
from models.schemas.deal import (
    AdminDealOutSchema,
    DealCreateSchema,
    DealIdSchema,
    DealToggleSchema,
    DealUpdateSchema,
)
from models.schemas.settings import (
    ContentPatchSchema,
    SignupOutSchema,
    SiteSettingsUpdateSchema,
    StorageSettingsSchema,
)
from utils.decorators import admin_required

bp = Blueprint("admin", __name__)

MAX_ADMIN_DEALS = 500
MAX_SIGNUPS = 200

deal_create_schema = DealCreateSchema()
deal_update_schema = DealUpdateSchema()
deal_toggle_schema = DealToggleSchema()
deal_id_schema = DealIdSchema()
admin_deals_out_schema = AdminDealOutSchema(many=True)
site_settings_update_schema = SiteSettingsUpdateSchema()
content_patch_schema = ContentPatchSchema()
signups_out_schema = SignupOutSchema(many=True)
storage_settings_schema = StorageSettingsSchema()

DEAL_FIELDS = ["title", "description", "category", "price_bdt", "image_url", "stock", "ends_at"]


def _get_deal_or_404(deal_id: str) -> Deal:
    deal = storage.get(Deal, deal_id)
    if not deal:
        abort(404, description="Deal not found")
    return deal


@bp.get("/admin-deals")
@admin_required()
def list_admin_deals():
    """
    All deals, including inactive and ended ones
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
      403: { description: Forbidden }
    """
    session = storage.get_session()
    rows = session.query(Deal).order_by(Deal.ends_at.desc()).limit(MAX_ADMIN_DEALS).all()
    return jsonify({"deals": admin_deals_out_schema.dump(rows)})


@bp.post("/admin-deals")
@admin_required()
def create_deal():
    """
    Create a deal
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            title: { type: string, maxLength: 140 }
            description: { type: string, maxLength: 600 }
            category: { type: string }
            price_bdt: { type: integer, minimum: 0 }
            image_url: { type: string }
            stock: { type: integer, minimum: 0 }
            ends_at: { type: string, format: date-time }
            is_active: { type: boolean }
    responses:
      200: { description: Created }
      400: { description: Validation error }
      409: { description: Deal id already exists }
    """
    payload = request.get_json(silent=True) or {}
    data = deal_create_schema.load(payload)
    if data.get("id") and storage.get(Deal, data["id"]):
        abort(409, description="A deal with this id already exists.")

    deal = Deal(**{k: v for k, v in data.items() if v is not None or k == "price_bdt"})
    storage.new(deal)
    storage.save()
    return jsonify({"ok": True, "id": deal.id})


@bp.put("/admin-deals")
@admin_required()
def update_deal():
    """
    Replace a deal's fields
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
    responses:
      200: { description: Updated }
      404: { description: Not found }
    """
    payload = request.get_json(silent=True) or {}
    data = deal_update_schema.load(payload)
    deal = _get_deal_or_404(data["id"])
    for field in DEAL_FIELDS:
        setattr(deal, field, data.get(field))
    if "is_active" in data:
        deal.is_active = data["is_active"]
    storage.new(deal)
    storage.save()
    return jsonify({"ok": True})


@bp.patch("/admin-deals")
@admin_required()
def toggle_deal():
    """
    Activate or deactivate a deal
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            id: { type: string }
            is_active: { type: boolean }
    responses:
      200: { description: Updated }
      404: { description: Not found }
    """
    payload = request.get_json(silent=True) or {}
    data = deal_toggle_schema.load(payload)
    deal = _get_deal_or_404(data["id"])
    deal.is_active = data["is_active"]
    storage.save()
    return jsonify({"ok": True})


@bp.delete("/admin-deals")
@admin_required()
def delete_deal():
    """
    Delete a deal
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            id: { type: string }
    responses:
      200: { description: Deleted }
      404: { description: Not found }
    """
    payload = request.get_json(silent=True) or {}
    data = deal_id_schema.load(payload)
    deal = _get_deal_or_404(data["id"])
    storage.delete(deal)
    storage.save()
    return jsonify({"ok": True})


@bp.put("/admin-site-settings")
@admin_required()
def update_site_settings():
    """
    Replace the storefront copy fields
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
    responses:
      200: { description: Updated }
      400: { description: Validation error }
    """
    payload = request.get_json(silent=True) or {}
    data = site_settings_update_schema.load(payload)
    row = get_or_create_site_settings(storage.get_session())
    for field, value in data.items():
        setattr(row, field, value)
    storage.save()
    return jsonify({"ok": True})


@bp.patch("/admin-site-settings")
@admin_required()
def patch_site_content():
    """
    Shallow-merge keys into the free-form content document
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            content_patch: { type: object }
    responses:
      200: { description: Updated }
    """
    payload = request.get_json(silent=True) or {}
    data = content_patch_schema.load(payload)
    row = get_or_create_site_settings(storage.get_session())
    row.content = {**(row.content or {}), **data["content_patch"]}
    flag_modified(row, "content")
    storage.save()
    return jsonify({"ok": True})


@bp.get("/admin-early-access")
@admin_required()
def list_signups():
    """
    Early-access signups, newest first
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    session = storage.get_session()
    rows = (
        session.query(EarlyAccessSignup)
        .order_by(EarlyAccessSignup.created_at.desc())
        .limit(MAX_SIGNUPS)
        .all()
    )
    return jsonify({"signups": signups_out_schema.dump(rows)})


@bp.get("/admin-storage-settings")
@admin_required()
def get_storage_settings():
    """
    External storage provider configuration
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    row = get_or_create_storage_settings(storage.get_session())
    storage.save()
    return jsonify({"provider": row.provider, "settings": row.settings or {}})


@bp.put("/admin-storage-settings")
@admin_required()
def put_storage_settings():
    """
    Set the external storage provider configuration
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            provider: { type: string }
            settings: { type: object }
    responses:
      200: { description: Updated }
      400: { description: Missing provider }
    """
    payload = request.get_json(silent=True) or {}
    data = storage_settings_schema.load(payload)
    row = get_or_create_storage_settings(storage.get_session())
    row.provider = data["provider"]
    row.settings = data["settings"]
    flag_modified(row, "settings")
    storage.save()
    return jsonify({"ok": True})


@bp.get("/admin-db-status")
@admin_required()
def db_status():
    """
    Diagnostics: database reachability and required configuration (values never shown)
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    checks = [
        {"key": "DATABASE_URL", "label": "Database", "ok": storage.ping()},
        {"key": "JWT_SECRET", "label": "Token signing secret", "ok": bool(current_app.config.get("JWT_SECRET"))},
        {"key": "ADMIN_BOOTSTRAP_TOKEN", "label": "Bootstrap secret",
         "ok": bool(current_app.config.get("ADMIN_BOOTSTRAP_TOKEN"))},
    ]
    for check in checks:
        check["message"] = None if check["ok"] else ("Unreachable" if check["key"] == "DATABASE_URL" else "Missing")
    return jsonify({
        "ok": all(c["ok"] for c in checks),
        "backend": storage.engine.url.get_backend_name(),
        "checks": checks,
    })
