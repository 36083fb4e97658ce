"""
Public storefront endpoints: live deals, site copy and the early-access list.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify
from sqlalchemy.exc import IntegrityError

from models import storage
from models.base_model import utcnow
from models.deal import Deal
from models.site_settings import EarlyAccessSignup, get_or_create_site_settings
from models.schemas.deal import DealOutSchema
from models.schemas.settings import SiteSettingsOutSchema, EarlyAccessSchema

bp = Blueprint("public", __name__)

MAX_DEALS = 200

deals_out_schema = DealOutSchema(many=True)
site_settings_out_schema = SiteSettingsOutSchema()
early_access_schema = EarlyAccessSchema()


@bp.get("/deals")
def list_deals():
    """
    Live deals: active and not yet ended, soonest ending first
    ---
    tags:
      - Deals
    responses:
      200:
        description: List of deals
    """
    session = storage.get_session()
    rows = (
        session.query(Deal)
        .filter(Deal.is_active.is_(True), Deal.ends_at > utcnow())
        .order_by(Deal.ends_at.asc())
        .limit(MAX_DEALS)
        .all()
    )
    return jsonify({"deals": deals_out_schema.dump(rows)})


@bp.get("/site-settings")
def site_settings():
    """
    Storefront copy and WhatsApp contact settings
    ---
    tags:
      - Settings
    responses:
      200:
        description: Settings object
    """
    session = storage.get_session()
    row = get_or_create_site_settings(session)
    storage.save()
    return jsonify({"settings": site_settings_out_schema.dump(row)})


@bp.post("/early-access")
def early_access():
    """
    Join the early-access list (duplicates are ignored)
    ---
    tags:
      - Early access
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
    responses:
      200:
        description: OK
      400:
        description: Invalid email
    """
    payload = request.get_json(silent=True) or {}
    data = early_access_schema.load(payload)

    session = storage.get_session()
    if session.query(EarlyAccessSignup).filter(EarlyAccessSignup.email == data["email"]).first():
        return jsonify({"ok": True})

    storage.new(EarlyAccessSignup(email=data["email"]))
    try:
        storage.save()
    except IntegrityError:
        # lost a race with an identical signup; the email is on the list either way
        pass
    return jsonify({"ok": True})
