from marshmallow import Schema, fields, post_load, validate

from models.schemas.common import to_naive_utc, validate_non_negative, iso_utc


class DealCreateSchema(Schema):
    id = fields.String(load_default=None)
    title = fields.String(required=True, validate=validate.Length(min=1, max=140))
    description = fields.String(load_default="", validate=validate.Length(max=600))
    category = fields.String(required=True, validate=validate.Length(min=1, max=60))
    price_bdt = fields.Integer(allow_none=True, load_default=None, validate=validate_non_negative)
    image_url = fields.String(load_default="", validate=validate.Length(max=600))
    stock = fields.Integer(load_default=0, validate=validate_non_negative)
    ends_at = fields.DateTime(required=True)
    is_active = fields.Boolean(load_default=True)

    @post_load
    def _normalize_ends_at(self, data, **kwargs):
        data["ends_at"] = to_naive_utc(data["ends_at"])
        return data


class DealUpdateSchema(DealCreateSchema):
    id = fields.String(required=True, validate=validate.Length(min=1))
    is_active = fields.Boolean()


class DealToggleSchema(Schema):
    id = fields.String(required=True, validate=validate.Length(min=1))
    is_active = fields.Boolean(required=True)


class DealIdSchema(Schema):
    id = fields.String(required=True, validate=validate.Length(min=1))


class DealOutSchema(Schema):
    """Public deal shape (camelCase, as the storefront reads it)."""
    id = fields.String()
    title = fields.String()
    description = fields.String()
    category = fields.String()
    priceBdt = fields.Integer(attribute="price_bdt", allow_none=True)
    imageUrl = fields.String(attribute="image_url")
    stock = fields.Integer()
    endsAt = fields.Function(lambda d: iso_utc(d.ends_at))


class AdminDealOutSchema(DealOutSchema):
    isActive = fields.Boolean(attribute="is_active")
