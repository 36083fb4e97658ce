from marshmallow import Schema, fields, post_load, validate

from models.schemas.common import norm_email, to_naive_utc, iso_utc


class SiteSettingsUpdateSchema(Schema):
    brand_name = fields.String(required=True, validate=validate.Length(max=60))
    brand_tagline = fields.String(required=True, validate=validate.Length(max=120))
    header_kicker = fields.String(required=True, validate=validate.Length(max=80))
    hero_h1 = fields.String(required=True, validate=validate.Length(max=200))
    hero_subtitle = fields.String(required=True, validate=validate.Length(max=240))
    whatsapp_phone_e164 = fields.String(required=True, validate=validate.Length(max=32))
    whatsapp_default_message = fields.String(required=True, validate=validate.Length(max=500))
    next_drop_at = fields.DateTime(allow_none=True, load_default=None)

    @post_load
    def _normalize_next_drop(self, data, **kwargs):
        if data.get("next_drop_at") is not None:
            data["next_drop_at"] = to_naive_utc(data["next_drop_at"])
        return data


class ContentPatchSchema(Schema):
    content_patch = fields.Dict(keys=fields.String(), required=True)


class SiteSettingsOutSchema(Schema):
    id = fields.String()
    brand_name = fields.String()
    brand_tagline = fields.String()
    header_kicker = fields.String()
    hero_h1 = fields.String()
    hero_subtitle = fields.String()
    whatsapp_phone_e164 = fields.String()
    whatsapp_default_message = fields.String()
    next_drop_at = fields.Function(lambda s: iso_utc(s.next_drop_at))
    content = fields.Function(lambda s: s.content or {})


class EarlyAccessSchema(Schema):
    email = fields.Email(required=True)

    @post_load
    def _normalize(self, data, **kwargs):
        data["email"] = norm_email(data["email"])
        return data


class SignupOutSchema(Schema):
    id = fields.String()
    email = fields.String()
    created_at = fields.Function(lambda s: iso_utc(s.created_at))


class StorageSettingsSchema(Schema):
    provider = fields.String(required=True, validate=validate.Length(min=1, max=32))
    settings = fields.Dict(load_default=dict)
