from marshmallow import EXCLUDE, Schema, fields, pre_load, validate

from models.schemas.common import norm_email


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    # "email" is accepted as an alias of identifier
    identifier = fields.String(required=True, validate=validate.Length(min=1))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict):
            data = dict(data)
            if "identifier" not in data and "email" in data:
                data["identifier"] = data.pop("email")
            data.pop("email", None)
            data["identifier"] = norm_email(data.get("identifier"))
        return data


class RefreshSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    refreshToken = fields.String(required=True, validate=validate.Length(min=1))


class BootstrapSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    token = fields.String(load_default="")
    identifier = fields.String(load_default="")
    password = fields.String(load_default="", load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "identifier" not in data and "email" in data:
            data = dict(data)
            data["identifier"] = data.pop("email")
        return data


class ClaimsOutSchema(Schema):
    subject = fields.String()
    email = fields.String(allow_none=True)
    role = fields.Function(lambda claims: claims.role.value if claims.role else None)
