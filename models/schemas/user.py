from marshmallow import Schema, fields, pre_load, validate, EXCLUDE

from models.schemas.common import not_blank


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class _UserBaseSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("email"), str):
            data = dict(data, email=_norm_email(data["email"]))
        return data


class UserCreateSchema(_UserBaseSchema):
    username = fields.String(required=True, validate=[not_blank, validate.Length(max=64)])
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=not_blank)


class UserLoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(load_default=None)
    password = fields.String(load_default=None)


class UserUpdateSchema(_UserBaseSchema):
    username = fields.String(validate=[not_blank, validate.Length(max=64)])
    email = fields.Email()
    password = fields.String(load_only=True, validate=not_blank)


class UserOutSchema(Schema):
    id = fields.String()
    username = fields.String()
    email = fields.String()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class UserSummarySchema(Schema):
    id = fields.String()
    username = fields.String()
    email = fields.String()
