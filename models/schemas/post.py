from marshmallow import Schema, fields, EXCLUDE

from models.schemas.common import not_blank
from models.schemas.comment import CommentOutSchema


class PostCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True, validate=not_blank)
    content = fields.String(required=True, validate=not_blank)


class PostUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    # All optional, but validated if present. The owner is never updatable.
    title = fields.String(validate=not_blank)
    content = fields.String(validate=not_blank)


class PostOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    content = fields.String()
    sender = fields.String()
    comments = fields.List(fields.Nested(CommentOutSchema))
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
