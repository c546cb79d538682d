from marshmallow import Schema, fields, EXCLUDE

from models.schemas.common import not_blank


class CommentCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    post_id = fields.String(required=True)
    content = fields.String(required=True, validate=not_blank)


class CommentUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    content = fields.String(required=True, validate=not_blank,
                            error_messages={"required": "Content is required"})


class CommentOutSchema(Schema):
    id = fields.String()
    post_id = fields.String()
    content = fields.String()
    sender = fields.String()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
