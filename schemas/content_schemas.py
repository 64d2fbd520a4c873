from marshmallow import Schema, fields, validate, EXCLUDE


class BlogCategorySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=255))
    slug = fields.String(validate=validate.Length(max=255))
    is_publish = fields.Boolean(load_default=True)


class AuthorSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=255))
    slug = fields.String(validate=validate.Length(max=255))
    email = fields.Email(allow_none=True)
    bio = fields.String(allow_none=True)
    avatar_url = fields.Url(allow_none=True)
