"""Row schemas for the bulk import steps; spreadsheet cells arrive as strings or NaN."""
from marshmallow import Schema, fields, validate, pre_load, EXCLUDE

from models.coupon import CouponType


class ImportRowSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    @pre_load
    def clean_cells(self, data, **kwargs):
        cleaned = {}
        for key, value in data.items():
            key = str(key).strip().lower()
            if value is None or (isinstance(value, float) and value != value):
                continue
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
            elif isinstance(value, (int, float)) and not isinstance(value, bool):
                value = str(int(value)) if float(value).is_integer() else str(value)
            cleaned[key] = value
        return cleaned


class MerchantImportSchema(ImportRowSchema):
    name = fields.String(required=True, validate=validate.Length(min=1))
    slug = fields.String(load_default='')
    h1keyword = fields.String(load_default='')
    web_url = fields.String(load_default='')
    aff_url = fields.String(load_default='')
    seo_title = fields.String(load_default='')
    seo_desc = fields.String(load_default='')


class SeoDescriptionImportSchema(ImportRowSchema):
    slug = fields.String(required=True, validate=validate.Length(min=1))
    seo_desc = fields.String(load_default='')


class FirstParagraphImportSchema(ImportRowSchema):
    slug = fields.String(required=True, validate=validate.Length(min=1))
    html = fields.String(load_default='')


class SlugChangeImportSchema(ImportRowSchema):
    old_slug = fields.String(required=True, validate=validate.Length(min=1))
    new_slug = fields.String(required=True, validate=validate.Length(min=1))


class TagStoreImportSchema(ImportRowSchema):
    merchant_slug = fields.String(required=True, validate=validate.Length(min=1))
    tag_slug = fields.String(required=True, validate=validate.Length(min=1))


class CouponImportSchema(ImportRowSchema):
    merchant_slug = fields.String(required=True, validate=validate.Length(min=1))
    coupon_type = fields.String(required=True, validate=validate.OneOf([t.value for t in CouponType]))
    coupon_code = fields.String(load_default='')
    title = fields.String(required=True, validate=validate.Length(min=1))
    descp = fields.String(load_default='')
    type_text = fields.String(load_default='')
    is_editor = fields.Boolean(load_default=False)
