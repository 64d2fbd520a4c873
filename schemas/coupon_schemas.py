from datetime import datetime, timezone

from marshmallow import Schema, fields, validate, validates_schema, pre_load, post_load, ValidationError, EXCLUDE

from models.coupon import CouponType

COUPON_TYPES = [t.value for t in CouponType]


class IsoDateTime(fields.Field):
    """Accepts ISO dates as well as datetimes; date-only values mean midnight."""

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, datetime):
            return value
        try:
            return datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
        except ValueError:
            raise ValidationError("Not a valid datetime.")

    def _serialize(self, value, attr, obj, **kwargs):
        return value.isoformat() if value else None


class CouponSchema(Schema):
    """Create payload for a coupon or deal; multipart forms send everything as strings."""

    class Meta:
        unknown = EXCLUDE

    merchant_id = fields.Integer(required=True)
    coupon_type = fields.String(load_default=CouponType.COUPON.value, validate=validate.OneOf(COUPON_TYPES))
    coupon_code = fields.String(allow_none=True, validate=validate.Length(max=100))
    title = fields.String(required=True, validate=validate.Length(min=1, max=500))
    description = fields.String(allow_none=True)
    type_text = fields.String(allow_none=True, validate=validate.Length(max=255))
    is_editor = fields.Boolean(load_default=False)
    is_publish = fields.Boolean(load_default=False)
    starts_at = IsoDateTime(allow_none=True)
    ends_at = IsoDateTime(allow_none=True)

    @pre_load
    def blank_to_none(self, data, **kwargs):
        data = dict(data)
        for key in ('coupon_code', 'starts_at', 'ends_at', 'description', 'type_text'):
            if key in data and isinstance(data[key], str) and not data[key].strip():
                data[key] = None
        if isinstance(data.get('title'), str):
            data['title'] = data['title'].strip()
        return data

    @validates_schema
    def validate_window_and_code(self, data, **kwargs):
        errors = {}
        needs_code = data.get('coupon_type') == CouponType.COUPON.value and not data.get('coupon_code')
        if needs_code and (not self.partial or 'coupon_code' in data):
            errors['coupon_code'] = ["Coupon code is required for coupons."]

        starts_at = data.get('starts_at')
        ends_at = data.get('ends_at')
        if starts_at and ends_at and _naive_utc(ends_at) < _naive_utc(starts_at):
            errors['ends_at'] = ["End date cannot be before start date."]

        if errors:
            raise ValidationError(errors)

    @post_load
    def normalize_dates(self, data, **kwargs):
        for key in ('starts_at', 'ends_at'):
            if data.get(key):
                data[key] = _naive_utc(data[key])
        return data


def _naive_utc(value):
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CouponListQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    search = fields.String(load_default='')
    store_id = fields.Integer(load_default=None, allow_none=True)
    type = fields.String(load_default='', validate=validate.OneOf(COUPON_TYPES + ['']))
    status = fields.String(load_default='', validate=validate.OneOf(['published', 'draft', '']))
    from_date = IsoDateTime(load_default=None, allow_none=True)
    to_date = IsoDateTime(load_default=None, allow_none=True)

    @pre_load
    def blank_to_none(self, data, **kwargs):
        data = dict(data)
        for key in ('store_id', 'from_date', 'to_date'):
            if data.get(key) == '':
                data[key] = None
        return data

    @post_load
    def normalize_dates(self, data, **kwargs):
        for key in ('from_date', 'to_date'):
            if data.get(key):
                data[key] = _naive_utc(data[key])
        return data
