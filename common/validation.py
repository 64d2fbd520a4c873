import math
import re

from common.slug import SLUG_PATTERN

_TRUTHY = {'true', '1', 'yes', 'on'}
_LOCALE = re.compile(r'^[a-z]{2}(?:-[A-Z]{2})?$')

class _Unset:
    """Marks a field the client did not send, as opposed to an explicit null."""

    def __repr__(self):
        return 'UNSET'

    def __bool__(self):
        return False

UNSET = _Unset()

def to_bool(value):
    if value is True:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return False

def to_int(value, default=0):
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return int(number)

MAX_PAGE = 10000

def val_page(value, maximum=MAX_PAGE):
    if value in (None, ''):
        return 1
    return min(maximum, max(1, to_int(value, 1)))

def val_limit(value, default=20, maximum=50):
    if value in (None, ''):
        return default
    return min(maximum, max(1, to_int(value, default)))

def val_enum(value, allowed, default):
    return value if value in allowed else default

def val_locale(value):
    if not value:
        return None
    value = str(value).strip()
    return value if _LOCALE.match(value) else None

def derive_locale(req):
    header = req.headers.get('Accept-Language', '')
    first = header.split(',')[0].split(';')[0].strip()
    return val_locale(first)

def clean_patch(patch):
    """Drop fields left as ``UNSET`` so they are not overwritten."""
    return {k: v for k, v in patch.items() if v is not UNSET}

def optional(source, key, cast=None):
    """Read ``key`` from a form/JSON mapping, returning ``UNSET`` when absent."""
    if key not in source:
        return UNSET
    value = source.get(key)
    return cast(value) if cast else value

def request_payload(req):
    """Merge form fields or the JSON body into a plain dict."""
    if req.form:
        return req.form.to_dict()
    body = req.get_json(silent=True)
    return body if isinstance(body, dict) else {}

def normalize_tag_payload(body):
    def to_null(v):
        return None if v in ('', None) else v

    def trimmed(key):
        return str(body.get(key) or '').strip()

    display_order = body.get('display_order')
    return {
        'tag_name': trimmed('tag_name'),
        'slug': trimmed('slug'),
        'parent_id': to_null(body.get('parent_id')),
        'active': to_bool(body.get('active')),
        'display_order': to_int(display_order, 0) if display_order not in (None, '') else 0,
        'meta_title': to_null(trimmed('meta_title')),
        'meta_description': to_null(trimmed('meta_description')),
        'meta_keywords': to_null(trimmed('meta_keywords')),
        'existing_image_url': to_null(body.get('existing_image_url')),
    }

def validate_tag_payload(fields, require_name=True, require_slug=False):
    errors = []

    if require_name and not fields.get('tag_name'):
        errors.append("tag_name is required.")
    if require_slug and not fields.get('slug'):
        errors.append("slug is required.")
    if fields.get('slug') and not SLUG_PATTERN.match(fields['slug']):
        errors.append("slug must be URL-safe (lowercase letters, numbers, hyphens).")
    if fields.get('display_order') is not None:
        try:
            float(fields['display_order'])
        except (TypeError, ValueError):
            errors.append("display_order must be a number.")
    parent_id = fields.get('parent_id')
    if parent_id not in (None, ''):
        try:
            int(parent_id)
        except (TypeError, ValueError):
            errors.append("parent_id must be a number or empty.")

    return len(errors) == 0, errors

def parse_id_list(req, key):
    """Collect integer ids sent as repeated form fields, a comma list or a JSON array.

    Returns None when the field was not sent at all.
    """
    if req.form:
        if key not in req.form:
            return None
        values = req.form.getlist(key)
    else:
        body = req.get_json(silent=True) or {}
        if key not in body:
            return None
        values = body.get(key) or []
        if not isinstance(values, list):
            values = [values]

    ids = []
    for value in values:
        for part in str(value).split(','):
            number = to_int(part, None) if part.strip() else None
            if number is not None and number not in ids:
                ids.append(number)
    return ids
