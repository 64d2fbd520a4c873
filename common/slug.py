import re
import time

_QUOTES = re.compile(r"['\"]")
_NON_ALNUM = re.compile(r'[^a-z0-9]+')
_EDGE_DASHES = re.compile(r'^-+|-+$')
_NON_WORD = re.compile(r'[^\w\s-]')
_WHITESPACE = re.compile(r'\s+')

SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')

def to_slug(value):
    """Normalize any string into ``lowercase-dash-separated`` form."""
    s = str(value or '').strip().lower()
    s = _QUOTES.sub('', s)
    s = _NON_ALNUM.sub('-', s)
    return _EDGE_DASHES.sub('', s)

def slugify_title(value):
    """Blog flavour: keeps underscores and existing dashes, collapses whitespace."""
    s = str(value or '').lower().strip()
    s = _NON_WORD.sub('', s)
    return _WHITESPACE.sub('-', s)

def slug_taken(model, slug, exclude_id=None):
    query = model.query.filter(model.slug == slug)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return query.first() is not None

def ensure_unique_slug(model, base, exclude_id=None, fallback='item', max_attempts=50, normalize=to_slug):
    """Return a slug for ``model`` that no other row uses.

    Tries ``seed``, ``seed-1``, ``seed-2``... and gives up after
    ``max_attempts`` collisions with a timestamp suffix. When ``exclude_id``
    is given the row with that id does not count as a collision, so a record
    keeps its own slug on update.
    """
    seed = normalize(base) or fallback
    slug = seed
    for attempt in range(1, max_attempts + 1):
        if not slug_taken(model, slug, exclude_id):
            return slug
        slug = f"{seed}-{attempt}"
    return f"{seed}-{int(time.time() * 1000)}"
