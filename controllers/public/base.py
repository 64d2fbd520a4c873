"""Request parsing shared by the public site endpoints."""
from flask import request, current_app

from common.seo import request_origin
from common.validation import val_page, val_limit

QUERY_MAX = 200


def paging():
    """``(page, limit)`` from the query string, clamped to the public limits."""
    page = val_page(request.args.get('page'))
    limit = val_limit(request.args.get('limit'),
                      default=current_app.config.get('PUBLIC_DEFAULT_LIMIT', 20),
                      maximum=current_app.config.get('PUBLIC_MAX_LIMIT', 50))
    return page, limit


def origin():
    return request_origin(request)


def search_term():
    return str(request.args.get('q') or '')[:QUERY_MAX].strip()


def site_origin():
    """Origin used for links to the public site; falls back to the request host."""
    return (current_app.config.get('SITE_URL') or origin()).rstrip('/')
