"""Canonical URLs, pagination links, meta tags and JSON-LD for public pages."""
import math
import re
from html import unescape
from urllib.parse import urlencode

from flask import current_app

_TAGS = re.compile(r'<[^>]+>')
_SPACES = re.compile(r'\s+')

DESCRIPTION_MAX = 160

def request_origin(req):
    """Scheme and host of the incoming request, honouring a proxy's X-Forwarded-Proto."""
    scheme = req.headers.get('X-Forwarded-Proto') or req.scheme
    scheme = scheme.split(',')[0].strip()
    return f"{scheme}://{req.host}"

def total_pages(total, limit):
    return max(math.ceil((total or 0) / (limit or 1)), 1)

def page_url(origin, path, params):
    query = urlencode([(k, str(v)) for k, v in params.items() if v not in (None, '')])
    return f"{origin}{path}?{query}" if query else f"{origin}{path}"

def build_prev_next(origin, path, page, limit, total, extra_params=None):
    """Return ``(prev_url, next_url, total_pages)`` for a paginated listing."""
    pages = total_pages(total, limit)

    def make_url(p):
        return page_url(origin, path, {**(extra_params or {}), 'page': p, 'limit': limit})

    prev_url = make_url(page - 1) if page > 1 else None
    next_url = make_url(page + 1) if page < pages else None
    return prev_url, next_url, pages

def build_canonical(origin, path, page=None):
    canonical = f"{origin}{path}"
    if page and page > 1:
        canonical = f"{canonical}?page={page}"
    return canonical

def listing_meta(origin, path, page, limit, total, extra_params=None):
    prev_url, next_url, pages = build_prev_next(origin, path, page, limit, total, extra_params)
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'total_pages': pages,
        'canonical': build_canonical(origin, path, page),
        'prev': prev_url,
        'next': next_url,
    }

def strip_html(html):
    text = _TAGS.sub(' ', html or '')
    return _SPACES.sub(' ', unescape(text)).strip()

def truncate(text, length=DESCRIPTION_MAX):
    if len(text) <= length:
        return text
    cut = text[:length - 1].rsplit(' ', 1)[0]
    return f"{cut}…"

def build_seo(title, meta_title=None, meta_description=None, meta_keywords=None,
              fallback_text=None, canonical=None, image=None):
    site_name = current_app.config.get('SITE_NAME', '')
    description = meta_description or truncate(strip_html(fallback_text))
    return {
        'title': meta_title or (f"{title} | {site_name}" if site_name else title),
        'description': description or None,
        'keywords': meta_keywords or None,
        'canonical': canonical,
        'og_image': image,
    }

def build_breadcrumbs(origin, trail):
    """``trail`` is a list of ``(name, path)`` pairs after Home."""
    crumbs = [{'name': 'Home', 'url': f"{origin}/"}]
    crumbs.extend({'name': name, 'url': f"{origin}{path}"} for name, path in trail)
    return crumbs

def build_breadcrumb_jsonld(crumbs):
    return {
        '@context': 'https://schema.org',
        '@type': 'BreadcrumbList',
        'itemListElement': [
            {'@type': 'ListItem', 'position': i + 1, 'name': c['name'], 'item': c['url']}
            for i, c in enumerate(crumbs)
        ],
    }

def build_article_jsonld(blog, origin):
    site_name = current_app.config.get('SITE_NAME')
    article = {
        '@context': 'https://schema.org',
        '@type': 'Article',
        'headline': blog['title'],
        'mainEntityOfPage': f"{origin}/blog/{blog['slug']}",
        'datePublished': blog.get('created_at'),
        'dateModified': blog.get('updated_at') or blog.get('created_at'),
        'publisher': {'@type': 'Organization', 'name': site_name},
    }
    if blog.get('hero_image_url'):
        article['image'] = [blog['hero_image_url']]
    if blog.get('author'):
        article['author'] = {'@type': 'Person', 'name': blog['author']['name']}
    return article

def build_store_jsonld(store, coupons, origin):
    url = f"{origin}/stores/{store['slug']}"
    organization = {
        '@context': 'https://schema.org',
        '@type': 'Organization',
        'name': store['name'],
        'url': store.get('website') or url,
    }
    if store.get('logo_url'):
        organization['logo'] = store['logo_url']
    if coupons:
        organization['makesOffer'] = [
            {
                '@type': 'Offer',
                'name': c['title'],
                'description': c.get('description') or None,
                'url': url,
                'validFrom': c.get('starts_at'),
                'validThrough': c.get('ends_at'),
            }
            for c in coupons
        ]
    return organization

def build_item_list_jsonld(items, origin, section):
    return {
        '@context': 'https://schema.org',
        '@type': 'ItemList',
        'itemListElement': [
            {
                '@type': 'ListItem',
                'position': i + 1,
                'url': f"{origin}/{section}/{item['slug']}",
                'name': item.get('name') or item.get('title'),
            }
            for i, item in enumerate(items)
        ],
    }
