from datetime import datetime, timezone
from http import HTTPStatus

from flask import request, current_app, jsonify, Response
from sqlalchemy import text

from common.cache import with_cache, cache_key_for_request
from common.database import db, isoformat
from common.response import ok, bad_request, server_error
from common.sitemap import sitemap_xml
from controllers.public.base import search_term, site_origin
from controllers.public.blog_controller import published_blogs, BLOG_SORTS
from controllers.public.coupon_controller import active_coupons_query
from models.blog import Blog
from models.coupon import Coupon
from models.merchant import Merchant

SEARCH_LIMIT = 10


class PublicSiteController:
    """Site-wide search, health probe and sitemaps."""

    @staticmethod
    def search():
        q = search_term()
        if not q:
            return bad_request("q is required")

        def produce():
            pattern = f"%{q}%"
            stores = Merchant.query.filter(Merchant.is_publish.is_(True), Merchant.name.ilike(pattern)) \
                .order_by(Merchant.views.desc(), Merchant.name.asc()).limit(SEARCH_LIMIT).all()
            coupons = active_coupons_query().filter(Coupon.title.ilike(pattern)) \
                .order_by(Coupon.created_at.desc(), Coupon.id.desc()).limit(SEARCH_LIMIT).all()
            blogs = published_blogs().filter(Blog.title.ilike(pattern)) \
                .order_by(*BLOG_SORTS['latest']).limit(SEARCH_LIMIT).all()
            return {
                'data': {
                    'stores': [s.serialize_public() for s in stores],
                    'coupons': [c.serialize_public() for c in coupons],
                    'blogs': [b.serialize_card() for b in blogs],
                },
                'meta': {'q': q},
            }

        try:
            return ok(with_cache(cache_key_for_request(), produce))
        except Exception as e:
            current_app.logger.error(f"Search failed for {q!r}: {e}")
            return server_error("Search failed", e)

    @staticmethod
    def health():
        now = datetime.now(timezone.utc).isoformat()
        try:
            db.session.execute(text('SELECT 1'))
            return jsonify({'status': 'ok', 'db': 'ok', 'time': now}), HTTPStatus.OK
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Health check database error: {e}")
            return jsonify({'status': 'ok', 'db': 'error', 'time': now}), HTTPStatus.SERVICE_UNAVAILABLE

    @staticmethod
    def _sitemap(model, section):
        site = site_origin()

        def produce():
            rows = db.session.query(model.slug, model.updated_at) \
                .filter(model.is_publish.is_(True)).order_by(model.id.asc()).all()
            return sitemap_xml([
                {'loc': f"{site}/{section}/{slug}", 'lastmod': isoformat(updated_at)}
                for slug, updated_at in rows
            ])

        try:
            xml = with_cache(cache_key_for_request('sitemap'), produce)
        except Exception as e:
            current_app.logger.error(f"Sitemap {section} failed: {e}")
            return server_error("Failed to build sitemap", e)
        return Response(xml, mimetype='application/xml')

    @staticmethod
    def stores_sitemap():
        return PublicSiteController._sitemap(Merchant, 'stores')

    @staticmethod
    def blogs_sitemap():
        return PublicSiteController._sitemap(Blog, 'blog')
