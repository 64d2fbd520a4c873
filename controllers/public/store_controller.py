from flask import request, current_app
from sqlalchemy import and_, func

from common.cache import with_cache, cache_key_for_request
from common.database import db
from common.response import ok, not_found, server_error
from common.seo import (
    listing_meta, build_canonical, build_seo, build_breadcrumbs, build_breadcrumb_jsonld,
    build_store_jsonld, build_item_list_jsonld
)
from common.validation import val_enum
from controllers.public.base import paging, origin, search_term
from models.coupon import Coupon
from models.merchant import Merchant
from models.merchant_category import MerchantCategory, merchant_category_links

STORE_SORTS = {
    'newest': (Merchant.created_at.desc(), Merchant.id.desc()),
    'name': (Merchant.name.asc(), Merchant.id.asc()),
    'popular': (Merchant.views.desc(), Merchant.id.desc()),
}
RELATED_LIMIT = 6


class PublicStoreController:

    @staticmethod
    def list_categories():
        """Published merchant categories with the number of published stores in each."""
        page, limit = paging()
        base_origin, path = origin(), request.path

        def produce():
            store_count = func.count(Merchant.id).label('store_count')
            query = db.session.query(MerchantCategory, store_count) \
                .outerjoin(merchant_category_links, merchant_category_links.c.category_id == MerchantCategory.id) \
                .outerjoin(Merchant, and_(Merchant.id == merchant_category_links.c.merchant_id,
                                             Merchant.is_publish.is_(True))) \
                .filter(MerchantCategory.is_publish.is_(True)) \
                .group_by(MerchantCategory.id)
            total = MerchantCategory.query.filter(MerchantCategory.is_publish.is_(True)).count()
            rows = query.order_by(MerchantCategory.name.asc()) \
                .offset((page - 1) * limit).limit(limit).all()
            data = [{
                'id': category.id,
                'name': category.name,
                'slug': category.slug,
                'thumb_url': category.thumb_url,
                'show_home': category.show_home,
                'is_header': category.is_header,
                'store_count': count,
            } for category, count in rows]
            return {'data': data, 'meta': listing_meta(base_origin, path, page, limit, total)}

        try:
            return ok(with_cache(cache_key_for_request(), produce))
        except Exception as e:
            current_app.logger.error(f"Failed to list categories: {e}")
            return server_error("Failed to list categories", e)

    @staticmethod
    def list_stores():
        page, limit = paging()
        q = search_term()
        category = (request.args.get('category') or '').strip().lower()
        sort = val_enum(request.args.get('sort'), STORE_SORTS, 'newest')
        base_origin, path = origin(), request.path

        def produce():
            query = Merchant.query.filter(Merchant.is_publish.is_(True))
            if q:
                query = query.filter(Merchant.name.ilike(f"%{q}%"))
            if category:
                query = query.filter(Merchant.categories.any(MerchantCategory.slug == category))
            total = query.count()
            stores = query.order_by(*STORE_SORTS[sort]).offset((page - 1) * limit).limit(limit).all()
            data = [s.serialize_public() for s in stores]
            meta = listing_meta(base_origin, path, page, limit, total,
                                {'q': q, 'category': category, 'sort': sort})
            meta['jsonld'] = build_item_list_jsonld(data, base_origin, 'stores')
            return {'data': data, 'meta': meta}

        try:
            return ok(with_cache(cache_key_for_request(), produce))
        except Exception as e:
            current_app.logger.error(f"Failed to list stores: {e}")
            return server_error("Failed to list stores", e)

    @staticmethod
    def get_store(slug):
        slug = (slug or '').strip().lower()
        base_origin, path = origin(), request.path

        def produce():
            store = Merchant.query.filter(Merchant.slug == slug, Merchant.is_publish.is_(True)).first()
            if not store:
                return None

            coupons = Coupon.query.filter(
                Coupon.merchant_id == store.id,
                Coupon.is_publish.is_(True),
                Coupon.not_expired(),
            ).order_by(Coupon.is_editor.desc(), Coupon.created_at.desc(), Coupon.id.desc()).all()

            related = []
            category_ids = [c.id for c in store.categories]
            if category_ids:
                related = Merchant.query.filter(
                    Merchant.id != store.id,
                    Merchant.is_publish.is_(True),
                    Merchant.categories.any(MerchantCategory.id.in_(category_ids)),
                ).order_by(Merchant.views.desc(), Merchant.name.asc()).limit(RELATED_LIMIT).all()

            canonical = build_canonical(base_origin, path)
            breadcrumbs = build_breadcrumbs(base_origin, [
                ('Stores', '/stores'),
                (store.name, f"/stores/{store.slug}"),
            ])
            store_data = store.serialize_public()
            store_data.update({
                'h1keyword': store.h1keyword,
                'description': store.description,
                'side_description_html': store.side_description_html,
                'top_banner_url': store.top_banner_url,
                'side_banner_url': store.side_banner_url,
                'categories': [{'id': c.id, 'name': c.name, 'slug': c.slug} for c in store.categories],
            })
            coupon_data = [c.serialize_public() for c in coupons]

            return {
                'data': {
                    'store': store_data,
                    'seo': build_seo(store.name, store.meta_title, store.meta_description, store.meta_keywords,
                                     store.description or store.side_description_html, canonical, store.logo_url),
                    'breadcrumbs': breadcrumbs,
                    'coupons': coupon_data,
                    'related': [m.serialize_public() for m in related],
                },
                'meta': {
                    'canonical': canonical,
                    'jsonld': {
                        'store': build_store_jsonld(store_data, coupon_data, base_origin),
                        'breadcrumb': build_breadcrumb_jsonld(breadcrumbs),
                    },
                },
            }

        try:
            result = with_cache(cache_key_for_request(), produce)
        except Exception as e:
            current_app.logger.error(f"Failed to get store {slug}: {e}")
            return server_error("Failed to get store detail", e)
        if not result:
            return not_found("Store not found")
        return ok(result)
