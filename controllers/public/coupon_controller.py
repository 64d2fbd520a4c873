from flask import request, current_app

from common.cache import with_cache, cache_key_for_request
from common.response import ok, server_error
from common.seo import listing_meta
from common.validation import val_enum
from controllers.public.base import paging, origin, search_term
from models.coupon import Coupon, CouponType
from models.merchant import Merchant

COUPON_TYPES = [t.value for t in CouponType]
COUPON_SORTS = {
    'latest': (Coupon.created_at.desc(), Coupon.id.desc()),
    # Coupons without an end date go last
    'ending': (Coupon.ends_at.is_(None), Coupon.ends_at.asc(), Coupon.id.desc()),
    'editor': (Coupon.is_editor.desc(), Coupon.created_at.desc(), Coupon.id.desc()),
}


def active_coupons_query():
    """Published, unexpired coupons of published stores."""
    return Coupon.query.join(Merchant, Coupon.merchant_id == Merchant.id).filter(
        Coupon.is_publish.is_(True),
        Merchant.is_publish.is_(True),
        Coupon.not_expired(),
    )


class PublicCouponController:

    @staticmethod
    def list_coupons():
        page, limit = paging()
        q = search_term()
        store = (request.args.get('store') or '').strip().lower()
        coupon_type = val_enum(request.args.get('type'), COUPON_TYPES, None)
        sort = val_enum(request.args.get('sort'), COUPON_SORTS, 'latest')
        base_origin, path = origin(), request.path

        def produce():
            query = active_coupons_query()
            if q:
                query = query.filter(Coupon.title.ilike(f"%{q}%"))
            if store:
                query = query.filter(Merchant.slug == store)
            if coupon_type:
                query = query.filter(Coupon.coupon_type == coupon_type)
            total = query.count()
            coupons = query.order_by(*COUPON_SORTS[sort]).offset((page - 1) * limit).limit(limit).all()
            return {
                'data': [c.serialize_public() for c in coupons],
                'meta': listing_meta(base_origin, path, page, limit, total,
                                     {'q': q, 'store': store, 'type': coupon_type, 'sort': sort}),
            }

        try:
            return ok(with_cache(cache_key_for_request(), produce))
        except Exception as e:
            current_app.logger.error(f"Failed to list coupons: {e}")
            return server_error("Failed to list coupons", e)
