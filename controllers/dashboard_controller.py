from flask import current_app

from common.response import success_response, server_error
from controllers.coupon_controller import CouponController
from models.blog import Blog
from models.coupon import Coupon
from models.merchant import Merchant
from models.tag import Tag


class DashboardController:

    @staticmethod
    def get_summary():
        """Record counts for the dashboard landing cards."""
        try:
            return success_response({
                'merchants': Merchant.query.count(),
                'published_merchants': Merchant.query.filter(Merchant.is_publish.is_(True)).count(),
                'coupons': Coupon.query.count(),
                'top_coupons': CouponController.count_top_coupons(),
                'blogs': Blog.query.count(),
                'tags': Tag.query.count(),
            })
        except Exception as e:
            current_app.logger.error(f"Error building dashboard summary: {e}")
            return server_error("Error building dashboard summary", e)
