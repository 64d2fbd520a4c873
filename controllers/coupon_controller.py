from datetime import timedelta
from http import HTTPStatus

from flask import request, current_app
from marshmallow import ValidationError

from common.cache import invalidate_public_cache
from common.database import db
from common.response import success_response, error_response, not_found, server_error, upload_failed_response
from common.validation import to_int, val_page, request_payload
from models.coupon import Coupon, CouponType
from models.merchant import Merchant
from schemas.coupon_schemas import CouponSchema, CouponListQuerySchema
from services.upload_service import upload_request_files, discard_files, UploadFailed

BUCKET = "coupon-images"
FOLDER = "coupons"

COUPON_IMAGES = {
    'image': ('image_url', 'Image'),
    'proof_image': ('proof_image_url', 'Proof image'),
}


class CouponController:

    @staticmethod
    def list_coupons():
        try:
            filters = CouponListQuerySchema().load(request.args.to_dict())
        except ValidationError as err:
            return error_response("Invalid filters", HTTPStatus.BAD_REQUEST, err.messages)

        page = val_page(request.args.get('page'))
        limit = min(100, max(1, to_int(request.args.get('limit', 20), 20)))

        query = Coupon.query
        if filters['store_id']:
            query = query.filter(Coupon.merchant_id == filters['store_id'])
        if filters['type']:
            query = query.filter(Coupon.coupon_type == filters['type'])
        if filters['status']:
            query = query.filter(Coupon.is_publish.is_(filters['status'] == 'published'))
        if filters['from_date']:
            query = query.filter(Coupon.created_at >= filters['from_date'])
        if filters['to_date']:
            to_date = filters['to_date']
            # A bare date covers the whole day
            if to_date.hour == to_date.minute == to_date.second == 0:
                to_date = to_date + timedelta(days=1) - timedelta(microseconds=1)
            query = query.filter(Coupon.created_at <= to_date)
        search = filters['search'].strip()
        if search:
            query = query.filter(Coupon.title.ilike(f"%{search}%"))

        try:
            total = query.count()
            coupons = query.order_by(Coupon.created_at.desc(), Coupon.id.desc()) \
                .offset((page - 1) * limit).limit(limit).all()
            return success_response({'rows': [c.serialize_list() for c in coupons], 'total': total})
        except Exception as e:
            current_app.logger.error(f"Error listing coupons: {e}")
            return server_error("Error listing coupons", e)

    @staticmethod
    def get_coupon(coupon_id):
        coupon = db.session.get(Coupon, coupon_id)
        if not coupon:
            return not_found("Coupon not found")
        return success_response(coupon.serialize_list())

    @staticmethod
    def create_coupon():
        try:
            data = CouponSchema().load(request_payload(request))
        except ValidationError as err:
            return error_response("Validation failed", HTTPStatus.BAD_REQUEST, err.messages)

        if not db.session.get(Merchant, data['merchant_id']):
            return error_response("Merchant not found", HTTPStatus.BAD_REQUEST)

        if data['coupon_type'] == CouponType.DEAL.value:
            data['coupon_code'] = None

        uploaded = {}
        try:
            coupon = Coupon(**data)
            uploaded = upload_request_files(request.files, COUPON_IMAGES, BUCKET, FOLDER)
            coupon.apply(uploaded)
            db.session.add(coupon)
            db.session.commit()
            invalidate_public_cache()
            return success_response(coupon.serialize_list(), HTTPStatus.CREATED)
        except UploadFailed as e:
            db.session.rollback()
            return upload_failed_response(e)
        except Exception as e:
            db.session.rollback()
            discard_files(uploaded.values())
            current_app.logger.error(f"Error creating coupon: {e}")
            return server_error("Error creating coupon", e)

    @staticmethod
    def update_coupon(coupon_id):
        coupon = db.session.get(Coupon, coupon_id)
        if not coupon:
            return not_found("Coupon not found")

        try:
            data = CouponSchema(partial=True).load(request_payload(request))
        except ValidationError as err:
            return error_response("Validation failed", HTTPStatus.BAD_REQUEST, err.messages)

        if 'merchant_id' in data and not db.session.get(Merchant, data['merchant_id']):
            return error_response("Merchant not found", HTTPStatus.BAD_REQUEST)

        # Validate the merged record, not only the fields sent
        coupon_type = data.get('coupon_type', coupon.coupon_type)
        coupon_code = data.get('coupon_code', coupon.coupon_code)
        if coupon_type == CouponType.COUPON.value and not coupon_code:
            return error_response("Validation failed", HTTPStatus.BAD_REQUEST,
                                  {'coupon_code': ["Coupon code is required for coupons."]})
        if coupon_type == CouponType.DEAL.value:
            data['coupon_code'] = None
        starts_at = data.get('starts_at', coupon.starts_at)
        ends_at = data.get('ends_at', coupon.ends_at)
        if starts_at and ends_at and ends_at < starts_at:
            return error_response("Validation failed", HTTPStatus.BAD_REQUEST,
                                  {'ends_at': ["End date cannot be before start date."]})

        uploaded = {}
        try:
            uploaded = upload_request_files(request.files, COUPON_IMAGES, BUCKET, FOLDER)
            replaced = [getattr(coupon, column) for column in uploaded if getattr(coupon, column)]
            coupon.apply(data)
            coupon.apply(uploaded)
            db.session.commit()
            discard_files(replaced)
            invalidate_public_cache()
            return success_response(coupon.serialize_list())
        except UploadFailed as e:
            db.session.rollback()
            return upload_failed_response(e)
        except Exception as e:
            db.session.rollback()
            discard_files(uploaded.values())
            current_app.logger.error(f"Error updating coupon {coupon_id}: {e}")
            return server_error("Error updating coupon", e)

    @staticmethod
    def _toggle(coupon_id, column):
        coupon = db.session.get(Coupon, coupon_id)
        if not coupon:
            return not_found("Coupon not found")
        setattr(coupon, column, not getattr(coupon, column))
        db.session.commit()
        invalidate_public_cache()
        return success_response(coupon.serialize_list())

    @staticmethod
    def toggle_publish(coupon_id):
        return CouponController._toggle(coupon_id, 'is_publish')

    @staticmethod
    def toggle_editor_pick(coupon_id):
        return CouponController._toggle(coupon_id, 'is_editor')

    @staticmethod
    def delete_coupon(coupon_id):
        coupon = db.session.get(Coupon, coupon_id)
        if not coupon:
            return not_found("Coupon not found")
        urls = coupon.image_urls()
        db.session.delete(coupon)
        db.session.commit()
        discard_files(urls)
        invalidate_public_cache()
        return success_response({'id': coupon_id})

    @staticmethod
    def count_top_coupons():
        """Number of published coupons, shown on the dashboard."""
        return Coupon.query.filter(Coupon.is_publish.is_(True)).count()
