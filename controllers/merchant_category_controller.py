from http import HTTPStatus

from flask import request, current_app

from common.cache import invalidate_public_cache
from common.database import db
from common.response import success_response, error_response, not_found, server_error, upload_failed_response
from common.slug import ensure_unique_slug
from common.validation import UNSET, to_bool, to_int, val_page, optional, clean_patch, request_payload
from models.merchant_category import MerchantCategory
from services.upload_service import upload_request_files, discard_files, UploadFailed

BUCKET = "merchant-category-images"
FOLDER = "categories"

CATEGORY_IMAGES = {
    'thumb': ('thumb_url', 'Thumbnail'),
    'top_banner': ('top_banner_url', 'Top banner'),
    'side_banner': ('side_banner_url', 'Side banner'),
}
TEXT_FIELDS = ('description', 'meta_title', 'meta_keywords', 'meta_description')
FLAG_FIELDS = ('show_home', 'show_deals_page', 'is_publish', 'is_header')


class MerchantCategoryController:

    @staticmethod
    def list_categories():
        """List with name search, flag filters and pagination."""
        try:
            args = request.args
            page = val_page(args.get('page'))
            limit = min(100, max(1, to_int(args.get('limit', 20), 20)))

            query = MerchantCategory.query
            name = (args.get('name') or '').strip()
            if name:
                query = query.filter(MerchantCategory.name.ilike(f"%{name}%"))
            for flag in FLAG_FIELDS:
                if args.get(flag) not in (None, ''):
                    query = query.filter(getattr(MerchantCategory, flag).is_(to_bool(args.get(flag))))

            total = query.count()
            categories = query.order_by(MerchantCategory.created_at.desc(), MerchantCategory.id.desc()) \
                .offset((page - 1) * limit).limit(limit).all()
            return success_response({'rows': [c.serialize() for c in categories], 'total': total})
        except Exception as e:
            current_app.logger.error(f"Error listing merchant categories: {e}")
            return server_error("Error listing merchant categories", e)

    @staticmethod
    def get_category(category_id):
        category = db.session.get(MerchantCategory, category_id)
        if not category:
            return not_found("Merchant category not found")
        return success_response(category.serialize())

    @staticmethod
    def create_category():
        body = request_payload(request)
        name = str(body.get('name') or '').strip()
        if not name:
            return error_response("Name is required")

        uploaded = {}
        try:
            category = MerchantCategory(
                name=name,
                slug=ensure_unique_slug(MerchantCategory, body.get('slug') or name, fallback='category'),
            )
            for field in TEXT_FIELDS:
                setattr(category, field, body.get(field) or '')
            for field in FLAG_FIELDS:
                setattr(category, field, to_bool(body.get(field)))
            uploaded = upload_request_files(request.files, CATEGORY_IMAGES, BUCKET, FOLDER)
            category.apply(uploaded)

            db.session.add(category)
            db.session.commit()
            invalidate_public_cache()
            return success_response(category.serialize(), HTTPStatus.CREATED)
        except UploadFailed as e:
            db.session.rollback()
            return upload_failed_response(e)
        except Exception as e:
            db.session.rollback()
            discard_files(uploaded.values())
            current_app.logger.error(f"Error creating merchant category: {e}")
            return server_error("Error creating merchant category", e)

    @staticmethod
    def update_category(category_id):
        category = db.session.get(MerchantCategory, category_id)
        if not category:
            return not_found("Merchant category not found")

        body = request_payload(request)
        uploaded = {}
        try:
            patch = {field: optional(body, field) for field in TEXT_FIELDS}
            patch['name'] = optional(body, 'name', lambda v: str(v or '').strip() or UNSET)
            for field in FLAG_FIELDS:
                patch[field] = optional(body, field, to_bool)

            if 'slug' in body:
                patch['slug'] = ensure_unique_slug(MerchantCategory, body.get('slug'),
                                                   exclude_id=category.id, fallback='category')
            elif patch['name']:
                patch['slug'] = ensure_unique_slug(MerchantCategory, patch['name'],
                                                   exclude_id=category.id, fallback='category')

            replaced = []
            for field, (column, _label) in CATEGORY_IMAGES.items():
                if to_bool(body.get(f"remove_{field}")) and getattr(category, column):
                    replaced.append(getattr(category, column))
                    patch[column] = None
            uploaded = upload_request_files(request.files, CATEGORY_IMAGES, BUCKET, FOLDER)
            for column, url in uploaded.items():
                if getattr(category, column) and getattr(category, column) not in replaced:
                    replaced.append(getattr(category, column))
                patch[column] = url

            category.apply(clean_patch(patch))
            db.session.commit()
            discard_files(replaced)
            invalidate_public_cache()
            return success_response(category.serialize())
        except UploadFailed as e:
            db.session.rollback()
            return upload_failed_response(e)
        except Exception as e:
            db.session.rollback()
            discard_files(uploaded.values())
            current_app.logger.error(f"Error updating merchant category {category_id}: {e}")
            return server_error("Error updating merchant category", e)

    @staticmethod
    def toggle_status(category_id):
        category = db.session.get(MerchantCategory, category_id)
        if not category:
            return not_found("Merchant category not found")
        category.is_publish = not category.is_publish
        db.session.commit()
        invalidate_public_cache()
        return success_response(category.serialize())

    @staticmethod
    def delete_category(category_id):
        category = db.session.get(MerchantCategory, category_id)
        if not category:
            return not_found("Merchant category not found")

        urls = category.image_urls()
        db.session.delete(category)
        db.session.commit()
        deleted = discard_files(urls)
        invalidate_public_cache()
        return success_response({'id': category_id, 'deleted_files': deleted})
