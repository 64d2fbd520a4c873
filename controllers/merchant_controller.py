from http import HTTPStatus

from flask import request, current_app

from common.cache import invalidate_public_cache
from common.database import db
from common.response import success_response, error_response, not_found, server_error, upload_failed_response
from common.slug import ensure_unique_slug
from common.validation import (
    UNSET, to_bool, to_int, val_page, optional, clean_patch, request_payload, parse_id_list
)
from models.merchant import Merchant
from models.merchant_category import MerchantCategory
from models.coupon import MerchantProof
from services.storage import StorageError, get_storage_service
from services.upload_service import upload_request_files, discard_files, UploadFailed

FOLDER = "merchants"

MERCHANT_IMAGES = {
    'logo': ('logo_url', 'Logo'),
    'top_banner': ('top_banner_url', 'Top banner'),
    'side_banner': ('side_banner_url', 'Side banner'),
}

TEXT_FIELDS = (
    'description', 'h1keyword', 'side_description_html', 'meta_title', 'meta_keywords',
    'meta_description', 'website', 'web_url', 'aff_url', 'email', 'phone',
)
FLAG_FIELDS = ('show_home', 'show_deals_page', 'is_publish', 'is_header')


def _bucket():
    return current_app.config.get('UPLOAD_BUCKET', 'merchant-images')


def _load_categories(ids):
    if not ids:
        return []
    return MerchantCategory.query.filter(MerchantCategory.id.in_(ids)).all()


class MerchantController:
    """Dashboard CRUD for merchants (stores)."""

    @staticmethod
    def list_merchants():
        try:
            name = (request.args.get('name') or '').strip()
            page = val_page(request.args.get('page'))
            limit = min(100, max(1, to_int(request.args.get('limit', 20), 20)))

            query = Merchant.query
            if name:
                query = query.filter(Merchant.name.ilike(f"%{name}%"))

            total = query.count()
            merchants = query.order_by(Merchant.created_at.desc(), Merchant.id.desc()) \
                .offset((page - 1) * limit).limit(limit).all()

            return success_response({'rows': [m.serialize_list() for m in merchants], 'total': total})
        except Exception as e:
            current_app.logger.error(f"Error listing merchants: {e}")
            return server_error("Error listing merchants", e)

    @staticmethod
    def get_merchant(merchant_id):
        merchant = db.session.get(Merchant, merchant_id)
        if not merchant:
            return not_found("Merchant not found")
        return success_response(merchant.serialize())

    @staticmethod
    def create_merchant():
        body = request_payload(request)
        name = str(body.get('name') or '').strip()
        if not name:
            return error_response("Name is required")

        uploaded = {}
        try:
            merchant = Merchant(
                name=name,
                slug=ensure_unique_slug(Merchant, body.get('slug') or name, fallback='merchant'),
            )
            for field in TEXT_FIELDS:
                setattr(merchant, field, body.get(field) or '')
            for field in FLAG_FIELDS:
                setattr(merchant, field, to_bool(body.get(field)))

            category_ids = parse_id_list(request, 'category_ids')
            if category_ids:
                merchant.categories = _load_categories(category_ids)

            uploaded = upload_request_files(request.files, MERCHANT_IMAGES, _bucket(), FOLDER)
            merchant.apply(uploaded)

            db.session.add(merchant)
            db.session.commit()
            invalidate_public_cache()
            current_app.logger.info(f"Merchant {merchant.id} created with slug {merchant.slug}")
            return success_response(merchant.serialize(), HTTPStatus.CREATED)
        except UploadFailed as e:
            db.session.rollback()
            return upload_failed_response(e)
        except Exception as e:
            db.session.rollback()
            discard_files(uploaded.values())
            current_app.logger.error(f"Error creating merchant: {e}")
            return server_error("Error creating merchant", e)

    @staticmethod
    def update_merchant(merchant_id):
        merchant = db.session.get(Merchant, merchant_id)
        if not merchant:
            return not_found("Merchant not found")

        body = request_payload(request)
        uploaded = {}
        try:
            patch = {field: optional(body, field) for field in TEXT_FIELDS}
            patch['name'] = optional(body, 'name', lambda v: str(v or '').strip() or UNSET)
            for field in FLAG_FIELDS:
                patch[field] = optional(body, field, to_bool)

            # Slug follows an explicit slug, else a new name
            if 'slug' in body:
                patch['slug'] = ensure_unique_slug(Merchant, body.get('slug'), exclude_id=merchant.id,
                                                   fallback='merchant')
            elif patch['name']:
                patch['slug'] = ensure_unique_slug(Merchant, patch['name'], exclude_id=merchant.id,
                                                   fallback='merchant')

            replaced = []
            for field, (column, _label) in MERCHANT_IMAGES.items():
                if to_bool(body.get(f"remove_{field}")) and getattr(merchant, column):
                    replaced.append(getattr(merchant, column))
                    patch[column] = None

            uploaded = upload_request_files(request.files, MERCHANT_IMAGES, _bucket(), FOLDER)
            for column, url in uploaded.items():
                if getattr(merchant, column) and getattr(merchant, column) not in replaced:
                    replaced.append(getattr(merchant, column))
                patch[column] = url

            merchant.apply(clean_patch(patch))

            category_ids = parse_id_list(request, 'category_ids')
            if category_ids is not None:
                merchant.categories = _load_categories(category_ids)

            db.session.commit()
            discard_files(replaced)
            invalidate_public_cache()
            return success_response(merchant.serialize())
        except UploadFailed as e:
            db.session.rollback()
            return upload_failed_response(e)
        except Exception as e:
            db.session.rollback()
            discard_files(uploaded.values())
            current_app.logger.error(f"Error updating merchant {merchant_id}: {e}")
            return server_error("Error updating merchant", e)

    @staticmethod
    def toggle_status(merchant_id):
        merchant = db.session.get(Merchant, merchant_id)
        if not merchant:
            return not_found("Merchant not found")
        merchant.is_publish = not merchant.is_publish
        db.session.commit()
        invalidate_public_cache()
        return success_response(merchant.serialize())

    @staticmethod
    def delete_merchant(merchant_id):
        merchant = db.session.get(Merchant, merchant_id)
        if not merchant:
            return not_found("Merchant not found")

        urls = merchant.image_urls() + [proof.image_url for proof in merchant.proofs]

        # Storage cleanup is best effort; the row is deleted either way
        try:
            if urls:
                get_storage_service().delete_files_by_urls(urls)
        except StorageError as e:
            current_app.logger.error(f"Merchant file deletion failed: {e.message}")

        try:
            db.session.delete(merchant)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error deleting merchant {merchant_id}: {e}")
            return server_error("Failed to delete merchant", e)

        invalidate_public_cache()
        return success_response({'id': merchant_id, 'deleted_files': len(urls)})

    @staticmethod
    def list_proofs(merchant_id):
        if not db.session.get(Merchant, merchant_id):
            return not_found("Merchant not found")

        page = val_page(request.args.get('page'))
        limit = min(100, max(1, to_int(request.args.get('limit', 10), 10)))
        query = MerchantProof.query.filter_by(merchant_id=merchant_id)
        total = query.count()
        proofs = query.order_by(MerchantProof.created_at.desc(), MerchantProof.id.desc()) \
            .offset((page - 1) * limit).limit(limit).all()
        return success_response({'rows': [p.serialize() for p in proofs], 'total': total})

    @staticmethod
    def upload_proofs(merchant_id):
        if not db.session.get(Merchant, merchant_id):
            return not_found("Merchant not found")

        files = [f for f in request.files.getlist('files') if f and f.filename]
        if not files:
            return error_response("No files provided")

        storage = get_storage_service()
        stored = []
        try:
            for file in files:
                url = storage.upload_image(file, _bucket(), f"proofs/{merchant_id}")['url']
                stored.append(MerchantProof(merchant_id=merchant_id, image_url=url, filename=file.filename))
            db.session.add_all(stored)
            db.session.commit()
        except StorageError as e:
            db.session.rollback()
            discard_files([proof.image_url for proof in stored])
            return error_response("Proof upload failed", e.status_code, e.message)
        except Exception as e:
            db.session.rollback()
            discard_files([proof.image_url for proof in stored])
            current_app.logger.error(f"Error saving proofs for merchant {merchant_id}: {e}")
            return server_error("Error uploading proofs", e)

        return success_response([p.serialize() for p in stored], HTTPStatus.CREATED)

    @staticmethod
    def delete_proof(proof_id):
        proof = db.session.get(MerchantProof, proof_id)
        if not proof:
            return not_found("Proof not found")
        url = proof.image_url
        db.session.delete(proof)
        db.session.commit()
        discard_files([url])
        return success_response({'id': proof_id})
