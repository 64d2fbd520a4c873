from http import HTTPStatus

from flask import request, current_app

from common.cache import invalidate_public_cache
from common.database import db
from common.response import success_response, error_response, not_found, server_error, upload_failed_response
from common.slug import ensure_unique_slug
from common.validation import to_bool, to_int, request_payload, normalize_tag_payload, validate_tag_payload
from models.merchant import Merchant
from models.tag import Tag
from services.upload_service import upload_request_files, discard_files, UploadFailed

BUCKET = "tag-images"
FOLDER = "tags"

TAG_IMAGES = {'image': ('image_url', 'Image')}
STORE_SEARCH_LIMIT = 20


def _tag_columns(fields):
    return {
        'tag_name': fields['tag_name'],
        'parent_id': to_int(fields['parent_id'], None) if fields['parent_id'] is not None else None,
        'active': fields['active'],
        'display_order': fields['display_order'],
        'meta_title': fields['meta_title'],
        'meta_description': fields['meta_description'],
        'meta_keywords': fields['meta_keywords'],
    }


class TagController:

    @staticmethod
    def list_tags():
        tags = Tag.query.order_by(Tag.display_order.asc(), Tag.tag_name.asc()).all()
        return success_response([t.serialize() for t in tags])

    @staticmethod
    def get_tag(tag_id):
        tag = db.session.get(Tag, tag_id)
        if not tag:
            return not_found("Tag not found")
        return success_response(tag.serialize())

    @staticmethod
    def create_tag():
        fields = normalize_tag_payload(request_payload(request))
        valid, errors = validate_tag_payload(fields)
        if not valid:
            return error_response("Validation failed", HTTPStatus.BAD_REQUEST, errors)

        uploaded = {}
        try:
            tag = Tag(**_tag_columns(fields))
            tag.slug = ensure_unique_slug(Tag, fields['slug'] or fields['tag_name'], fallback='tag')
            uploaded = upload_request_files(request.files, TAG_IMAGES, BUCKET, FOLDER)
            tag.image_url = uploaded.get('image_url') or fields['existing_image_url']
            db.session.add(tag)
            db.session.commit()
            invalidate_public_cache()
            return success_response(tag.serialize(), HTTPStatus.CREATED)
        except UploadFailed as e:
            db.session.rollback()
            return upload_failed_response(e)
        except Exception as e:
            db.session.rollback()
            discard_files(uploaded.values())
            current_app.logger.error(f"Error creating tag: {e}")
            return server_error("Error creating tag", e)

    @staticmethod
    def update_tag(tag_id):
        tag = db.session.get(Tag, tag_id)
        if not tag:
            return not_found("Tag not found")

        body = request_payload(request)
        fields = normalize_tag_payload(body)
        valid, errors = validate_tag_payload(fields)
        if not valid:
            return error_response("Validation failed", HTTPStatus.BAD_REQUEST, errors)

        uploaded = {}
        try:
            tag.apply(_tag_columns(fields))
            if fields['slug']:
                tag.slug = ensure_unique_slug(Tag, fields['slug'], exclude_id=tag.id, fallback='tag')

            replaced = None
            uploaded = upload_request_files(request.files, TAG_IMAGES, BUCKET, FOLDER)
            if uploaded:
                replaced = tag.image_url
                tag.image_url = uploaded['image_url']
            elif fields['existing_image_url']:
                tag.image_url = fields['existing_image_url']
            elif to_bool(body.get('remove_image')):
                replaced = tag.image_url
                tag.image_url = None

            db.session.commit()
            discard_files([replaced])
            invalidate_public_cache()
            return success_response(tag.serialize())
        except UploadFailed as e:
            db.session.rollback()
            return upload_failed_response(e)
        except Exception as e:
            db.session.rollback()
            discard_files(uploaded.values())
            current_app.logger.error(f"Error updating tag {tag_id}: {e}")
            return server_error("Error updating tag", e)

    @staticmethod
    def delete_tag(tag_id):
        tag = db.session.get(Tag, tag_id)
        if not tag:
            return not_found("Tag not found")
        image_url = tag.image_url
        db.session.delete(tag)
        db.session.commit()
        discard_files([image_url])
        invalidate_public_cache()
        return success_response({'id': tag_id})

    # Tag <-> store links

    @staticmethod
    def list_tag_stores(tag_id):
        tag = db.session.get(Tag, tag_id)
        if not tag:
            return not_found("Tag not found")
        return success_response([
            {'id': m.id, 'name': m.name, 'slug': m.slug, 'logo_url': m.logo_url} for m in tag.stores
        ])

    @staticmethod
    def search_stores():
        q = (request.args.get('q') or '').strip()
        query = Merchant.query
        if q:
            query = query.filter(Merchant.name.ilike(f"%{q}%"))
        merchants = query.order_by(Merchant.name.asc()).limit(STORE_SEARCH_LIMIT).all()
        return success_response([{'id': m.id, 'name': m.name, 'slug': m.slug} for m in merchants])

    @staticmethod
    def add_tag_store(tag_id):
        tag = db.session.get(Tag, tag_id)
        if not tag:
            return not_found("Tag not found")
        store_id = to_int(request_payload(request).get('store_id'), None)
        if store_id is None:
            return error_response("store_id is required")
        merchant = db.session.get(Merchant, store_id)
        if not merchant:
            return not_found("Store not found")

        added = tag.add_store(merchant)
        if added:
            db.session.commit()
            invalidate_public_cache()
        return success_response({'tag_id': tag.id, 'store_id': merchant.id, 'added': added},
                                HTTPStatus.CREATED if added else HTTPStatus.OK)

    @staticmethod
    def remove_tag_store(tag_id, store_id):
        tag = db.session.get(Tag, tag_id)
        if not tag:
            return not_found("Tag not found")
        merchant = db.session.get(Merchant, store_id)
        removed = bool(merchant) and tag.remove_store(merchant)
        if removed:
            db.session.commit()
            invalidate_public_cache()
        return success_response({'tag_id': tag.id, 'store_id': store_id, 'removed': removed})
