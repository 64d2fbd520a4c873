from http import HTTPStatus

from flask import request, current_app
from marshmallow import ValidationError

from common.cache import invalidate_public_cache
from common.database import db
from common.response import success_response, error_response, not_found, server_error, upload_failed_response
from common.slug import ensure_unique_slug, slugify_title, to_slug
from common.validation import UNSET, to_bool, to_int, optional, clean_patch, request_payload
from models.blog import Blog, BlogCategory, Author
from schemas.content_schemas import BlogCategorySchema, AuthorSchema
from services.upload_service import upload_request_files, discard_files, UploadFailed

BUCKET = "blog-images"
FOLDER = "blogs"

BLOG_IMAGES = {
    'featured_thumb': ('featured_thumb_url', 'Featured thumbnail'),
    'featured_image': ('featured_image_url', 'Featured image'),
}
TEXT_FIELDS = ('title', 'content', 'meta_title', 'meta_keywords', 'meta_description', 'top_category_name')
FLAG_FIELDS = ('is_publish', 'is_featured', 'is_top')


def _nullable_int(value):
    return to_int(value, None) if value not in (None, '', 'null') else None


def _unique_blog_slug(value, exclude_id=None):
    return ensure_unique_slug(Blog, value, exclude_id=exclude_id, fallback='post', normalize=slugify_title)


class BlogController:

    @staticmethod
    def list_blogs():
        try:
            query = Blog.query
            title = (request.args.get('title') or '').strip()
            if title:
                query = query.filter(Blog.title.ilike(f"%{title}%"))
            blogs = query.order_by(Blog.created_at.desc(), Blog.id.desc()).all()
            return success_response([b.serialize_list() for b in blogs])
        except Exception as e:
            current_app.logger.error(f"Error listing blogs: {e}")
            return server_error("Error listing blogs", e)

    @staticmethod
    def get_blog(blog_id):
        blog = db.session.get(Blog, blog_id)
        if not blog:
            return not_found("Not found")
        return success_response(blog.serialize())

    @staticmethod
    def create_blog():
        body = request_payload(request)
        title = str(body.get('title') or '').strip()
        if not title:
            return error_response("Title is required")

        uploaded = {}
        try:
            blog = Blog(
                title=title,
                slug=_unique_blog_slug(body.get('slug') or title),
                content=body.get('content') or '',
                meta_title=body.get('meta_title') or '',
                meta_keywords=body.get('meta_keywords') or '',
                meta_description=body.get('meta_description') or '',
                is_publish=to_bool(body.get('is_publish')),
                is_featured=to_bool(body.get('is_featured')),
                is_top=to_bool(body.get('is_top')),
                top_category_name=body.get('top_category_name') or None,
                category_order=_nullable_int(body.get('category_order')),
                blogs_count=to_int(body.get('blogs_count'), 0),
                category_id=_nullable_int(body.get('category_id')),
                author_id=_nullable_int(body.get('author_id')),
            )
            uploaded = upload_request_files(request.files, BLOG_IMAGES, BUCKET, FOLDER)
            blog.apply(uploaded)
            db.session.add(blog)
            db.session.commit()
            invalidate_public_cache()
            return success_response(blog.serialize(), HTTPStatus.CREATED)
        except UploadFailed as e:
            db.session.rollback()
            return upload_failed_response(e)
        except Exception as e:
            db.session.rollback()
            discard_files(uploaded.values())
            current_app.logger.error(f"Create Blog Error: {e}")
            return server_error("Error creating blog", e)

    @staticmethod
    def update_blog(blog_id):
        blog = db.session.get(Blog, blog_id)
        if not blog:
            return not_found("Not found")

        body = request_payload(request)
        uploaded = {}
        try:
            patch = {field: optional(body, field) for field in TEXT_FIELDS}
            patch['content'] = optional(body, 'content', lambda v: v or '')
            if patch['title'] is not UNSET and not str(patch['title'] or '').strip():
                return error_response("Title is required")
            for field in FLAG_FIELDS:
                patch[field] = optional(body, field, to_bool)
            patch['category_order'] = optional(body, 'category_order', _nullable_int)
            patch['blogs_count'] = optional(body, 'blogs_count', lambda v: to_int(v, 0))
            patch['category_id'] = optional(body, 'category_id', _nullable_int)
            patch['author_id'] = optional(body, 'author_id', _nullable_int)

            if body.get('slug'):
                patch['slug'] = _unique_blog_slug(body['slug'], exclude_id=blog.id)

            uploaded = upload_request_files(request.files, BLOG_IMAGES, BUCKET, FOLDER)
            replaced = [getattr(blog, column) for column in uploaded if getattr(blog, column)]
            patch.update(uploaded)

            blog.apply(clean_patch(patch))
            db.session.commit()
            discard_files(replaced)
            invalidate_public_cache()
            return success_response(blog.serialize())
        except UploadFailed as e:
            db.session.rollback()
            return upload_failed_response(e)
        except Exception as e:
            db.session.rollback()
            discard_files(uploaded.values())
            current_app.logger.error(f"Update Blog Error: {e}")
            return server_error("Error updating blog", e)

    @staticmethod
    def update_status(blog_id):
        blog = db.session.get(Blog, blog_id)
        if not blog:
            return not_found("Not found")
        body = request_payload(request)
        blog.is_publish = to_bool(body.get('is_publish'))
        db.session.commit()
        invalidate_public_cache()
        return success_response(blog.serialize())

    @staticmethod
    def delete_blog(blog_id):
        blog = db.session.get(Blog, blog_id)
        if not blog:
            return not_found("Not found")
        urls = blog.image_urls()
        db.session.delete(blog)
        db.session.commit()
        discard_files(urls)
        invalidate_public_cache()
        return success_response({'id': blog_id})


class BlogTaxonomyController:
    """Shared CRUD for the small lookup tables behind the blog editor (categories, authors)."""

    def __init__(self, model, schema_class, label):
        self.model = model
        self.schema_class = schema_class
        self.label = label

    def list_all(self):
        items = self.model.query.order_by(self.model.name).all()
        return success_response([item.serialize() for item in items])

    def get(self, item_id):
        item = db.session.get(self.model, item_id)
        if not item:
            return not_found(f"{self.label} not found")
        return success_response(item.serialize())

    def create(self):
        try:
            data = self.schema_class().load(request_payload(request))
        except ValidationError as err:
            return error_response("Validation failed", HTTPStatus.BAD_REQUEST, err.messages)

        data['slug'] = ensure_unique_slug(self.model, data.get('slug') or data['name'], fallback=to_slug(self.label))
        item = self.model(**data)
        db.session.add(item)
        db.session.commit()
        invalidate_public_cache()
        return success_response(item.serialize(), HTTPStatus.CREATED)

    def update(self, item_id):
        item = db.session.get(self.model, item_id)
        if not item:
            return not_found(f"{self.label} not found")
        try:
            data = self.schema_class(partial=True).load(request_payload(request))
        except ValidationError as err:
            return error_response("Validation failed", HTTPStatus.BAD_REQUEST, err.messages)

        if data.get('slug'):
            data['slug'] = ensure_unique_slug(self.model, data['slug'], exclude_id=item.id,
                                              fallback=to_slug(self.label))
        else:
            data.pop('slug', None)
        item.apply(data)
        db.session.commit()
        invalidate_public_cache()
        return success_response(item.serialize())

    def delete(self, item_id):
        item = db.session.get(self.model, item_id)
        if not item:
            return not_found(f"{self.label} not found")
        db.session.delete(item)
        db.session.commit()
        invalidate_public_cache()
        return success_response({'id': item_id})


blog_category_controller = BlogTaxonomyController(BlogCategory, BlogCategorySchema, 'Blog category')
author_controller = BlogTaxonomyController(Author, AuthorSchema, 'Author')
