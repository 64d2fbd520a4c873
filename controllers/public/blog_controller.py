from flask import request, current_app

from common.cache import with_cache, cache_key_for_request
from common.database import isoformat
from common.response import ok, bad_request, not_found, server_error
from common.seo import (
    listing_meta, build_canonical, build_seo, build_breadcrumbs, build_breadcrumb_jsonld,
    build_article_jsonld, build_item_list_jsonld
)
from common.validation import val_enum, val_locale, derive_locale
from controllers.public.base import paging, origin, search_term
from models.blog import Blog

BLOG_SORTS = {
    'latest': (Blog.created_at.desc(), Blog.id.desc()),
    'featured': (Blog.is_featured.desc(), Blog.created_at.desc(), Blog.id.desc()),
}
RELATED_LIMIT = 6


def published_blogs():
    return Blog.query.filter(Blog.is_publish.is_(True))


def related_blogs(blog, limit=RELATED_LIMIT):
    """Same-category posts first, topped up with the latest posts."""
    related = []
    if blog.category_id:
        related = published_blogs().filter(Blog.category_id == blog.category_id, Blog.id != blog.id) \
            .order_by(*BLOG_SORTS['latest']).limit(limit).all()
    if len(related) < limit:
        seen = [blog.id] + [b.id for b in related]
        related += published_blogs().filter(Blog.id.notin_(seen)) \
            .order_by(*BLOG_SORTS['latest']).limit(limit - len(related)).all()
    return related


class PublicBlogController:

    @staticmethod
    def list_blogs():
        raw_category = (request.args.get('category_id') or '').strip()
        category_id = None
        if raw_category:
            if not raw_category.isdigit():
                return bad_request("Invalid category_id")
            category_id = int(raw_category)

        page, limit = paging()
        q = search_term()
        sort = val_enum(request.args.get('sort'), BLOG_SORTS, 'latest')
        locale = val_locale(request.args.get('locale')) or derive_locale(request)
        base_origin, path = origin(), request.path

        def produce():
            query = published_blogs()
            if q:
                query = query.filter(Blog.title.ilike(f"%{q}%"))
            if category_id:
                query = query.filter(Blog.category_id == category_id)
            total = query.count()
            blogs = query.order_by(*BLOG_SORTS[sort]).offset((page - 1) * limit).limit(limit).all()
            data = [b.serialize_card() for b in blogs]
            meta = listing_meta(base_origin, path, page, limit, total,
                                {'q': q, 'category_id': category_id, 'sort': sort, 'locale': locale})
            meta['jsonld'] = build_item_list_jsonld(data, base_origin, 'blog')
            return {'data': data, 'meta': meta}

        try:
            return ok(with_cache(cache_key_for_request(), produce))
        except Exception as e:
            current_app.logger.error(f"Failed to list blogs: {e}")
            return server_error("Failed to list blogs", e)

    @staticmethod
    def get_blog(slug):
        slug = str(slug or '').strip().lower()
        if not slug:
            return bad_request("Invalid blog slug")
        base_origin, path = origin(), request.path

        def produce():
            blog = published_blogs().filter(Blog.slug == slug).first()
            if not blog:
                return None

            canonical = build_canonical(base_origin, path)
            trail = [('Blog', '/blog')]
            if blog.category:
                trail.append((blog.category.name, f"/blog?category_id={blog.category.id}"))
            trail.append((blog.title, f"/blog/{blog.slug}"))
            breadcrumbs = build_breadcrumbs(base_origin, trail)
            hero_image_url = blog.featured_image_url or blog.featured_thumb_url

            data = {
                'id': blog.id,
                'slug': blog.slug,
                'title': blog.title,
                'hero_image_url': hero_image_url,
                'category': {'id': blog.category.id, 'name': blog.category.name, 'slug': blog.category.slug}
                            if blog.category else None,
                'author': {'id': blog.author.id, 'name': blog.author.name, 'slug': blog.author.slug,
                           'avatar_url': blog.author.avatar_url} if blog.author else None,
                'created_at': isoformat(blog.created_at),
                'updated_at': isoformat(blog.updated_at),
                'seo': build_seo(blog.title, blog.meta_title, blog.meta_description, blog.meta_keywords,
                                 blog.content, canonical, hero_image_url),
                'breadcrumbs': breadcrumbs,
                'content_html': blog.content,
                'related': [b.serialize_card() for b in related_blogs(blog)],
            }
            return {
                'data': data,
                'meta': {
                    'canonical': canonical,
                    'jsonld': {
                        'article': build_article_jsonld(data, base_origin),
                        'breadcrumb': build_breadcrumb_jsonld(breadcrumbs),
                    },
                },
            }

        try:
            result = with_cache(cache_key_for_request(), produce)
        except Exception as e:
            current_app.logger.error(f"Failed to get blog {slug}: {e}")
            return server_error("Failed to get blog detail", e)
        if not result:
            return not_found("Blog not found")
        return ok(result)
