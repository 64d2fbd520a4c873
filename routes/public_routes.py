from flask import Blueprint

from controllers.public.blog_controller import PublicBlogController
from controllers.public.coupon_controller import PublicCouponController
from controllers.public.site_controller import PublicSiteController
from controllers.public.store_controller import PublicStoreController

public_bp = Blueprint('public', __name__, url_prefix='/public/v1')

# Categories

@public_bp.route('/categories', methods=['GET'])
def list_categories():
    """
    Published store categories with store counts
    ---
    tags:
      - Public
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 20
        description: At most 50
    responses:
      200:
        description: Categories with pagination meta
    """
    return PublicStoreController.list_categories()

# Stores

@public_bp.route('/stores', methods=['GET'])
def list_stores():
    """
    Published stores
    ---
    tags:
      - Public
    parameters:
      - in: query
        name: q
        type: string
      - in: query
        name: category
        type: string
        description: Category slug
      - in: query
        name: sort
        type: string
        enum: [newest, name, popular]
        default: newest
      - in: query
        name: page
        type: integer
      - in: query
        name: limit
        type: integer
    responses:
      200:
        description: Stores with pagination meta and ItemList JSON-LD
    """
    return PublicStoreController.list_stores()

@public_bp.route('/stores/<slug>', methods=['GET'])
def get_store(slug):
    """
    Store page payload
    ---
    tags:
      - Public
    parameters:
      - in: path
        name: slug
        type: string
        required: true
    responses:
      200:
        description: Store, SEO, breadcrumbs, active coupons, related stores and JSON-LD
      404:
        description: Store not found
    """
    return PublicStoreController.get_store(slug)

# Coupons

@public_bp.route('/coupons', methods=['GET'])
def list_coupons():
    """
    Active coupons and deals of published stores
    ---
    tags:
      - Public
    parameters:
      - in: query
        name: q
        type: string
      - in: query
        name: store
        type: string
        description: Store slug
      - in: query
        name: type
        type: string
        enum: [coupon, deal]
      - in: query
        name: sort
        type: string
        enum: [latest, ending, editor]
        default: latest
      - in: query
        name: page
        type: integer
      - in: query
        name: limit
        type: integer
    responses:
      200:
        description: Coupons with pagination meta
    """
    return PublicCouponController.list_coupons()

# Blogs

@public_bp.route('/blogs', methods=['GET'])
def list_blogs():
    """
    Published blogs
    ---
    tags:
      - Public
    parameters:
      - in: query
        name: q
        type: string
      - in: query
        name: category_id
        type: integer
      - in: query
        name: sort
        type: string
        enum: [latest, featured]
        default: latest
      - in: query
        name: locale
        type: string
      - in: query
        name: page
        type: integer
      - in: query
        name: limit
        type: integer
    responses:
      200:
        description: Blog cards with pagination meta
      400:
        description: Invalid category_id
    """
    return PublicBlogController.list_blogs()

@public_bp.route('/blogs/<slug>', methods=['GET'])
def get_blog(slug):
    """
    Blog article payload
    ---
    tags:
      - Public
    parameters:
      - in: path
        name: slug
        type: string
        required: true
    responses:
      200:
        description: Article with SEO, breadcrumbs, related posts and JSON-LD
      400:
        description: Invalid blog slug
      404:
        description: Blog not found
    """
    return PublicBlogController.get_blog(slug)

# Search, health and sitemaps

@public_bp.route('/search', methods=['GET'])
def search():
    """
    Search stores, coupons and blogs
    ---
    tags:
      - Public
    parameters:
      - in: query
        name: q
        type: string
        required: true
    responses:
      200:
        description: Up to 10 results per section
      400:
        description: q is required
    """
    return PublicSiteController.search()

@public_bp.route('/health', methods=['GET'])
def health():
    """
    Liveness and database check
    ---
    tags:
      - Public
    responses:
      200:
        description: Service and database are up
      503:
        description: Database check failed
    """
    return PublicSiteController.health()

@public_bp.route('/sitemaps/stores.xml', methods=['GET'])
def stores_sitemap():
    """
    Sitemap of published store pages
    ---
    tags:
      - Public
    produces:
      - application/xml
    responses:
      200:
        description: urlset XML
    """
    return PublicSiteController.stores_sitemap()

@public_bp.route('/sitemaps/blogs.xml', methods=['GET'])
def blogs_sitemap():
    """
    Sitemap of published blog pages
    ---
    tags:
      - Public
    produces:
      - application/xml
    responses:
      200:
        description: urlset XML
    """
    return PublicSiteController.blogs_sitemap()
