from flask import Blueprint

from common.decorators import admin_required
from controllers.blog_controller import BlogController, blog_category_controller, author_controller

blog_bp = Blueprint('blog', __name__)
blog_category_bp = Blueprint('blog_category', __name__)
author_bp = Blueprint('author', __name__)

# Blogs

@blog_bp.route('/', methods=['GET'])
@admin_required
def list_blogs():
    """
    List blogs
    ---
    tags:
      - Blogs
    security:
      - Bearer: []
    parameters:
      - in: query
        name: title
        type: string
        description: Title substring
    responses:
      200:
        description: Blogs, newest first
    """
    return BlogController.list_blogs()

@blog_bp.route('/<int:blog_id>', methods=['GET'])
@admin_required
def get_blog(blog_id):
    """
    Get a blog by ID
    ---
    tags:
      - Blogs
    security:
      - Bearer: []
    parameters:
      - in: path
        name: blog_id
        type: integer
        required: true
    responses:
      200:
        description: Blog details
      404:
        description: Not found
    """
    return BlogController.get_blog(blog_id)

@blog_bp.route('/', methods=['POST'])
@admin_required
def create_blog():
    """
    Create a blog
    ---
    tags:
      - Blogs
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: formData
        name: title
        type: string
        required: true
      - in: formData
        name: slug
        type: string
      - in: formData
        name: content
        type: string
      - in: formData
        name: featured_thumb
        type: file
      - in: formData
        name: featured_image
        type: file
    responses:
      201:
        description: Blog created
      400:
        description: Title is required
    """
    return BlogController.create_blog()

@blog_bp.route('/<int:blog_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_blog(blog_id):
    """
    Update a blog
    ---
    tags:
      - Blogs
    security:
      - Bearer: []
    parameters:
      - in: path
        name: blog_id
        type: integer
        required: true
    responses:
      200:
        description: Blog updated
      404:
        description: Not found
    """
    return BlogController.update_blog(blog_id)

@blog_bp.route('/<int:blog_id>/status', methods=['PATCH'])
@admin_required
def update_blog_status(blog_id):
    """
    Set the publish flag of a blog
    ---
    tags:
      - Blogs
    security:
      - Bearer: []
    parameters:
      - in: path
        name: blog_id
        type: integer
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            is_publish:
              type: boolean
    responses:
      200:
        description: Blog updated
      404:
        description: Not found
    """
    return BlogController.update_status(blog_id)

@blog_bp.route('/<int:blog_id>', methods=['DELETE'])
@admin_required
def delete_blog(blog_id):
    """
    Delete a blog
    ---
    tags:
      - Blogs
    security:
      - Bearer: []
    parameters:
      - in: path
        name: blog_id
        type: integer
        required: true
    responses:
      200:
        description: Blog deleted
      404:
        description: Not found
    """
    return BlogController.delete_blog(blog_id)

# Blog categories

@blog_category_bp.route('/', methods=['GET'])
@admin_required
def list_blog_categories():
    """
    List blog categories
    ---
    tags:
      - Blog Categories
    security:
      - Bearer: []
    responses:
      200:
        description: Categories ordered by name
    """
    return blog_category_controller.list_all()

@blog_category_bp.route('/<int:category_id>', methods=['GET'])
@admin_required
def get_blog_category(category_id):
    """
    Get a blog category
    ---
    tags:
      - Blog Categories
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: integer
        required: true
    responses:
      200:
        description: Category details
      404:
        description: Blog category not found
    """
    return blog_category_controller.get(category_id)

@blog_category_bp.route('/', methods=['POST'])
@admin_required
def create_blog_category():
    """
    Create a blog category
    ---
    tags:
      - Blog Categories
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - name
          properties:
            name:
              type: string
            slug:
              type: string
            is_publish:
              type: boolean
    responses:
      201:
        description: Category created
      400:
        description: Validation failed
    """
    return blog_category_controller.create()

@blog_category_bp.route('/<int:category_id>', methods=['PUT'])
@admin_required
def update_blog_category(category_id):
    """
    Update a blog category
    ---
    tags:
      - Blog Categories
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: integer
        required: true
    responses:
      200:
        description: Category updated
      404:
        description: Blog category not found
    """
    return blog_category_controller.update(category_id)

@blog_category_bp.route('/<int:category_id>', methods=['DELETE'])
@admin_required
def delete_blog_category(category_id):
    """
    Delete a blog category; its blogs keep existing without a category
    ---
    tags:
      - Blog Categories
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: integer
        required: true
    responses:
      200:
        description: Category deleted
      404:
        description: Blog category not found
    """
    return blog_category_controller.delete(category_id)

# Authors

@author_bp.route('/', methods=['GET'])
@admin_required
def list_authors():
    """
    List authors
    ---
    tags:
      - Authors
    security:
      - Bearer: []
    responses:
      200:
        description: Authors ordered by name
    """
    return author_controller.list_all()

@author_bp.route('/<int:author_id>', methods=['GET'])
@admin_required
def get_author(author_id):
    """
    Get an author
    ---
    tags:
      - Authors
    security:
      - Bearer: []
    parameters:
      - in: path
        name: author_id
        type: integer
        required: true
    responses:
      200:
        description: Author details
      404:
        description: Author not found
    """
    return author_controller.get(author_id)

@author_bp.route('/', methods=['POST'])
@admin_required
def create_author():
    """
    Create an author
    ---
    tags:
      - Authors
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - name
          properties:
            name:
              type: string
            email:
              type: string
            bio:
              type: string
            avatar_url:
              type: string
    responses:
      201:
        description: Author created
      400:
        description: Validation failed
    """
    return author_controller.create()

@author_bp.route('/<int:author_id>', methods=['PUT'])
@admin_required
def update_author(author_id):
    """
    Update an author
    ---
    tags:
      - Authors
    security:
      - Bearer: []
    parameters:
      - in: path
        name: author_id
        type: integer
        required: true
    responses:
      200:
        description: Author updated
      404:
        description: Author not found
    """
    return author_controller.update(author_id)

@author_bp.route('/<int:author_id>', methods=['DELETE'])
@admin_required
def delete_author(author_id):
    """
    Delete an author
    ---
    tags:
      - Authors
    security:
      - Bearer: []
    parameters:
      - in: path
        name: author_id
        type: integer
        required: true
    responses:
      200:
        description: Author deleted
      404:
        description: Author not found
    """
    return author_controller.delete(author_id)
