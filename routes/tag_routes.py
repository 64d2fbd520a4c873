from flask import Blueprint

from common.decorators import admin_required
from controllers.tag_controller import TagController

tag_bp = Blueprint('tag', __name__)

@tag_bp.route('/', methods=['GET'])
@admin_required
def list_tags():
    """
    List tags ordered by display order, then name
    ---
    tags:
      - Tags
    security:
      - Bearer: []
    responses:
      200:
        description: All tags
    """
    return TagController.list_tags()

@tag_bp.route('/<int:tag_id>', methods=['GET'])
@admin_required
def get_tag(tag_id):
    """
    Get a tag by ID
    ---
    tags:
      - Tags
    security:
      - Bearer: []
    parameters:
      - in: path
        name: tag_id
        type: integer
        required: true
    responses:
      200:
        description: Tag details
      404:
        description: Tag not found
    """
    return TagController.get_tag(tag_id)

@tag_bp.route('/', methods=['POST'])
@admin_required
def create_tag():
    """
    Create a tag
    ---
    tags:
      - Tags
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: formData
        name: tag_name
        type: string
        required: true
      - in: formData
        name: slug
        type: string
        description: Lowercase letters, numbers and hyphens
      - in: formData
        name: parent_id
        type: integer
      - in: formData
        name: active
        type: boolean
      - in: formData
        name: display_order
        type: integer
      - in: formData
        name: image
        type: file
      - in: formData
        name: existing_image_url
        type: string
    responses:
      201:
        description: Tag created
      400:
        description: Validation failed; details lists the problems
    """
    return TagController.create_tag()

@tag_bp.route('/<int:tag_id>', methods=['PUT'])
@admin_required
def update_tag(tag_id):
    """
    Update a tag
    ---
    tags:
      - Tags
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: path
        name: tag_id
        type: integer
        required: true
      - in: formData
        name: image
        type: file
      - in: formData
        name: existing_image_url
        type: string
        description: Keeps this image when no new file is sent
      - in: formData
        name: remove_image
        type: boolean
    responses:
      200:
        description: Tag updated
      400:
        description: Validation failed
      404:
        description: Tag not found
    """
    return TagController.update_tag(tag_id)

@tag_bp.route('/<int:tag_id>', methods=['DELETE'])
@admin_required
def delete_tag(tag_id):
    """
    Delete a tag and its image
    ---
    tags:
      - Tags
    security:
      - Bearer: []
    parameters:
      - in: path
        name: tag_id
        type: integer
        required: true
    responses:
      200:
        description: Tag deleted
      404:
        description: Tag not found
    """
    return TagController.delete_tag(tag_id)

@tag_bp.route('/<int:tag_id>/stores', methods=['GET'])
@admin_required
def list_tag_stores(tag_id):
    """
    List the stores linked to a tag
    ---
    tags:
      - Tags
    security:
      - Bearer: []
    parameters:
      - in: path
        name: tag_id
        type: integer
        required: true
    responses:
      200:
        description: Linked stores ordered by name
      404:
        description: Tag not found
    """
    return TagController.list_tag_stores(tag_id)

@tag_bp.route('/stores/search', methods=['GET'])
@admin_required
def search_tag_stores():
    """
    Search stores to link to a tag
    ---
    tags:
      - Tags
    security:
      - Bearer: []
    parameters:
      - in: query
        name: q
        type: string
    responses:
      200:
        description: Up to 20 stores by name
    """
    return TagController.search_stores()

@tag_bp.route('/<int:tag_id>/stores', methods=['POST'])
@admin_required
def add_tag_store(tag_id):
    """
    Link a store to a tag; linking twice is a no-op
    ---
    tags:
      - Tags
    security:
      - Bearer: []
    parameters:
      - in: path
        name: tag_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            store_id:
              type: integer
    responses:
      201:
        description: Store linked
      200:
        description: Store was already linked
      400:
        description: store_id is required
      404:
        description: Tag or store not found
    """
    return TagController.add_tag_store(tag_id)

@tag_bp.route('/<int:tag_id>/stores/<int:store_id>', methods=['DELETE'])
@admin_required
def remove_tag_store(tag_id, store_id):
    """
    Unlink a store from a tag
    ---
    tags:
      - Tags
    security:
      - Bearer: []
    parameters:
      - in: path
        name: tag_id
        type: integer
        required: true
      - in: path
        name: store_id
        type: integer
        required: true
    responses:
      200:
        description: Link removed (removed is false when there was none)
      404:
        description: Tag not found
    """
    return TagController.remove_tag_store(tag_id, store_id)
