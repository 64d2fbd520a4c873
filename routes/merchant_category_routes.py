from flask import Blueprint

from common.decorators import admin_required
from controllers.merchant_category_controller import MerchantCategoryController

merchant_category_bp = Blueprint('merchant_category', __name__)

@merchant_category_bp.route('/', methods=['GET'])
@admin_required
def list_merchant_categories():
    """
    List merchant categories
    ---
    tags:
      - Merchant Categories
    security:
      - Bearer: []
    parameters:
      - in: query
        name: name
        type: string
      - in: query
        name: show_home
        type: boolean
      - in: query
        name: show_deals_page
        type: boolean
      - in: query
        name: is_publish
        type: boolean
      - in: query
        name: is_header
        type: boolean
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 20
    responses:
      200:
        description: Page of categories as {rows, total}
    """
    return MerchantCategoryController.list_categories()

@merchant_category_bp.route('/<int:category_id>', methods=['GET'])
@admin_required
def get_merchant_category(category_id):
    """
    Get a merchant category by ID
    ---
    tags:
      - Merchant Categories
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
        description: Category not found
    """
    return MerchantCategoryController.get_category(category_id)

@merchant_category_bp.route('/', methods=['POST'])
@admin_required
def create_merchant_category():
    """
    Create a merchant category
    ---
    tags:
      - Merchant Categories
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: formData
        name: name
        type: string
        required: true
      - in: formData
        name: thumb
        type: file
      - in: formData
        name: top_banner
        type: file
      - in: formData
        name: side_banner
        type: file
    responses:
      201:
        description: Category created
      400:
        description: Name is required
    """
    return MerchantCategoryController.create_category()

@merchant_category_bp.route('/<int:category_id>', methods=['PUT'])
@admin_required
def update_merchant_category(category_id):
    """
    Update a merchant category
    ---
    tags:
      - Merchant Categories
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
        description: Category not found
    """
    return MerchantCategoryController.update_category(category_id)

@merchant_category_bp.route('/<int:category_id>/status', methods=['PATCH'])
@admin_required
def toggle_merchant_category_status(category_id):
    """
    Flip the publish flag of a category
    ---
    tags:
      - Merchant Categories
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: integer
        required: true
    responses:
      200:
        description: Category with the new is_publish value
      404:
        description: Category not found
    """
    return MerchantCategoryController.toggle_status(category_id)

@merchant_category_bp.route('/<int:category_id>', methods=['DELETE'])
@admin_required
def delete_merchant_category(category_id):
    """
    Delete a merchant category and its images
    ---
    tags:
      - Merchant Categories
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
        description: Category not found
    """
    return MerchantCategoryController.delete_category(category_id)
