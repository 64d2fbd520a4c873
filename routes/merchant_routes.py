from flask import Blueprint

from common.decorators import admin_required
from controllers.merchant_controller import MerchantController

merchant_bp = Blueprint('merchant', __name__)

@merchant_bp.route('/', methods=['GET'])
@admin_required
def list_merchants():
    """
    List merchants with optional name search
    ---
    tags:
      - Merchants
    security:
      - Bearer: []
    parameters:
      - in: query
        name: name
        type: string
        required: false
        description: Case-insensitive name filter
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 20
        description: Clamped to 1..100
    responses:
      200:
        description: Page of merchants
        schema:
          type: object
          properties:
            data:
              type: object
              properties:
                rows:
                  type: array
                  items:
                    type: object
                total:
                  type: integer
      401:
        description: Missing or invalid token
    """
    return MerchantController.list_merchants()

@merchant_bp.route('/<int:merchant_id>', methods=['GET'])
@admin_required
def get_merchant(merchant_id):
    """
    Get a merchant by ID
    ---
    tags:
      - Merchants
    security:
      - Bearer: []
    parameters:
      - in: path
        name: merchant_id
        type: integer
        required: true
    responses:
      200:
        description: Merchant details
      404:
        description: Merchant not found
    """
    return MerchantController.get_merchant(merchant_id)

@merchant_bp.route('/', methods=['POST'])
@admin_required
def create_merchant():
    """
    Create a merchant
    ---
    tags:
      - Merchants
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
        name: slug
        type: string
        description: Defaults to the slugified name; made unique
      - in: formData
        name: category_ids
        type: array
        items:
          type: integer
      - in: formData
        name: logo
        type: file
      - in: formData
        name: top_banner
        type: file
      - in: formData
        name: side_banner
        type: file
    responses:
      201:
        description: Merchant created
      400:
        description: Name is required
      500:
        description: Upload or database failure
    """
    return MerchantController.create_merchant()

@merchant_bp.route('/<int:merchant_id>', methods=['PUT'])
@admin_required
def update_merchant(merchant_id):
    """
    Update a merchant; only the fields sent are changed
    ---
    tags:
      - Merchants
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: path
        name: merchant_id
        type: integer
        required: true
      - in: formData
        name: remove_logo
        type: boolean
      - in: formData
        name: remove_top_banner
        type: boolean
      - in: formData
        name: remove_side_banner
        type: boolean
    responses:
      200:
        description: Merchant updated
      404:
        description: Merchant not found
    """
    return MerchantController.update_merchant(merchant_id)

@merchant_bp.route('/<int:merchant_id>/status', methods=['PATCH'])
@admin_required
def toggle_merchant_status(merchant_id):
    """
    Flip the publish flag of a merchant
    ---
    tags:
      - Merchants
    security:
      - Bearer: []
    parameters:
      - in: path
        name: merchant_id
        type: integer
        required: true
    responses:
      200:
        description: Merchant with the new is_publish value
      404:
        description: Merchant not found
    """
    return MerchantController.toggle_status(merchant_id)

@merchant_bp.route('/<int:merchant_id>', methods=['DELETE'])
@admin_required
def delete_merchant(merchant_id):
    """
    Delete a merchant and its stored images
    ---
    tags:
      - Merchants
    security:
      - Bearer: []
    parameters:
      - in: path
        name: merchant_id
        type: integer
        required: true
    responses:
      200:
        description: Deleted; reports how many stored files were removed
        schema:
          type: object
          properties:
            data:
              type: object
              properties:
                id:
                  type: integer
                deleted_files:
                  type: integer
      404:
        description: Merchant not found
    """
    return MerchantController.delete_merchant(merchant_id)

@merchant_bp.route('/<int:merchant_id>/proofs', methods=['GET'])
@admin_required
def list_merchant_proofs(merchant_id):
    """
    List proof screenshots of a merchant
    ---
    tags:
      - Merchants
    security:
      - Bearer: []
    parameters:
      - in: path
        name: merchant_id
        type: integer
        required: true
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 10
    responses:
      200:
        description: Page of proofs, newest first
      404:
        description: Merchant not found
    """
    return MerchantController.list_proofs(merchant_id)

@merchant_bp.route('/<int:merchant_id>/proofs', methods=['POST'])
@admin_required
def upload_merchant_proofs(merchant_id):
    """
    Upload one or more proof screenshots
    ---
    tags:
      - Merchants
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - in: path
        name: merchant_id
        type: integer
        required: true
      - in: formData
        name: files
        type: file
        required: true
    responses:
      201:
        description: Created proof rows
      400:
        description: No files sent or invalid file type
      404:
        description: Merchant not found
    """
    return MerchantController.upload_proofs(merchant_id)

@merchant_bp.route('/proofs/<int:proof_id>', methods=['DELETE'])
@admin_required
def delete_merchant_proof(proof_id):
    """
    Delete a proof screenshot
    ---
    tags:
      - Merchants
    security:
      - Bearer: []
    parameters:
      - in: path
        name: proof_id
        type: integer
        required: true
    responses:
      200:
        description: Proof deleted
      404:
        description: Proof not found
    """
    return MerchantController.delete_proof(proof_id)
