from flask import Blueprint

from common.decorators import admin_required
from controllers.coupon_controller import CouponController

coupon_bp = Blueprint('coupon', __name__)

@coupon_bp.route('/', methods=['GET'])
@admin_required
def list_coupons():
    """
    List coupons and deals
    ---
    tags:
      - Coupons
    security:
      - Bearer: []
    parameters:
      - in: query
        name: search
        type: string
        description: Title substring
      - in: query
        name: store_id
        type: integer
      - in: query
        name: type
        type: string
        enum: [coupon, deal]
      - in: query
        name: status
        type: string
        enum: [published, draft]
      - in: query
        name: from_date
        type: string
        format: date
      - in: query
        name: to_date
        type: string
        format: date
        description: A bare date includes the whole day
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
        description: Page of coupons as {rows, total}
      400:
        description: Invalid filters
    """
    return CouponController.list_coupons()

@coupon_bp.route('/<int:coupon_id>', methods=['GET'])
@admin_required
def get_coupon(coupon_id):
    """
    Get a coupon by ID
    ---
    tags:
      - Coupons
    security:
      - Bearer: []
    parameters:
      - in: path
        name: coupon_id
        type: integer
        required: true
    responses:
      200:
        description: Coupon details
      404:
        description: Coupon not found
    """
    return CouponController.get_coupon(coupon_id)

@coupon_bp.route('/', methods=['POST'])
@admin_required
def create_coupon():
    """
    Create a coupon or deal
    ---
    tags:
      - Coupons
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: formData
        name: merchant_id
        type: integer
        required: true
      - in: formData
        name: coupon_type
        type: string
        enum: [coupon, deal]
      - in: formData
        name: coupon_code
        type: string
        description: Required when coupon_type is coupon
      - in: formData
        name: title
        type: string
        required: true
      - in: formData
        name: starts_at
        type: string
      - in: formData
        name: ends_at
        type: string
      - in: formData
        name: image
        type: file
      - in: formData
        name: proof_image
        type: file
    responses:
      201:
        description: Coupon created
      400:
        description: Validation failed or merchant not found
    """
    return CouponController.create_coupon()

@coupon_bp.route('/<int:coupon_id>', methods=['PUT'])
@admin_required
def update_coupon(coupon_id):
    """
    Update a coupon
    ---
    tags:
      - Coupons
    security:
      - Bearer: []
    parameters:
      - in: path
        name: coupon_id
        type: integer
        required: true
    responses:
      200:
        description: Coupon updated
      400:
        description: Validation failed
      404:
        description: Coupon not found
    """
    return CouponController.update_coupon(coupon_id)

@coupon_bp.route('/<int:coupon_id>/publish', methods=['PATCH'])
@admin_required
def toggle_coupon_publish(coupon_id):
    """
    Flip the publish flag of a coupon
    ---
    tags:
      - Coupons
    security:
      - Bearer: []
    parameters:
      - in: path
        name: coupon_id
        type: integer
        required: true
    responses:
      200:
        description: Coupon with the new is_publish value
      404:
        description: Coupon not found
    """
    return CouponController.toggle_publish(coupon_id)

@coupon_bp.route('/<int:coupon_id>/editor-pick', methods=['PATCH'])
@admin_required
def toggle_coupon_editor_pick(coupon_id):
    """
    Flip the editor's pick flag of a coupon
    ---
    tags:
      - Coupons
    security:
      - Bearer: []
    parameters:
      - in: path
        name: coupon_id
        type: integer
        required: true
    responses:
      200:
        description: Coupon with the new is_editor value
      404:
        description: Coupon not found
    """
    return CouponController.toggle_editor_pick(coupon_id)

@coupon_bp.route('/<int:coupon_id>', methods=['DELETE'])
@admin_required
def delete_coupon(coupon_id):
    """
    Delete a coupon
    ---
    tags:
      - Coupons
    security:
      - Bearer: []
    parameters:
      - in: path
        name: coupon_id
        type: integer
        required: true
    responses:
      200:
        description: Coupon deleted
      404:
        description: Coupon not found
    """
    return CouponController.delete_coupon(coupon_id)
