from flask import Blueprint

from common.decorators import admin_required
from controllers.import_controller import ImportController

import_bp = Blueprint('import', __name__)

@import_bp.route('/merchants', methods=['POST'])
@admin_required
def import_merchants():
    """
    Upsert merchants by slug from a CSV/XLSX sheet
    ---
    tags:
      - Imports
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: formData
        name: file
        type: file
        description: Columns name, slug, h1keyword, web_url, aff_url, seo_title, seo_desc
    responses:
      200:
        description: Per-row report
      400:
        description: Missing or unreadable file
    """
    return ImportController.import_merchants()

@import_bp.route('/merchants/seo-descriptions', methods=['POST'])
@admin_required
def import_seo_descriptions():
    """
    Set merchant meta descriptions by slug
    ---
    tags:
      - Imports
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: formData
        name: file
        type: file
        description: Columns slug, seo_desc
    responses:
      200:
        description: Per-row report
      400:
        description: Missing or unreadable file
    """
    return ImportController.import_seo_descriptions()

@import_bp.route('/merchants/first-paragraphs', methods=['POST'])
@admin_required
def import_first_paragraphs():
    """
    Set the side description HTML of merchants by slug
    ---
    tags:
      - Imports
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: formData
        name: file
        type: file
        description: Columns slug, html
    responses:
      200:
        description: Per-row report
      400:
        description: Missing or unreadable file
    """
    return ImportController.import_first_paragraphs()

@import_bp.route('/merchants/slugs', methods=['POST'])
@admin_required
def import_slugs():
    """
    Rename merchant slugs
    ---
    tags:
      - Imports
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: formData
        name: file
        type: file
        description: Columns old_slug, new_slug
    responses:
      200:
        description: Per-row report
      400:
        description: Missing or unreadable file
    """
    return ImportController.import_slugs()

@import_bp.route('/tag-stores', methods=['POST'])
@admin_required
def import_tag_stores():
    """
    Link stores to tags by slug
    ---
    tags:
      - Imports
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: formData
        name: file
        type: file
        description: Columns merchant_slug, tag_slug
    responses:
      200:
        description: Per-row report
      400:
        description: Missing or unreadable file
    """
    return ImportController.import_tag_stores()

@import_bp.route('/coupons', methods=['POST'])
@admin_required
def import_coupons():
    """
    Upsert coupons and deals; new rows start unpublished
    ---
    tags:
      - Imports
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - in: formData
        name: file
        type: file
        description: Columns merchant_slug, coupon_type, coupon_code, title, descp, type_text, is_editor
    responses:
      200:
        description: Per-row report
      400:
        description: Missing or unreadable file
    """
    return ImportController.import_coupons()
