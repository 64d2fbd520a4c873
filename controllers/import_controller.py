from http import HTTPStatus

from flask import request, current_app
from marshmallow import ValidationError
from sqlalchemy import or_

from common.cache import invalidate_public_cache
from common.database import db, chunked_insert
from common.response import success_response, error_response, server_error
from common.slug import to_slug, ensure_unique_slug
from models.coupon import Coupon, CouponType
from models.merchant import Merchant
from models.tag import Tag
from schemas.import_schemas import (
    MerchantImportSchema, SeoDescriptionImportSchema, FirstParagraphImportSchema,
    SlugChangeImportSchema, TagStoreImportSchema, CouponImportSchema
)
from services.import_service import read_import_rows, ImportReport, ImportFileError

IMPORT_CHUNK_SIZE = 500


def _merchant_by_slug(slug):
    slug = to_slug(slug)
    if not slug:
        return None
    return Merchant.query.filter(Merchant.slug == slug).first()


def _first_error(messages):
    field, errors = next(iter(messages.items()))
    return f"{field}: {errors[0] if isinstance(errors, list) else errors}"


def _run_import(step_name, schema_class, handle_row, finish=None):
    """
    Shared driver for every import step.

    ``handle_row(data, report, row_number)`` applies one validated row and
    records the outcome; a raised exception becomes a row error and does not
    abort the batch.
    """
    try:
        rows = read_import_rows(request)
    except ImportFileError as e:
        return error_response(e.message, HTTPStatus.BAD_REQUEST)

    report = ImportReport()
    schema = schema_class()
    try:
        for index, raw in enumerate(rows, start=1):
            report.processed += 1
            try:
                data = schema.load(raw)
            except ValidationError as err:
                report.error(index, _first_error(err.messages))
                continue
            try:
                handle_row(data, report, index)
                db.session.commit()
            except Exception as e:
                db.session.rollback()
                report.error(index, e)
        if finish:
            finish(report)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Import {step_name} failed: {e}")
        return server_error(f"Import {step_name} failed", e)

    if report.inserted or report.updated:
        invalidate_public_cache()
    current_app.logger.info(f"Import {step_name}: {report.to_dict()['processed']} rows, "
                            f"{report.inserted} inserted, {report.updated} updated, {report.skipped} skipped")
    return success_response(report.to_dict())


class ImportController:
    """Spreadsheet-driven bulk maintenance of merchants, tag links and coupons."""

    @staticmethod
    def import_merchants():
        def handle(data, report, row):
            slug = to_slug(data['slug'] or data['name'])
            if not slug:
                raise ValueError("Missing slug")
            payload = {
                'name': data['name'],
                'h1keyword': data['h1keyword'],
                'web_url': data['web_url'],
                'aff_url': data['aff_url'],
                'meta_title': data['seo_title'],
                'meta_description': data['seo_desc'],
            }
            merchant = Merchant.query.filter(Merchant.slug == slug).first()
            if merchant:
                merchant.apply(payload)
                report.updated += 1
            else:
                db.session.add(Merchant(slug=slug, **payload))
                report.inserted += 1

        return _run_import('merchants', MerchantImportSchema, handle)

    @staticmethod
    def _update_merchant_field(step_name, schema_class, source_key, column):
        def handle(data, report, row):
            merchant = _merchant_by_slug(data['slug'])
            if not merchant:
                raise LookupError(f"Merchant not found for slug: {data['slug']}")
            setattr(merchant, column, data[source_key])
            report.updated += 1

        return _run_import(step_name, schema_class, handle)

    @staticmethod
    def import_seo_descriptions():
        return ImportController._update_merchant_field(
            'seo-descriptions', SeoDescriptionImportSchema, 'seo_desc', 'meta_description')

    @staticmethod
    def import_first_paragraphs():
        return ImportController._update_merchant_field(
            'first-paragraphs', FirstParagraphImportSchema, 'html', 'side_description_html')

    @staticmethod
    def import_slugs():
        def handle(data, report, row):
            if not to_slug(data['new_slug']):
                raise ValueError("Invalid slugs")
            merchant = _merchant_by_slug(data['old_slug'])
            if not merchant:
                raise LookupError(f"Merchant not found for old_slug: {to_slug(data['old_slug'])}")
            merchant.slug = ensure_unique_slug(Merchant, data['new_slug'], exclude_id=merchant.id,
                                               fallback='merchant')
            report.updated += 1

        return _run_import('slugs', SlugChangeImportSchema, handle)

    @staticmethod
    def import_tag_stores():
        def handle(data, report, row):
            merchant = _merchant_by_slug(data['merchant_slug'])
            if not merchant:
                raise LookupError(f"Merchant not found for slug: {data['merchant_slug']}")
            tag = Tag.query.filter(Tag.slug == to_slug(data['tag_slug'])).first()
            if not tag:
                raise LookupError(f"Tag not found for slug: {data['tag_slug']}")
            if tag.add_store(merchant):
                report.inserted += 1
            else:
                report.skipped += 1

        return _run_import('tag-stores', TagStoreImportSchema, handle)

    @staticmethod
    def import_coupons():
        """
        Upsert coupons by (merchant, type, title, code); deals match with an empty code.
        New rows are queued and written in bulk once the sheet has been read.
        """
        pending = {}

        def handle(data, report, row):
            merchant = _merchant_by_slug(data['merchant_slug'])
            if not merchant:
                raise LookupError(f"Merchant not found for slug: {data['merchant_slug']}")

            is_deal = data['coupon_type'] == CouponType.DEAL.value
            code = '' if is_deal else data['coupon_code']
            if not is_deal and not code:
                raise ValueError("coupon_code is required for coupons")

            patch = {
                'description': data['descp'],
                'type_text': data['type_text'],
                'is_editor': data['is_editor'],
            }
            key = (merchant.id, data['coupon_type'], data['title'], code)
            if key in pending:
                pending[key][1].update(patch)
                report.updated += 1
                return

            query = Coupon.query.filter(
                Coupon.merchant_id == merchant.id,
                Coupon.coupon_type == data['coupon_type'],
                Coupon.title == data['title'],
            )
            if is_deal:
                query = query.filter(or_(Coupon.coupon_code.is_(None), Coupon.coupon_code == ''))
            else:
                query = query.filter(Coupon.coupon_code == code)
            existing = query.first()

            if existing:
                existing.apply(patch)
                report.updated += 1
            else:
                pending[key] = (row, dict(
                    merchant_id=merchant.id,
                    coupon_type=data['coupon_type'],
                    coupon_code=code or None,
                    title=data['title'],
                    is_publish=False,
                    click_count=0,
                    **patch,
                ))

        def finish(report):
            queued = list(pending.values())
            for start in range(0, len(queued), IMPORT_CHUNK_SIZE):
                chunk = queued[start:start + IMPORT_CHUNK_SIZE]
                try:
                    report.inserted += chunked_insert(Coupon, [values for _, values in chunk])
                except Exception as e:
                    db.session.rollback()
                    current_app.logger.error(f"Coupon import chunk at row {chunk[0][0]} failed: {e}")
                    for row, _ in chunk:
                        report.error(row, f"Insert failed: {e}")

        return _run_import('coupons', CouponImportSchema, handle, finish)
