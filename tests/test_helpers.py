import io
from datetime import datetime

import pytest
from werkzeug.datastructures import FileStorage

from common.database import chunked_insert
from common.seo import build_canonical, build_prev_next, listing_meta, strip_html, truncate
from common.sitemap import sitemap_xml
from common.slug import to_slug, slugify_title, ensure_unique_slug
from common.validation import to_bool, to_int, val_limit, val_page, val_locale, validate_tag_payload
from models import Merchant, Coupon
from services.storage import StorageError, get_storage_service
from services.storage.base_storage_service import BaseStorageService
from services.storage.cloudinary_storage_service import CloudinaryStorageService


@pytest.mark.parametrize('value, expected', [
    ("  Amazon's Best Deals!! ", 'amazons-best-deals'),
    ('Café & Bar', 'caf-bar'),
    ('--already-slugged--', 'already-slugged'),
    (None, ''),
])
def test_to_slug(value, expected):
    assert to_slug(value) == expected


def test_slugify_title_keeps_underscores():
    assert slugify_title('Hello  World_2024!') == 'hello-world_2024'


def test_ensure_unique_slug(app, make_merchant):
    first = make_merchant('Acme', slug='acme')
    make_merchant('Acme 1', slug='acme-1')

    assert ensure_unique_slug(Merchant, 'ACME') == 'acme-2'
    assert ensure_unique_slug(Merchant, 'acme', exclude_id=first.id) == 'acme'
    assert ensure_unique_slug(Merchant, '!!!', fallback='merchant') == 'merchant'


def test_ensure_unique_slug_falls_back_to_timestamp(app, make_merchant):
    make_merchant('Busy', slug='busy')
    make_merchant('Busy 1', slug='busy-1')

    slug = ensure_unique_slug(Merchant, 'busy', max_attempts=2)
    assert slug.startswith('busy-')
    assert int(slug.split('-')[1]) > 1_000_000_000_000


@pytest.mark.parametrize('value, expected', [
    (True, True), ('true', True), ('YES', True), ('on', True), ('1', True), (1, True),
    (False, False), ('false', False), ('0', False), (None, False), ('', False), (2, False),
])
def test_to_bool(value, expected):
    assert to_bool(value) is expected


def test_numeric_parsing():
    assert to_int('12') == 12
    assert to_int('nope', 7) == 7
    assert to_int(float('inf'), 3) == 3
    assert val_page('-4') == 1
    assert val_page(None) == 1
    assert val_page('99999999999999999999999') == 10000
    assert val_limit(None) == 20
    assert val_limit('0') == 1
    assert val_limit('999') == 50


def test_val_locale():
    assert val_locale('en') == 'en'
    assert val_locale('en-US') == 'en-US'
    assert val_locale('english') is None


def test_validate_tag_payload_accepts_clean_fields():
    ok, errors = validate_tag_payload({'tag_name': 'Toys', 'slug': 'toys', 'display_order': 2, 'parent_id': None})
    assert ok is True
    assert errors == []


def test_canonical_only_carries_page_after_first():
    assert build_canonical('https://x.test', '/public/v1/blogs', 1) == 'https://x.test/public/v1/blogs'
    assert build_canonical('https://x.test', '/public/v1/blogs', 3) == 'https://x.test/public/v1/blogs?page=3'


def test_prev_next_links():
    prev_url, next_url, pages = build_prev_next('https://x.test', '/s', 2, 10, 35, {'q': 'shoe', 'sort': None})
    assert pages == 4
    assert prev_url == 'https://x.test/s?q=shoe&page=1&limit=10'
    assert next_url == 'https://x.test/s?q=shoe&page=3&limit=10'

    _, next_url, pages = build_prev_next('https://x.test', '/s', 1, 10, 0)
    assert pages == 1
    assert next_url is None


def test_listing_meta_shape():
    meta = listing_meta('https://x.test', '/s', 1, 20, 5)
    assert meta == {
        'page': 1, 'limit': 20, 'total': 5, 'total_pages': 1,
        'canonical': 'https://x.test/s', 'prev': None, 'next': None,
    }


def test_strip_and_truncate():
    assert strip_html('<p>Hello&nbsp;<b>world</b></p>') == 'Hello world'
    text = 'word ' * 100
    short = truncate(text.strip())
    assert len(short) <= 160
    assert short.endswith('…')


def test_sitemap_escapes_entries():
    xml = sitemap_xml([
        {'loc': 'https://x.test/stores/a&b', 'lastmod': '2024-01-01T00:00:00'},
        {'loc': None},
    ])
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert '<loc>https://x.test/stores/a&amp;b</loc><lastmod>2024-01-01T00:00:00</lastmod>' in xml
    assert xml.count('<url>') == 1


def test_chunked_insert_writes_all_rows(app, make_merchant):
    merchant = make_merchant()
    rows = [
        {'merchant_id': merchant.id, 'coupon_type': 'deal', 'title': f'Deal {i}', 'is_publish': False,
         'is_editor': False, 'click_count': 0}
        for i in range(7)
    ]
    assert chunked_insert(Coupon, rows, chunk_size=3) == 7
    assert Coupon.query.count() == 7


def test_object_path_layout():
    path = BaseStorageService.build_object_path('logos', 'My Logo.png', now=datetime(2024, 3, 9))
    folder, year, month, name = path.split('/')
    assert (folder, year, month) == ('logos', '2024', '03')
    assert name.endswith('-my-logo.png')


def test_local_storage_rejects_oversized_files(app):
    app.config['MAX_UPLOAD_FILE_SIZE'] = 10
    storage = get_storage_service()
    file = FileStorage(stream=io.BytesIO(b'x' * 11), filename='big.png')
    with pytest.raises(StorageError) as exc:
        storage.upload_image(file, 'merchant-images', 'merchants')
    assert exc.value.status_code == 413


def test_unknown_storage_provider(app):
    with pytest.raises(ValueError):
        get_storage_service({'STORAGE_PROVIDER': 'ftp'})


def test_cloudinary_public_id_from_url():
    url = 'https://res.cloudinary.com/demo/image/upload/v1712345678/merchant-images/merchants/2024/03/1-logo.png'
    assert CloudinaryStorageService.public_id_from_url(url) == 'merchant-images/merchants/2024/03/1-logo'
    assert CloudinaryStorageService.public_id_from_url('https://cdn.example/logo.png') is None
