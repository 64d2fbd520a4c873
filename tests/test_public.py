from datetime import datetime, timedelta

from common.database import db


def test_health(client):
    res = client.get('/public/v1/health')
    assert res.status_code == 200
    body = res.get_json()
    assert body['status'] == 'ok'
    assert body['db'] == 'ok'
    assert body['time']


def test_categories_count_published_stores(client, make_category, make_merchant):
    fashion = make_category('Fashion')
    make_category('Hidden', is_publish=False)
    live = make_merchant('Live Store')
    draft = make_merchant('Draft Store', is_publish=False)
    live.categories.append(fashion)
    draft.categories.append(fashion)
    db.session.commit()

    body = client.get('/public/v1/categories').get_json()
    assert [c['slug'] for c in body['data']] == ['fashion']
    assert body['data'][0]['store_count'] == 1
    assert body['meta']['total'] == 1


def test_stores_list_only_published_with_meta(client, make_merchant):
    for i in range(3):
        make_merchant(f"Store {i}")
    make_merchant('Secret', is_publish=False)

    res = client.get('/public/v1/stores?limit=2&sort=name', base_url='https://shop.test')
    body = res.get_json()

    assert [s['name'] for s in body['data']] == ['Store 0', 'Store 1']
    meta = body['meta']
    assert meta['total'] == 3
    assert meta['total_pages'] == 2
    assert meta['canonical'] == 'https://shop.test/public/v1/stores'
    assert meta['prev'] is None
    assert meta['next'] == 'https://shop.test/public/v1/stores?sort=name&page=2&limit=2'
    assert meta['jsonld']['@type'] == 'ItemList'


def test_stores_list_filters_by_category_and_query(client, make_category, make_merchant):
    shoes = make_category('Shoes')
    runner = make_merchant('Runner Shoes')
    runner.categories.append(shoes)
    make_merchant('Bookworm')
    db.session.commit()

    assert [s['slug'] for s in client.get('/public/v1/stores?category=shoes').get_json()['data']] == ['runner-shoes']
    assert [s['slug'] for s in client.get('/public/v1/stores?q=book').get_json()['data']] == ['bookworm']


def test_limit_is_capped(client, make_merchant):
    make_merchant()
    assert client.get('/public/v1/stores?limit=500').get_json()['meta']['limit'] == 50


def test_store_detail(client, make_category, make_merchant, make_coupon):
    fashion = make_category('Fashion')
    store = make_merchant('Acme Store', meta_description='Best Acme codes')
    sibling = make_merchant('Sibling Store')
    store.categories.append(fashion)
    sibling.categories.append(fashion)
    db.session.commit()
    make_coupon(store, title='Active')
    make_coupon(store, title='Expired', ends_at=datetime.utcnow() - timedelta(days=1))
    make_coupon(store, title='Draft', is_publish=False)

    res = client.get('/public/v1/stores/Acme-Store', base_url='https://shop.test')
    body = res.get_json()

    assert res.status_code == 200
    data = body['data']
    assert data['store']['slug'] == 'acme-store'
    assert [c['title'] for c in data['coupons']] == ['Active']
    assert [r['slug'] for r in data['related']] == ['sibling-store']
    assert data['seo']['description'] == 'Best Acme codes'
    assert [b['name'] for b in data['breadcrumbs']] == ['Home', 'Stores', 'Acme Store']
    assert body['meta']['jsonld']['store']['@type'] == 'Organization'
    assert body['meta']['jsonld']['store']['makesOffer'][0]['name'] == 'Active'
    assert body['meta']['jsonld']['breadcrumb']['@type'] == 'BreadcrumbList'


def test_store_detail_hidden_when_unpublished(client, make_merchant):
    make_merchant('Secret', is_publish=False)
    res = client.get('/public/v1/stores/secret')
    assert res.status_code == 404
    assert res.get_json()['error']['message'] == 'Store not found'


def test_coupons_exclude_expired_and_unpublished_stores(client, make_merchant, make_coupon):
    live = make_merchant('Live Store')
    hidden = make_merchant('Hidden Store', is_publish=False)
    make_coupon(live, title='Valid')
    make_coupon(live, title='Open ended deal', coupon_type='deal', coupon_code=None)
    make_coupon(live, title='Expired', ends_at=datetime.utcnow() - timedelta(hours=1))
    make_coupon(hidden, title='Hidden store coupon')

    titles = sorted(c['title'] for c in client.get('/public/v1/coupons').get_json()['data'])
    assert titles == ['Open ended deal', 'Valid']

    deals = client.get('/public/v1/coupons?type=deal').get_json()['data']
    assert [c['title'] for c in deals] == ['Open ended deal']
    assert deals[0]['store']['slug'] == 'live-store'


def test_coupons_sorted_by_editor_pick(client, make_merchant, make_coupon):
    store = make_merchant()
    make_coupon(store, title='Regular')
    make_coupon(store, title='Picked', is_editor=True)
    make_coupon(store, title='Newest')

    data = client.get('/public/v1/coupons?sort=editor').get_json()['data']
    assert data[0]['title'] == 'Picked'


def test_blogs_list_and_invalid_category(client, make_blog, make_blog_category):
    guides = make_blog_category()
    make_blog('Featured post', is_featured=True, category_id=guides.id)
    make_blog('Plain post')
    make_blog('Draft post', is_publish=False)

    body = client.get('/public/v1/blogs?sort=featured').get_json()
    assert [b['title'] for b in body['data']] == ['Featured post', 'Plain post']
    assert body['data'][0]['category']['slug'] == 'guides'

    filtered = client.get(f'/public/v1/blogs?category_id={guides.id}').get_json()['data']
    assert [b['title'] for b in filtered] == ['Featured post']

    res = client.get('/public/v1/blogs?category_id=abc')
    assert res.status_code == 400
    assert res.get_json()['error']['message'] == 'Invalid category_id'


def test_blog_detail(client, make_blog, make_blog_category, make_author):
    guides = make_blog_category()
    author = make_author()
    make_blog('Coupon stacking guide', category_id=guides.id, author_id=author.id,
              featured_image_url='https://cdn.example/hero.png')
    make_blog('Same category read', category_id=guides.id)
    make_blog('Other read')

    res = client.get('/public/v1/blogs/Coupon-Stacking-Guide', base_url='https://shop.test')
    body = res.get_json()

    assert res.status_code == 200
    data = body['data']
    assert data['slug'] == 'coupon-stacking-guide'
    assert data['hero_image_url'] == 'https://cdn.example/hero.png'
    assert data['author']['name'] == 'Jane Writer'
    assert data['content_html'] == '<p>Summer is here and so are the deals.</p>'
    assert data['seo']['description'] == 'Summer is here and so are the deals.'
    assert [r['title'] for r in data['related']] == ['Same category read', 'Other read']
    article = body['meta']['jsonld']['article']
    assert article['@type'] == 'Article'
    assert article['author'] == {'@type': 'Person', 'name': 'Jane Writer'}
    assert article['image'] == ['https://cdn.example/hero.png']


def test_blog_detail_not_found(client):
    res = client.get('/public/v1/blogs/missing')
    assert res.status_code == 404
    assert res.get_json()['error']['message'] == 'Blog not found'


def test_search(client, make_merchant, make_coupon, make_blog):
    store = make_merchant('Sneaker World')
    make_coupon(store, title='Sneaker sale')
    make_blog('Sneaker cleaning tips')
    make_merchant('Garden Center')

    data = client.get('/public/v1/search?q=sneaker').get_json()['data']
    assert [s['name'] for s in data['stores']] == ['Sneaker World']
    assert [c['title'] for c in data['coupons']] == ['Sneaker sale']
    assert [b['title'] for b in data['blogs']] == ['Sneaker cleaning tips']


def test_search_requires_query(client):
    assert client.get('/public/v1/search?q=%20').status_code == 400


def test_sitemaps(client, make_merchant, make_blog):
    make_merchant('Acme Store')
    make_merchant('Draft', is_publish=False)
    make_blog('Hello world')

    res = client.get('/public/v1/sitemaps/stores.xml')
    assert res.mimetype == 'application/xml'
    xml = res.get_data(as_text=True)
    assert '<loc>https://example.test/stores/acme-store</loc>' in xml
    assert 'draft' not in xml

    xml = client.get('/public/v1/sitemaps/blogs.xml').get_data(as_text=True)
    assert '<loc>https://example.test/blog/hello-world</loc>' in xml


def test_far_page_returns_empty_listing(client, make_merchant):
    make_merchant()
    res = client.get('/public/v1/stores?page=99999999999999999999999')
    assert res.status_code == 200
    body = res.get_json()
    assert body['data'] == []
    assert body['meta']['page'] == 10000
    assert body['meta']['next'] is None
