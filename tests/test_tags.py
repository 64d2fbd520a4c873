import os

from models import Tag


def test_list_tags_ordered_by_display_order_then_name(client, auth_headers, make_tag):
    make_tag('Zeta', display_order=1)
    make_tag('Alpha', display_order=2)
    make_tag('Beta', display_order=1)

    res = client.get('/api/tags/', headers=auth_headers)
    assert [t['tag_name'] for t in res.get_json()['data']] == ['Beta', 'Zeta', 'Alpha']


def test_create_tag_validates_payload(client, auth_headers):
    res = client.post('/api/tags/', headers=auth_headers,
                      json={'slug': 'Not Valid', 'display_order': 'x', 'parent_id': 'abc'})
    assert res.status_code == 400
    details = res.get_json()['error']['details']
    assert "tag_name is required." in details
    assert "parent_id must be a number or empty." in details
    assert any(d.startswith('slug must be URL-safe') for d in details)


def test_create_tag_defaults_slug_and_keeps_existing_image(client, auth_headers):
    res = client.post('/api/tags/', headers=auth_headers, json={
        'tag_name': 'Home & Garden',
        'active': 'true',
        'display_order': '3',
        'existing_image_url': 'https://cdn.example/tag.png',
    })
    assert res.status_code == 201
    data = res.get_json()['data']
    assert data['slug'] == 'home-garden'
    assert data['active'] is True
    assert data['display_order'] == 3
    assert data['image_url'] == 'https://cdn.example/tag.png'


def test_update_tag_replaces_image(app, client, auth_headers, image_file):
    created = client.post('/api/tags/', headers=auth_headers, content_type='multipart/form-data', data={
        'tag_name': 'Travel', 'image': image_file('old.png'),
    }).get_json()['data']
    old_path = os.path.join(app.config['UPLOAD_FOLDER'], *created['image_url'][len('/uploads/'):].split('/'))
    assert os.path.exists(old_path)

    res = client.put(f"/api/tags/{created['id']}", headers=auth_headers, content_type='multipart/form-data', data={
        'tag_name': 'Travel Deals', 'image': image_file('new.png'),
    })

    data = res.get_json()['data']
    assert res.status_code == 200
    assert data['tag_name'] == 'Travel Deals'
    assert data['image_url'] != created['image_url']
    assert data['image_url'].startswith('/uploads/tag-images/tags/')
    assert not os.path.exists(old_path)


def test_update_tag_without_file_keeps_existing_image(client, auth_headers, make_tag):
    tag = make_tag('Books', image_url='https://cdn.example/books.png')
    res = client.put(f'/api/tags/{tag.id}', headers=auth_headers, json={
        'tag_name': 'Books', 'existing_image_url': 'https://cdn.example/books.png',
    })
    assert res.get_json()['data']['image_url'] == 'https://cdn.example/books.png'


def test_delete_tag(client, auth_headers, make_tag):
    tag = make_tag()
    assert client.delete(f'/api/tags/{tag.id}', headers=auth_headers).status_code == 200
    assert Tag.query.count() == 0
    assert client.delete(f'/api/tags/{tag.id}', headers=auth_headers).status_code == 404


def test_tag_store_links(client, auth_headers, make_tag, make_merchant):
    tag = make_tag()
    store = make_merchant('Gadget Hub')

    res = client.post(f'/api/tags/{tag.id}/stores', headers=auth_headers, json={'store_id': store.id})
    assert res.status_code == 201
    assert res.get_json()['data']['added'] is True

    res = client.post(f'/api/tags/{tag.id}/stores', headers=auth_headers, json={'store_id': store.id})
    assert res.status_code == 200
    assert res.get_json()['data']['added'] is False

    stores = client.get(f'/api/tags/{tag.id}/stores', headers=auth_headers).get_json()['data']
    assert [s['slug'] for s in stores] == ['gadget-hub']

    res = client.delete(f'/api/tags/{tag.id}/stores/{store.id}', headers=auth_headers)
    assert res.get_json()['data']['removed'] is True
    assert client.get(f'/api/tags/{tag.id}/stores', headers=auth_headers).get_json()['data'] == []


def test_tag_store_link_requires_store(client, auth_headers, make_tag):
    tag = make_tag()
    assert client.post(f'/api/tags/{tag.id}/stores', headers=auth_headers, json={}).status_code == 400
    assert client.post(f'/api/tags/{tag.id}/stores', headers=auth_headers,
                       json={'store_id': 404}).status_code == 404


def test_search_stores_caps_results(client, auth_headers, make_merchant):
    for i in range(25):
        make_merchant(f"Shop {i:02d}")
    make_merchant('Unrelated')

    res = client.get('/api/tags/stores/search?q=shop', headers=auth_headers)
    results = res.get_json()['data']
    assert len(results) == 20
    assert results[0]['name'] == 'Shop 00'
