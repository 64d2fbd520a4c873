import os

from common.database import db
from models import Merchant, MerchantProof


def _disk_path(app, url):
    return os.path.join(app.config['UPLOAD_FOLDER'], *url[len('/uploads/'):].split('/'))


def test_create_merchant_derives_unique_slug(client, auth_headers):
    first = client.post('/api/merchants/', json={'name': 'Acme Store'}, headers=auth_headers)
    second = client.post('/api/merchants/', json={'name': 'Acme  Store!'}, headers=auth_headers)

    assert first.status_code == 201
    assert first.get_json()['data']['slug'] == 'acme-store'
    assert second.status_code == 201
    assert second.get_json()['data']['slug'] == 'acme-store-1'


def test_create_merchant_requires_name(client, auth_headers):
    res = client.post('/api/merchants/', json={'name': '   '}, headers=auth_headers)
    assert res.status_code == 400
    assert res.get_json() == {'data': None, 'error': {'message': 'Name is required'}}


def test_create_merchant_with_logo_and_categories(app, client, auth_headers, image_file, make_category):
    fashion = make_category('Fashion')
    shoes = make_category('Shoes')
    res = client.post('/api/merchants/', headers=auth_headers, content_type='multipart/form-data', data={
        'name': 'Shoe Palace',
        'is_publish': 'true',
        'category_ids': f"{fashion.id},{shoes.id}",
        'logo': image_file('logo.png'),
    })

    assert res.status_code == 201
    data = res.get_json()['data']
    assert data['is_publish'] is True
    assert sorted(data['category_ids']) == sorted([fashion.id, shoes.id])
    assert data['logo_url'].startswith('/uploads/merchant-images/merchants/')
    assert os.path.exists(_disk_path(app, data['logo_url']))

    served = client.get(data['logo_url'])
    assert served.status_code == 200


def test_create_merchant_rejects_bad_image_type(client, auth_headers, image_file):
    res = client.post('/api/merchants/', headers=auth_headers, content_type='multipart/form-data', data={
        'name': 'Bad Logo',
        'logo': image_file('logo.exe'),
    })
    assert res.status_code == 400
    assert res.get_json()['error']['message'] == 'Logo upload failed'
    assert Merchant.query.count() == 0


def test_list_merchants_paginates_and_filters(client, auth_headers, make_merchant):
    for i in range(5):
        make_merchant(f"Store {i}")
    make_merchant('Other Shop')

    res = client.get('/api/merchants/?name=store&page=2&limit=2', headers=auth_headers)
    data = res.get_json()['data']
    assert data['total'] == 5
    assert [row['name'] for row in data['rows']] == ['Store 2', 'Store 1']


def test_list_merchants_clamps_limit(client, auth_headers, make_merchant):
    make_merchant('Only One')
    res = client.get('/api/merchants/?limit=0', headers=auth_headers)
    assert len(res.get_json()['data']['rows']) == 1


def test_get_missing_merchant(client, auth_headers):
    res = client.get('/api/merchants/999', headers=auth_headers)
    assert res.status_code == 404


def test_update_merchant_only_changes_sent_fields(client, auth_headers, make_merchant):
    merchant = make_merchant('Acme Store', aff_url='https://aff.example/acme', meta_title='Acme')

    res = client.put(f'/api/merchants/{merchant.id}', json={'meta_title': 'Acme Coupons'}, headers=auth_headers)

    data = res.get_json()['data']
    assert res.status_code == 200
    assert data['meta_title'] == 'Acme Coupons'
    assert data['aff_url'] == 'https://aff.example/acme'
    assert data['slug'] == 'acme-store'


def test_update_merchant_name_rederives_slug(client, auth_headers, make_merchant):
    make_merchant('Taken Name')
    merchant = make_merchant('Acme Store')

    res = client.put(f'/api/merchants/{merchant.id}', json={'name': 'Taken Name'}, headers=auth_headers)
    assert res.get_json()['data']['slug'] == 'taken-name-1'

    res = client.put(f'/api/merchants/{merchant.id}', json={'name': 'Taken Name'}, headers=auth_headers)
    assert res.get_json()['data']['slug'] == 'taken-name-1'


def test_update_merchant_remove_logo_deletes_file(app, client, auth_headers, image_file):
    created = client.post('/api/merchants/', headers=auth_headers, content_type='multipart/form-data', data={
        'name': 'Logo Shop', 'logo': image_file(),
    }).get_json()['data']
    path = _disk_path(app, created['logo_url'])

    res = client.put(f"/api/merchants/{created['id']}", headers=auth_headers,
                     content_type='multipart/form-data', data={'remove_logo': 'true'})

    assert res.get_json()['data']['logo_url'] is None
    assert not os.path.exists(path)


def test_toggle_merchant_status(client, auth_headers, make_merchant):
    merchant = make_merchant(is_publish=False)
    res = client.patch(f'/api/merchants/{merchant.id}/status', headers=auth_headers)
    assert res.get_json()['data']['is_publish'] is True
    res = client.patch(f'/api/merchants/{merchant.id}/status', headers=auth_headers)
    assert res.get_json()['data']['is_publish'] is False


def test_delete_merchant_removes_files_and_coupons(app, client, auth_headers, image_file, make_coupon):
    created = client.post('/api/merchants/', headers=auth_headers, content_type='multipart/form-data', data={
        'name': 'Doomed', 'logo': image_file(),
    }).get_json()['data']
    merchant = db.session.get(Merchant, created['id'])
    make_coupon(merchant)
    path = _disk_path(app, created['logo_url'])

    res = client.delete(f"/api/merchants/{created['id']}", headers=auth_headers)

    assert res.status_code == 200
    assert res.get_json()['data'] == {'id': created['id'], 'deleted_files': 1}
    assert not os.path.exists(path)
    assert db.session.get(Merchant, created['id']) is None
    from models import Coupon
    assert Coupon.query.count() == 0


def test_delete_missing_merchant(client, auth_headers):
    assert client.delete('/api/merchants/42', headers=auth_headers).status_code == 404


def test_merchant_proofs_lifecycle(app, client, auth_headers, image_file, make_merchant):
    merchant = make_merchant()

    res = client.post(f'/api/merchants/{merchant.id}/proofs', headers=auth_headers,
                      content_type='multipart/form-data',
                      data={'files': [image_file('a.png'), image_file('b.png')]})
    assert res.status_code == 201
    proofs = res.get_json()['data']
    assert len(proofs) == 2
    assert proofs[0]['image_url'].startswith(f'/uploads/merchant-images/proofs/{merchant.id}/')

    listing = client.get(f'/api/merchants/{merchant.id}/proofs?limit=1', headers=auth_headers).get_json()['data']
    assert listing['total'] == 2
    assert len(listing['rows']) == 1

    res = client.delete(f"/api/merchants/proofs/{proofs[0]['id']}", headers=auth_headers)
    assert res.status_code == 200
    assert MerchantProof.query.count() == 1
    assert not os.path.exists(_disk_path(app, proofs[0]['image_url']))


def test_upload_proofs_requires_files(client, auth_headers, make_merchant):
    merchant = make_merchant()
    res = client.post(f'/api/merchants/{merchant.id}/proofs', headers=auth_headers,
                      content_type='multipart/form-data', data={})
    assert res.status_code == 400


def test_create_merchant_ignores_non_object_json(client, auth_headers):
    res = client.post('/api/merchants/', json=[1, 2], headers=auth_headers)
    assert res.status_code == 400
    assert res.get_json()['error']['message'] == 'Name is required'


def test_list_merchants_far_page_is_empty(client, auth_headers, make_merchant):
    make_merchant()
    res = client.get('/api/merchants/?page=99999999999999999999999', headers=auth_headers)
    assert res.status_code == 200
    assert res.get_json()['data'] == {'rows': [], 'total': 1}


def test_failed_save_discards_uploaded_logo(app, client, auth_headers, image_file, monkeypatch):
    def failing_commit():
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(db.session(), 'commit', failing_commit)
    res = client.post('/api/merchants/', headers=auth_headers, content_type='multipart/form-data',
                      data={'name': 'Acme Store', 'logo': image_file()})

    assert res.status_code == 500
    stored = [name for _, _, files in os.walk(app.config['UPLOAD_FOLDER']) for name in files]
    assert stored == []
