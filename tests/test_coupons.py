from common.database import db
from models import Coupon


def test_create_coupon(client, auth_headers, make_merchant):
    merchant = make_merchant()
    res = client.post('/api/coupons/', headers=auth_headers, json={
        'merchant_id': merchant.id,
        'coupon_type': 'coupon',
        'coupon_code': 'SAVE20',
        'title': '  20% off shoes  ',
        'starts_at': '2030-01-01',
        'ends_at': '2030-02-01T10:00:00Z',
    })

    assert res.status_code == 201
    data = res.get_json()['data']
    assert data['title'] == '20% off shoes'
    assert data['is_publish'] is False
    assert data['store_name'] == 'Acme Store'
    assert data['starts_at'] == '2030-01-01T00:00:00'
    assert data['ends_at'] == '2030-02-01T10:00:00'


def test_coupon_requires_code(client, auth_headers, make_merchant):
    merchant = make_merchant()
    res = client.post('/api/coupons/', headers=auth_headers, json={
        'merchant_id': merchant.id, 'coupon_type': 'coupon', 'title': 'No code',
    })
    assert res.status_code == 400
    assert 'coupon_code' in res.get_json()['error']['details']


def test_deal_drops_code(client, auth_headers, make_merchant):
    merchant = make_merchant()
    res = client.post('/api/coupons/', headers=auth_headers, json={
        'merchant_id': merchant.id, 'coupon_type': 'deal', 'coupon_code': 'IGNORED', 'title': 'Free shipping',
    })
    assert res.status_code == 201
    assert res.get_json()['data']['coupon_code'] is None


def test_coupon_dates_must_be_ordered(client, auth_headers, make_merchant):
    merchant = make_merchant()
    res = client.post('/api/coupons/', headers=auth_headers, json={
        'merchant_id': merchant.id, 'coupon_type': 'deal', 'title': 'Backwards',
        'starts_at': '2030-02-01', 'ends_at': '2030-01-01',
    })
    assert res.status_code == 400
    assert 'ends_at' in res.get_json()['error']['details']


def test_coupon_unknown_merchant(client, auth_headers):
    res = client.post('/api/coupons/', headers=auth_headers, json={
        'merchant_id': 999, 'coupon_type': 'deal', 'title': 'Orphan',
    })
    assert res.status_code == 400
    assert res.get_json()['error']['message'] == 'Merchant not found'


def test_list_coupons_filters(client, auth_headers, make_merchant, make_coupon):
    acme = make_merchant('Acme Store')
    other = make_merchant('Other Shop')
    make_coupon(acme, title='Summer sale', is_publish=True)
    make_coupon(acme, title='Winter sale', is_publish=False)
    make_coupon(other, title='Summer deal', coupon_type='deal', coupon_code=None)

    def titles(query):
        res = client.get(f'/api/coupons/{query}', headers=auth_headers)
        assert res.status_code == 200
        return sorted(row['title'] for row in res.get_json()['data']['rows'])

    assert titles(f'?store_id={acme.id}') == ['Summer sale', 'Winter sale']
    assert titles('?status=draft') == ['Winter sale']
    assert titles('?type=deal') == ['Summer deal']
    assert titles('?search=summer') == ['Summer deal', 'Summer sale']


def test_list_coupons_rejects_bad_status(client, auth_headers):
    res = client.get('/api/coupons/?status=archived', headers=auth_headers)
    assert res.status_code == 400


def test_update_coupon_validates_merged_record(client, auth_headers, make_merchant, make_coupon):
    coupon = make_coupon(make_merchant())

    res = client.put(f'/api/coupons/{coupon.id}', headers=auth_headers, json={'title': 'Renamed'})
    assert res.status_code == 200
    assert res.get_json()['data']['coupon_code'] == 'SAVE10'

    res = client.put(f'/api/coupons/{coupon.id}', headers=auth_headers, json={'coupon_code': ''})
    assert res.status_code == 400

    res = client.put(f'/api/coupons/{coupon.id}', headers=auth_headers, json={'coupon_type': 'deal'})
    assert res.status_code == 200
    assert res.get_json()['data']['coupon_code'] is None


def test_toggle_publish_and_editor_pick(client, auth_headers, make_merchant, make_coupon):
    coupon = make_coupon(make_merchant(), is_publish=False)

    res = client.patch(f'/api/coupons/{coupon.id}/publish', headers=auth_headers)
    assert res.get_json()['data']['is_publish'] is True
    res = client.patch(f'/api/coupons/{coupon.id}/editor-pick', headers=auth_headers)
    assert res.get_json()['data']['is_editor'] is True


def test_delete_coupon(client, auth_headers, make_merchant, make_coupon):
    coupon = make_coupon(make_merchant())
    res = client.delete(f'/api/coupons/{coupon.id}', headers=auth_headers)
    assert res.status_code == 200
    assert db.session.get(Coupon, coupon.id) is None
    assert client.delete(f'/api/coupons/{coupon.id}', headers=auth_headers).status_code == 404
