from flask_jwt_extended import decode_token

from common.database import db
from models import User, UserRole
from tests.conftest import make_user, auth_header_for


def test_login_returns_token_with_role_claims(client, admin_user):
    res = client.post('/api/auth/login', json={'email': 'admin@example.com', 'password': 'secret123'})

    assert res.status_code == 200
    body = res.get_json()['data']
    assert body['user'] == {'id': admin_user.id, 'email': 'admin@example.com', 'role': 'admin'}
    claims = decode_token(body['token'])
    assert claims['sub'] == str(admin_user.id)
    assert claims['role'] == 'admin'
    assert claims['email'] == 'admin@example.com'
    assert db.session.get(User, admin_user.id).last_login is not None


def test_login_email_is_case_insensitive(client, admin_user):
    res = client.post('/api/auth/login', json={'email': 'Admin@Example.com', 'password': 'secret123'})
    assert res.status_code == 200


def test_login_wrong_password(client, admin_user):
    res = client.post('/api/auth/login', json={'email': 'admin@example.com', 'password': 'nope'})
    assert res.status_code == 401
    assert res.get_json()['error']['message'] == 'Invalid credentials'


def test_login_unknown_email(client, app):
    res = client.post('/api/auth/login', json={'email': 'ghost@example.com', 'password': 'whatever'})
    assert res.status_code == 401
    assert res.get_json()['error']['message'] == 'Invalid credentials'


def test_login_missing_credentials(client, app):
    res = client.post('/api/auth/login', json={'email': 'admin@example.com'})
    assert res.status_code == 400
    assert 'password' in res.get_json()['error']['details']


def test_login_user_without_password_hash(client, app):
    make_user(email='nopass@example.com', password=None)
    res = client.post('/api/auth/login', json={'email': 'nopass@example.com', 'password': 'anything'})
    assert res.status_code == 500
    assert res.get_json()['error']['message'] == 'Password not set for user'


def test_login_inactive_user(client, app):
    make_user(email='off@example.com', is_active=False)
    res = client.post('/api/auth/login', json={'email': 'off@example.com', 'password': 'secret123'})
    assert res.status_code == 403


def test_profile_returns_current_user(client, admin_user, auth_headers):
    res = client.get('/api/auth/profile', headers=auth_headers)
    assert res.status_code == 200
    assert res.get_json()['data']['email'] == 'admin@example.com'


def test_admin_routes_require_token(client, app):
    res = client.get('/api/merchants/')
    assert res.status_code == 401
    assert res.get_json()['error']['message'] == 'Missing or invalid token'


def test_admin_routes_reject_garbage_token(client, app):
    res = client.get('/api/merchants/', headers={'Authorization': 'Bearer not-a-jwt'})
    assert res.status_code == 401


def test_editor_can_use_dashboard(client, app):
    editor = make_user(email='editor@example.com', role=UserRole.EDITOR)
    res = client.get('/api/dashboard/summary', headers=auth_header_for(editor))
    assert res.status_code == 200


def test_disabled_user_token_is_rejected(client, app):
    user = make_user(email='gone@example.com')
    headers = auth_header_for(user)
    user.is_active = False
    db.session.commit()

    res = client.get('/api/merchants/', headers=headers)
    assert res.status_code == 401


class FakePipeline:
    def __init__(self, store):
        self.store = store
        self.ops = []

    def get(self, key):
        self.ops.append(lambda: self.store.get(key))

    def setex(self, key, ttl, value):
        self.ops.append(lambda: self.store.__setitem__(key, str(value)))

    def execute(self):
        results = [op() for op in self.ops]
        self.ops = []
        return results


class FakeRedis:
    def __init__(self):
        self.store = {}

    def pipeline(self):
        return FakePipeline(self.store)


def test_login_is_rate_limited_per_ip(client, app, monkeypatch):
    redis_client = FakeRedis()
    monkeypatch.setattr('common.decorators.get_redis_client', lambda app=None: redis_client)
    credentials = {'email': 'nobody@example.com', 'password': 'whatever'}

    for _ in range(10):
        assert client.post('/api/auth/login', json=credentials).status_code == 401

    res = client.post('/api/auth/login', json=credentials)
    assert res.status_code == 429
    body = res.get_json()
    assert body['data'] is None
    assert body['error']['message'] == 'Rate limit exceeded'
    assert 'retry_after' in body['error']['details']


def test_login_skips_rate_limit_without_redis(client, app):
    credentials = {'email': 'nobody@example.com', 'password': 'whatever'}
    statuses = {client.post('/api/auth/login', json=credentials).status_code for _ in range(12)}
    assert statuses == {401}
