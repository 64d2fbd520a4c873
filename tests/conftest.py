import io
from datetime import datetime, timedelta

import pytest
from flask_jwt_extended import create_access_token

from app import create_app
from common.database import db
from models import Merchant, MerchantCategory, Coupon, Blog, BlogCategory, Author, Tag, User, UserRole

# Smallest valid PNG
PNG_BYTES = (
    b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4'
    b'\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82'
)


@pytest.fixture
def app(tmp_path):
    app = create_app('testing')
    app.config.update(UPLOAD_FOLDER=str(tmp_path / 'uploads'))
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(email='admin@example.com', password='secret123', role=UserRole.ADMIN, is_active=True):
    user = User(email=email, role=role, is_active=is_active)
    if password is not None:
        user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


def auth_header_for(user):
    token = create_access_token(identity=str(user.id), additional_claims={'role': user.role.value})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_user(app):
    return make_user()


@pytest.fixture
def auth_headers(admin_user):
    return auth_header_for(admin_user)


@pytest.fixture
def image_file():
    def _make(name='logo.png'):
        return (io.BytesIO(PNG_BYTES), name)
    return _make


@pytest.fixture
def make_merchant(app):
    def _make(name='Acme Store', slug=None, **kwargs):
        kwargs.setdefault('is_publish', True)
        merchant = Merchant(name=name, slug=slug or name.lower().replace(' ', '-'), **kwargs)
        db.session.add(merchant)
        db.session.commit()
        return merchant
    return _make


@pytest.fixture
def make_category(app):
    def _make(name='Fashion', slug=None, **kwargs):
        kwargs.setdefault('is_publish', True)
        category = MerchantCategory(name=name, slug=slug or name.lower().replace(' ', '-'), **kwargs)
        db.session.add(category)
        db.session.commit()
        return category
    return _make


@pytest.fixture
def make_coupon(app):
    def _make(merchant, title='10% off everything', **kwargs):
        kwargs.setdefault('coupon_type', 'coupon')
        kwargs.setdefault('coupon_code', 'SAVE10')
        kwargs.setdefault('is_publish', True)
        coupon = Coupon(merchant_id=merchant.id, title=title, **kwargs)
        db.session.add(coupon)
        db.session.commit()
        return coupon
    return _make


@pytest.fixture
def make_blog(app):
    def _make(title='Best Summer Deals', slug=None, **kwargs):
        kwargs.setdefault('is_publish', True)
        kwargs.setdefault('content', '<p>Summer is here and so are the deals.</p>')
        blog = Blog(title=title, slug=slug or title.lower().replace(' ', '-'), **kwargs)
        db.session.add(blog)
        db.session.commit()
        return blog
    return _make


@pytest.fixture
def make_blog_category(app):
    def _make(name='Guides', slug=None):
        category = BlogCategory(name=name, slug=slug or name.lower())
        db.session.add(category)
        db.session.commit()
        return category
    return _make


@pytest.fixture
def make_author(app):
    def _make(name='Jane Writer', slug=None):
        author = Author(name=name, slug=slug or name.lower().replace(' ', '-'))
        db.session.add(author)
        db.session.commit()
        return author
    return _make


@pytest.fixture
def make_tag(app):
    def _make(tag_name='Electronics', slug=None, **kwargs):
        tag = Tag(tag_name=tag_name, slug=slug or tag_name.lower(), **kwargs)
        db.session.add(tag)
        db.session.commit()
        return tag
    return _make


@pytest.fixture
def yesterday():
    return datetime.utcnow() - timedelta(days=1)


@pytest.fixture
def next_week():
    return datetime.utcnow() + timedelta(days=7)
