from datetime import datetime
from enum import Enum

from common.database import db, BaseModel, isoformat

class CouponType(Enum):
    COUPON = 'coupon'
    DEAL = 'deal'

class Coupon(BaseModel):
    """A promo code or deal offered by a merchant."""
    __tablename__ = 'coupons'

    id              = db.Column(db.Integer, primary_key=True)
    merchant_id     = db.Column(db.Integer, db.ForeignKey('merchants.id', ondelete='CASCADE'), nullable=False, index=True)
    coupon_type     = db.Column(db.String(20), nullable=False, default=CouponType.COUPON.value)
    coupon_code     = db.Column(db.String(100), nullable=True)
    title           = db.Column(db.String(500), nullable=False)
    description     = db.Column(db.Text, nullable=True, default='')
    type_text       = db.Column(db.String(255), nullable=True, default='')
    is_editor       = db.Column(db.Boolean, nullable=False, default=False)
    is_publish      = db.Column(db.Boolean, nullable=False, default=False)
    starts_at       = db.Column(db.DateTime, nullable=True)
    ends_at         = db.Column(db.DateTime, nullable=True)
    image_url       = db.Column(db.String(1000), nullable=True)
    proof_image_url = db.Column(db.String(1000), nullable=True)
    click_count     = db.Column(db.Integer, nullable=False, default=0)

    merchant = db.relationship('Merchant', back_populates='coupons')

    @classmethod
    def not_expired(cls, now=None):
        """SQL filter for coupons whose validity window has not ended."""
        now = now or datetime.utcnow()
        return db.or_(cls.ends_at.is_(None), cls.ends_at >= now)

    def image_urls(self):
        return [url for url in (self.image_url, self.proof_image_url) if url]

    def serialize(self):
        return {
            'id': self.id,
            'merchant_id': self.merchant_id,
            'coupon_type': self.coupon_type,
            'coupon_code': self.coupon_code,
            'title': self.title,
            'description': self.description,
            'type_text': self.type_text,
            'is_editor': self.is_editor,
            'is_publish': self.is_publish,
            'starts_at': isoformat(self.starts_at),
            'ends_at': isoformat(self.ends_at),
            'image_url': self.image_url,
            'proof_image_url': self.proof_image_url,
            'click_count': self.click_count,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }

    def serialize_list(self):
        data = self.serialize()
        data['store_name'] = self.merchant.name if self.merchant else None
        data['store_slug'] = self.merchant.slug if self.merchant else None
        return data

    def serialize_public(self):
        return {
            'id': self.id,
            'coupon_type': self.coupon_type,
            'coupon_code': self.coupon_code,
            'title': self.title,
            'description': self.description,
            'type_text': self.type_text,
            'is_editor': self.is_editor,
            'starts_at': isoformat(self.starts_at),
            'ends_at': isoformat(self.ends_at),
            'image_url': self.image_url,
            'store': {
                'name': self.merchant.name,
                'slug': self.merchant.slug,
                'logo_url': self.merchant.logo_url,
                'aff_url': self.merchant.aff_url,
            } if self.merchant else None,
        }

class MerchantProof(db.Model):
    """Screenshot proving a merchant's coupon works."""
    __tablename__ = 'merchant_proofs'

    id          = db.Column(db.Integer, primary_key=True)
    merchant_id = db.Column(db.Integer, db.ForeignKey('merchants.id', ondelete='CASCADE'), nullable=False, index=True)
    image_url   = db.Column(db.String(1000), nullable=False)
    filename    = db.Column(db.String(255), nullable=True)
    created_at  = db.Column(db.DateTime, nullable=False, default=db.func.current_timestamp())

    merchant = db.relationship('Merchant', back_populates='proofs')

    def serialize(self):
        return {
            'id': self.id,
            'merchant_id': self.merchant_id,
            'image_url': self.image_url,
            'filename': self.filename,
            'created_at': isoformat(self.created_at),
        }
