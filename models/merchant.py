from common.database import db, BaseModel, isoformat

class Merchant(BaseModel):
    """A store or brand that coupons and deals belong to."""
    __tablename__ = 'merchants'

    id                    = db.Column(db.Integer, primary_key=True)
    name                  = db.Column(db.String(255), nullable=False)
    slug                  = db.Column(db.String(255), unique=True, nullable=False, index=True)
    description           = db.Column(db.Text, nullable=True, default='')
    h1keyword             = db.Column(db.String(255), nullable=True, default='')
    side_description_html = db.Column(db.Text, nullable=True, default='')
    meta_title            = db.Column(db.String(255), nullable=True, default='')
    meta_keywords         = db.Column(db.String(500), nullable=True, default='')
    meta_description      = db.Column(db.Text, nullable=True, default='')
    website               = db.Column(db.String(500), nullable=True, default='')
    web_url               = db.Column(db.String(500), nullable=True, default='')
    aff_url               = db.Column(db.String(1000), nullable=True, default='')
    email                 = db.Column(db.String(255), nullable=True, default='')
    phone                 = db.Column(db.String(50), nullable=True, default='')
    show_home             = db.Column(db.Boolean, nullable=False, default=False)
    show_deals_page       = db.Column(db.Boolean, nullable=False, default=False)
    is_publish            = db.Column(db.Boolean, nullable=False, default=False)
    is_header             = db.Column(db.Boolean, nullable=False, default=False)
    logo_url              = db.Column(db.String(1000), nullable=True)
    top_banner_url        = db.Column(db.String(1000), nullable=True)
    side_banner_url       = db.Column(db.String(1000), nullable=True)
    views                 = db.Column(db.Integer, nullable=False, default=0)

    # Relationships
    categories = db.relationship('MerchantCategory', secondary='merchant_category_links',
                                 back_populates='merchants', order_by='MerchantCategory.name')
    tags       = db.relationship('Tag', secondary='tag_stores', back_populates='stores')
    coupons    = db.relationship('Coupon', back_populates='merchant', cascade='all, delete-orphan')
    proofs     = db.relationship('MerchantProof', back_populates='merchant', cascade='all, delete-orphan')

    def image_urls(self):
        return [url for url in (self.logo_url, self.top_banner_url, self.side_banner_url) if url]

    def serialize_list(self):
        """Columns shown in the dashboard list view."""
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'is_publish': self.is_publish,
            'views': self.views,
            'created_at': isoformat(self.created_at),
            'logo_url': self.logo_url,
            'top_banner_url': self.top_banner_url,
            'side_banner_url': self.side_banner_url,
        }

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'description': self.description,
            'h1keyword': self.h1keyword,
            'side_description_html': self.side_description_html,
            'meta_title': self.meta_title,
            'meta_keywords': self.meta_keywords,
            'meta_description': self.meta_description,
            'website': self.website,
            'web_url': self.web_url,
            'aff_url': self.aff_url,
            'email': self.email,
            'phone': self.phone,
            'show_home': self.show_home,
            'show_deals_page': self.show_deals_page,
            'is_publish': self.is_publish,
            'is_header': self.is_header,
            'logo_url': self.logo_url,
            'top_banner_url': self.top_banner_url,
            'side_banner_url': self.side_banner_url,
            'views': self.views,
            'category_ids': [c.id for c in self.categories],
            'tag_ids': [t.id for t in self.tags],
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }

    def serialize_public(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'logo_url': self.logo_url,
            'website': self.website or self.web_url,
            'aff_url': self.aff_url,
            'updated_at': isoformat(self.updated_at),
        }
