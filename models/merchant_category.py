from common.database import db, BaseModel, isoformat

merchant_category_links = db.Table('merchant_category_links',
    db.Column('merchant_id', db.Integer, db.ForeignKey('merchants.id', ondelete='CASCADE'), primary_key=True),
    db.Column('category_id', db.Integer, db.ForeignKey('merchant_categories.id', ondelete='CASCADE'), primary_key=True)
)

class MerchantCategory(BaseModel):
    __tablename__ = 'merchant_categories'

    id               = db.Column(db.Integer, primary_key=True)
    name             = db.Column(db.String(255), nullable=False)
    slug             = db.Column(db.String(255), unique=True, nullable=False, index=True)
    description      = db.Column(db.Text, nullable=True, default='')
    meta_title       = db.Column(db.String(255), nullable=True, default='')
    meta_keywords    = db.Column(db.String(500), nullable=True, default='')
    meta_description = db.Column(db.Text, nullable=True, default='')
    show_home        = db.Column(db.Boolean, nullable=False, default=False)
    show_deals_page  = db.Column(db.Boolean, nullable=False, default=False)
    is_publish       = db.Column(db.Boolean, nullable=False, default=False)
    is_header        = db.Column(db.Boolean, nullable=False, default=False)
    thumb_url        = db.Column(db.String(1000), nullable=True)
    top_banner_url   = db.Column(db.String(1000), nullable=True)
    side_banner_url  = db.Column(db.String(1000), nullable=True)

    merchants = db.relationship('Merchant', secondary=merchant_category_links, back_populates='categories')

    def image_urls(self):
        return [url for url in (self.thumb_url, self.top_banner_url, self.side_banner_url) if url]

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'description': self.description,
            'meta_title': self.meta_title,
            'meta_keywords': self.meta_keywords,
            'meta_description': self.meta_description,
            'show_home': self.show_home,
            'show_deals_page': self.show_deals_page,
            'is_publish': self.is_publish,
            'is_header': self.is_header,
            'thumb_url': self.thumb_url,
            'top_banner_url': self.top_banner_url,
            'side_banner_url': self.side_banner_url,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }
