from common.database import db, BaseModel, isoformat

# Many-to-many link between tags and merchants (stores)
tag_stores = db.Table('tag_stores',
    db.Column('tag_id', db.Integer, db.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
    db.Column('merchant_id', db.Integer, db.ForeignKey('merchants.id', ondelete='CASCADE'), primary_key=True)
)

class Tag(BaseModel):
    __tablename__ = 'tags'

    id               = db.Column(db.Integer, primary_key=True)
    tag_name         = db.Column(db.String(255), nullable=False)
    slug             = db.Column(db.String(255), unique=True, nullable=False, index=True)
    parent_id        = db.Column(db.Integer, db.ForeignKey('tags.id', ondelete='SET NULL'), nullable=True)
    active           = db.Column(db.Boolean, nullable=False, default=False)
    display_order    = db.Column(db.Integer, nullable=False, default=0)
    meta_title       = db.Column(db.String(255), nullable=True)
    meta_description = db.Column(db.Text, nullable=True)
    meta_keywords    = db.Column(db.String(500), nullable=True)
    image_url        = db.Column(db.String(1000), nullable=True)

    stores = db.relationship('Merchant', secondary=tag_stores, back_populates='tags', order_by='Merchant.name')

    def has_store(self, merchant):
        return any(store.id == merchant.id for store in self.stores)

    def add_store(self, merchant):
        """Link a merchant; returns False when it was already linked."""
        if self.has_store(merchant):
            return False
        self.stores.append(merchant)
        return True

    def remove_store(self, merchant):
        if not self.has_store(merchant):
            return False
        self.stores.remove(merchant)
        return True

    def serialize(self):
        return {
            'id': self.id,
            'tag_name': self.tag_name,
            'slug': self.slug,
            'parent_id': self.parent_id,
            'active': self.active,
            'display_order': self.display_order,
            'meta_title': self.meta_title,
            'meta_description': self.meta_description,
            'meta_keywords': self.meta_keywords,
            'image_url': self.image_url,
            'store_count': len(self.stores),
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }
