from common.database import db, BaseModel, isoformat

class BlogCategory(BaseModel):
    __tablename__ = 'blog_categories'

    id         = db.Column(db.Integer, primary_key=True)
    name       = db.Column(db.String(255), nullable=False)
    slug       = db.Column(db.String(255), unique=True, nullable=False)
    is_publish = db.Column(db.Boolean, nullable=False, default=True)

    blogs = db.relationship('Blog', back_populates='category')

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'is_publish': self.is_publish,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }

class Author(BaseModel):
    __tablename__ = 'authors'

    id         = db.Column(db.Integer, primary_key=True)
    name       = db.Column(db.String(255), nullable=False)
    slug       = db.Column(db.String(255), unique=True, nullable=False)
    email      = db.Column(db.String(255), nullable=True)
    bio        = db.Column(db.Text, nullable=True)
    avatar_url = db.Column(db.String(1000), nullable=True)

    blogs = db.relationship('Blog', back_populates='author')

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'email': self.email,
            'bio': self.bio,
            'avatar_url': self.avatar_url,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }

class Blog(BaseModel):
    """Editorial article with rich HTML content."""
    __tablename__ = 'blogs'

    id                 = db.Column(db.Integer, primary_key=True)
    title              = db.Column(db.String(500), nullable=False)
    slug               = db.Column(db.String(500), unique=True, nullable=False, index=True)
    content            = db.Column(db.Text, nullable=False, default='')
    meta_title         = db.Column(db.String(255), nullable=True, default='')
    meta_keywords      = db.Column(db.String(500), nullable=True, default='')
    meta_description   = db.Column(db.Text, nullable=True, default='')
    featured_thumb_url = db.Column(db.String(1000), nullable=True)
    featured_image_url = db.Column(db.String(1000), nullable=True)
    is_publish         = db.Column(db.Boolean, nullable=False, default=False)
    is_featured        = db.Column(db.Boolean, nullable=False, default=False)
    is_top             = db.Column(db.Boolean, nullable=False, default=False)
    top_category_name  = db.Column(db.String(255), nullable=True)
    category_order     = db.Column(db.Integer, nullable=True)
    blogs_count        = db.Column(db.Integer, nullable=False, default=0)
    category_id        = db.Column(db.Integer, db.ForeignKey('blog_categories.id', ondelete='SET NULL'), nullable=True)
    author_id          = db.Column(db.Integer, db.ForeignKey('authors.id', ondelete='SET NULL'), nullable=True)

    category = db.relationship('BlogCategory', back_populates='blogs')
    author   = db.relationship('Author', back_populates='blogs')

    def image_urls(self):
        return [url for url in (self.featured_thumb_url, self.featured_image_url) if url]

    def serialize_list(self):
        return {
            'id': self.id,
            'title': self.title,
            'top_category_name': self.top_category_name,
            'category_order': self.category_order,
            'blogs_count': self.blogs_count,
            'is_publish': self.is_publish,
            'is_featured': self.is_featured,
            'is_top': self.is_top,
            'featured_thumb_url': self.featured_thumb_url,
            'created_at': isoformat(self.created_at),
        }

    def serialize(self):
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'content': self.content,
            'meta_title': self.meta_title,
            'meta_keywords': self.meta_keywords,
            'meta_description': self.meta_description,
            'featured_thumb_url': self.featured_thumb_url,
            'featured_image_url': self.featured_image_url,
            'is_publish': self.is_publish,
            'is_featured': self.is_featured,
            'is_top': self.is_top,
            'top_category_name': self.top_category_name,
            'category_order': self.category_order,
            'blogs_count': self.blogs_count,
            'category_id': self.category_id,
            'author_id': self.author_id,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }

    def serialize_card(self):
        """Compact shape used in public listings and related-post rails."""
        return {
            'id': self.id,
            'slug': self.slug,
            'title': self.title,
            'thumb_url': self.featured_thumb_url,
            'is_featured': self.is_featured,
            'category': {'id': self.category.id, 'name': self.category.name, 'slug': self.category.slug}
                        if self.category else None,
            'created_at': isoformat(self.created_at),
        }
