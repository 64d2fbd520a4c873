import bcrypt
from datetime import datetime
from enum import Enum

from common.database import db, BaseModel, isoformat

class UserRole(Enum):
    ADMIN = 'admin'
    EDITOR = 'editor'

class User(BaseModel):
    """Dashboard account for content editors."""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=True)
    role = db.Column(db.Enum(UserRole), default=UserRole.EDITOR, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    last_login = db.Column(db.DateTime, nullable=True)

    def set_password(self, password):
        """Hash password."""
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password):
        """Verify password."""
        if self.password_hash is None:
            return False
        return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

    def update_last_login(self):
        """Update last login timestamp."""
        self.last_login = datetime.utcnow()
        db.session.commit()

    @classmethod
    def get_by_id(cls, id):
        """Get user by ID."""
        try:
            return db.session.get(cls, int(id))
        except (TypeError, ValueError):
            return None

    @classmethod
    def get_by_email(cls, email):
        """Get user by email."""
        return cls.query.filter_by(email=email.strip().lower()).first()

    def serialize(self):
        return {
            'id': self.id,
            'email': self.email,
            'role': self.role.value,
            'is_active': self.is_active,
            'last_login': isoformat(self.last_login),
        }
