from flask_sqlalchemy import SQLAlchemy

# Initialize the database instance
db = SQLAlchemy()

# Base model with common fields for all tables
class BaseModel(db.Model):
    """Base model with common fields for all tables."""
    __abstract__ = True

    created_at = db.Column(db.DateTime, default=db.func.current_timestamp(), nullable=False)
    updated_at = db.Column(db.DateTime, default=db.func.current_timestamp(),
                          onupdate=db.func.current_timestamp(), nullable=False)

    def save(self):
        """Save model to database."""
        db.session.add(self)
        db.session.commit()

    def delete(self):
        """Delete model from database."""
        db.session.delete(self)
        db.session.commit()

    def apply(self, patch):
        """Copy every key of ``patch`` onto the matching column attribute."""
        for key, value in patch.items():
            setattr(self, key, value)
        return self

    @classmethod
    def get_all(cls):
        """Get all records."""
        return cls.query.all()


def chunked_insert(model, rows, chunk_size=500):
    """Insert plain dict rows in slices of ``chunk_size``, committing each slice.

    Returns the number of rows written.
    """
    written = 0
    for start in range(0, len(rows), chunk_size):
        chunk = rows[start:start + chunk_size]
        db.session.execute(model.__table__.insert(), chunk)
        db.session.commit()
        written += len(chunk)
    return written


def isoformat(value):
    return value.isoformat() if value else None
