from app import db
from app.buisness.core.data_insertion_mixin import DataInsertionMixin
from app.data.core.user_created_base import utcnow


class User(DataInsertionMixin, db.Model):
    """Application user; the system user owns rows written by scheduled jobs"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True)
    role = db.Column(db.String(40), nullable=False, default='ANALYST')
    is_active = db.Column(db.Boolean, default=True)
    is_system = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<User {self.username}>'
