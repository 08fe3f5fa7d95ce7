"""Admin user model for dashboard authentication."""
from datetime import datetime

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from dashboard.constants import ROLE_ADMIN, ROLE_SUPER_ADMIN
from dashboard.extensions import db


class AdminUser(UserMixin, db.Model):
    """Dashboard operator. Super admins see every page, admins only their allowed pages."""
    __tablename__ = 'admin_user'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_ADMIN)
    allowed_pages = db.Column(db.JSON, nullable=False, default=list)
    active = db.Column(db.Boolean, default=True, nullable=False)
    last_login_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<AdminUser {self.email} ({self.role})>'

    @property
    def is_active(self):
        return bool(self.active)

    @property
    def is_super_admin(self):
        return self.role == ROLE_SUPER_ADMIN

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def can_access(self, page_key):
        """Dashboard home is open to every signed-in user."""
        if page_key == 'dashboard' or self.is_super_admin:
            return True
        return page_key in (self.allowed_pages or [])

    def to_dict(self):
        return {
            '_id': str(self.id),
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'allowedPages': list(self.allowed_pages or []),
            'isActive': self.active,
            'lastLoginAt': self.last_login_at.isoformat() if self.last_login_at else None,
        }
