"""Activity log model recording who changed what in the dashboard."""
from datetime import datetime

from dashboard.extensions import db


class ActivityLog(db.Model):
    __tablename__ = 'activity_log'

    id = db.Column(db.Integer, primary_key=True)
    # Name and email are copied so entries survive user deletion
    user_id = db.Column(db.Integer, nullable=True, index=True)
    user_name = db.Column(db.String(120), nullable=True)
    user_email = db.Column(db.String(255), nullable=True)
    action = db.Column(db.String(20), nullable=False, index=True)
    resource = db.Column(db.String(50), nullable=False, index=True)
    resource_id = db.Column(db.String(64), nullable=True)
    details = db.Column(db.Text, nullable=True)
    ip_address = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f'<ActivityLog {self.action} {self.resource}:{self.resource_id}>'

    def to_dict(self):
        return {
            '_id': str(self.id),
            'userId': str(self.user_id) if self.user_id is not None else None,
            'userName': self.user_name,
            'userEmail': self.user_email,
            'action': self.action,
            'resource': self.resource,
            'resourceId': self.resource_id,
            'details': self.details,
            'ipAddress': self.ip_address,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
