"""Appearance model: the two rows of "works" images shown on each storefront."""
from datetime import datetime

from dashboard.extensions import db


class Appearance(db.Model):
    __tablename__ = 'appearance'

    id = db.Column(db.Integer, primary_key=True)
    project = db.Column(db.String(20), nullable=False, unique=True)
    row1 = db.Column(db.JSON, nullable=False, default=list)
    row2 = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<Appearance {self.project}: {len(self.row1 or [])}+{len(self.row2 or [])} images>'

    def works_images(self):
        return {'row1': list(self.row1 or []), 'row2': list(self.row2 or [])}

    def to_dict(self):
        return {
            '_id': str(self.id),
            'project': self.project,
            'worksImages': self.works_images(),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
