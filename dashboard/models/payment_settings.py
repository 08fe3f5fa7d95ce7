"""Per-project payment provider selection."""
from datetime import datetime

from dashboard.extensions import db


class PaymentSettings(db.Model):
    __tablename__ = 'payment_settings'

    id = db.Column(db.Integer, primary_key=True)
    project = db.Column(db.String(20), nullable=False, unique=True)
    payment_method = db.Column(db.String(20), nullable=False, default='paymob')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<PaymentSettings {self.project}: {self.payment_method}>'

    def to_dict(self):
        return {
            'project': self.project,
            'paymentMethod': self.payment_method,
        }
