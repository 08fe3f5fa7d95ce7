"""Country model for the storefront country/currency configuration."""
from datetime import datetime

from dashboard.extensions import db


class Country(db.Model):
    """Country a storefront sells to, with its display currency.

    ``sort_order`` is only meaningful for active countries: the active set
    carries contiguous keys 0..n-1, inactive countries carry NULL.
    """
    __tablename__ = 'country'

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(2), nullable=False, unique=True)  # ISO alpha-2 (e.g., 'SA', 'EG')
    name_ar = db.Column(db.String(120), nullable=False)
    name_en = db.Column(db.String(120), nullable=False)
    currency_code = db.Column(db.String(10), nullable=False)  # e.g., 'SAR'
    currency_symbol = db.Column(db.String(10), default='')  # e.g., 'ر.س'
    flag_emoji = db.Column(db.String(16), default='')
    is_active = db.Column(db.Boolean, default=False, nullable=False, index=True)
    sort_order = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<Country {self.name_en} ({self.code})>'

    def localized_name(self, locale='ar'):
        return self.name_en if locale == 'en' else self.name_ar

    def get_flag_url(self):
        """Flag image from flagcdn.com for pages without emoji support."""
        if self.code:
            return f"https://flagcdn.com/w40/{self.code.lower()}.png"
        return None

    def to_dict(self):
        return {
            '_id': str(self.id),
            'code': self.code,
            'name': {'ar': self.name_ar, 'en': self.name_en},
            'currencyCode': self.currency_code,
            'currencySymbol': self.currency_symbol,
            'flagEmoji': self.flag_emoji,
            'flagUrl': self.get_flag_url(),
            'isActive': self.is_active,
            'sortOrder': self.sort_order,
        }
