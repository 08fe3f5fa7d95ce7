"""Currency Rate model for storing conversion rates between currencies."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from dashboard.extensions import db


class CurrencyRate(db.Model):
    """Conversion rate for a currency pair: 1 from_currency = rate to_currency."""
    __tablename__ = 'currency_rate'

    id = db.Column(db.Integer, primary_key=True)
    from_currency = db.Column(db.String(10), nullable=False, index=True)
    to_currency = db.Column(db.String(10), nullable=False, index=True)
    rate = db.Column(db.Numeric(20, 6), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    notes = db.Column(db.Text, nullable=True)

    # Set when the row was written by an API sync instead of by hand
    api_provider = db.Column(db.String(50), nullable=True)
    last_api_sync = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('from_currency', 'to_currency', name='unique_currency_pair'),
        db.Index('idx_active_rates', 'is_active', 'from_currency', 'to_currency'),
    )

    def __repr__(self):
        return f'<CurrencyRate {self.from_currency} → {self.to_currency}: {self.rate}>'

    def to_dict(self):
        return {
            '_id': str(self.id),
            'from': self.from_currency,
            'to': self.to_currency,
            'rate': float(self.rate) if self.rate is not None else None,
            'isActive': self.is_active,
            'notes': self.notes,
            'apiProvider': self.api_provider,
            'lastApiSync': self.last_api_sync.isoformat() if self.last_api_sync else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    @staticmethod
    def find_rate(from_currency: str, to_currency: str) -> Optional[Decimal]:
        """
        Look up a stored active rate, trying the direct pair and then the inverse
        of the reverse pair.
        """
        direct = CurrencyRate.query.filter_by(
            from_currency=from_currency.upper(),
            to_currency=to_currency.upper(),
            is_active=True
        ).first()
        if direct:
            return Decimal(str(direct.rate))

        reverse = CurrencyRate.query.filter_by(
            from_currency=to_currency.upper(),
            to_currency=from_currency.upper(),
            is_active=True
        ).first()
        if reverse and reverse.rate and Decimal(str(reverse.rate)) != 0:
            return Decimal('1') / Decimal(str(reverse.rate))

        return None
