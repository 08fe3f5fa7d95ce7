"""
Product Models
Products, their sizes and the per-currency price list of each size.
"""
from datetime import datetime

from dashboard.extensions import db


class Product(db.Model):
    __tablename__ = 'product'

    id = db.Column(db.Integer, primary_key=True)
    name_ar = db.Column(db.String(255), nullable=False)
    name_en = db.Column(db.String(255), nullable=False)
    description_ar = db.Column(db.Text, nullable=True)
    description_en = db.Column(db.Text, nullable=True)
    base_currency = db.Column(db.String(10), nullable=False, default='SAR')
    images = db.Column(db.JSON, nullable=False, default=list)
    in_stock = db.Column(db.Boolean, default=True, nullable=False, index=True)
    work_as_sacrifice = db.Column(db.Boolean, default=False, nullable=False)
    display_order = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    sizes = db.relationship(
        'ProductSize',
        backref='product',
        lazy=True,
        cascade='all, delete-orphan',
        order_by='ProductSize.position'
    )

    __table_args__ = (
        db.Index('idx_product_display_order', 'display_order', 'created_at'),
    )

    def __repr__(self):
        return f'<Product {self.id}: {self.name_en}>'

    def to_dict(self):
        return {
            '_id': str(self.id),
            'name': {'ar': self.name_ar, 'en': self.name_en},
            'description': {'ar': self.description_ar or '', 'en': self.description_en or ''},
            'baseCurrency': self.base_currency,
            'images': list(self.images or []),
            'inStock': self.in_stock,
            'workAsSacrifice': self.work_as_sacrifice,
            'displayOrder': self.display_order,
            'sizes': [size.to_dict() for size in self.sizes],
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }


class ProductSize(db.Model):
    """A purchasable size of a product, priced in the product's base currency."""
    __tablename__ = 'product_size'

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey('product.id', ondelete='CASCADE'), nullable=False, index=True)
    name_ar = db.Column(db.String(255), nullable=False)
    name_en = db.Column(db.String(255), nullable=False)
    price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    position = db.Column(db.Integer, nullable=False, default=0)

    prices = db.relationship(
        'SizePrice',
        backref='size',
        lazy=True,
        cascade='all, delete-orphan',
        order_by='SizePrice.position'
    )

    def __repr__(self):
        return f'<ProductSize {self.id}: {self.name_en} = {self.price}>'

    def to_dict(self):
        return {
            '_id': str(self.id),
            'name': {'ar': self.name_ar, 'en': self.name_en},
            'price': float(self.price) if self.price is not None else 0.0,
            'prices': [price.to_dict() for price in self.prices],
        }


class SizePrice(db.Model):
    """Price of a size in one currency. Manual prices survive auto-pricing."""
    __tablename__ = 'size_price'

    id = db.Column(db.Integer, primary_key=True)
    size_id = db.Column(db.Integer, db.ForeignKey('product_size.id', ondelete='CASCADE'), nullable=False, index=True)
    currency_code = db.Column(db.String(10), nullable=False)
    amount = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    is_manual = db.Column(db.Boolean, default=False, nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.UniqueConstraint('size_id', 'currency_code', name='unique_size_currency'),
    )

    def __repr__(self):
        return f'<SizePrice {self.currency_code} {self.amount}{" (manual)" if self.is_manual else ""}>'

    def to_dict(self):
        return {
            'currencyCode': self.currency_code,
            'amount': float(self.amount) if self.amount is not None else 0.0,
            'isManual': self.is_manual,
        }
