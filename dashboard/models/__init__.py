# Import all models for Alembic to detect them
from dashboard.models.user import AdminUser
from dashboard.models.activity_log import ActivityLog
from dashboard.models.country import Country
from dashboard.models.currency_rate import CurrencyRate
from dashboard.models.product import Product, ProductSize, SizePrice
from dashboard.models.appearance import Appearance
from dashboard.models.payment_settings import PaymentSettings

__all__ = [
    'AdminUser',
    'ActivityLog',
    'Country',
    'CurrencyRate',
    'Product', 'ProductSize', 'SizePrice',
    'Appearance',
    'PaymentSettings',
]
