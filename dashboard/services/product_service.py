"""
Product Service
Business logic for products, their sizes and multi-currency auto-pricing.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Tuple

from dashboard.exceptions import NotFoundException, ValidationException
from dashboard.extensions import db
from dashboard.models.product import Product, ProductSize, SizePrice
from dashboard.services.country_service import CountryService
from dashboard.services.currency_service import convert_to_multiple_currencies

logger = logging.getLogger(__name__)


def _parse_product_id(value) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise NotFoundException("Product not found")


def _parse_amount(value, field: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationException(f"{field} must be a number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationException(f"{field} must be a number")
    if not amount.is_finite() or amount < 0:
        raise ValidationException(f"{field} must be a non-negative number")
    return amount


def _bilingual(value, field: str, required: bool = True) -> Tuple[str, str]:
    if not isinstance(value, dict):
        if required:
            raise ValidationException(f"Missing required fields: {field}.ar, {field}.en")
        return '', ''
    ar = str(value.get('ar') or '').strip()
    en = str(value.get('en') or '').strip()
    if required and (not ar or not en):
        raise ValidationException(f"Missing required fields: {field}.ar, {field}.en")
    return ar, en


def _build_prices(prices_data) -> List[SizePrice]:
    if prices_data is None:
        return []
    if not isinstance(prices_data, list):
        raise ValidationException("sizes[].prices must be an array")

    prices = []
    seen = set()
    for index, item in enumerate(prices_data):
        if not isinstance(item, dict):
            raise ValidationException("sizes[].prices entries must be objects")
        code = str(item.get('currencyCode') or '').strip().upper()
        if len(code) != 3:
            raise ValidationException("sizes[].prices[].currencyCode must be a 3-letter currency code")
        if code in seen:
            raise ValidationException(f"Duplicate price for currency {code}")
        seen.add(code)
        prices.append(SizePrice(
            currency_code=code,
            amount=_parse_amount(item.get('amount', 0), 'sizes[].prices[].amount'),
            is_manual=item.get('isManual') is True,
            position=index
        ))
    return prices


def _build_sizes(sizes_data) -> List[ProductSize]:
    if not sizes_data or not isinstance(sizes_data, list):
        raise ValidationException("Product must have at least one size")

    sizes = []
    for index, item in enumerate(sizes_data):
        if not isinstance(item, dict):
            raise ValidationException("sizes entries must be objects")
        name_ar, name_en = _bilingual(item.get('name'), 'sizes[].name')
        sizes.append(ProductSize(
            name_ar=name_ar,
            name_en=name_en,
            price=_parse_amount(item.get('price', 0), 'sizes[].price'),
            position=index,
            prices=_build_prices(item.get('prices'))
        ))
    return sizes


def _validate_images(images) -> List[str]:
    if not isinstance(images, list) or not all(isinstance(url, str) for url in images):
        raise ValidationException("images must be an array of URLs")
    return [url.strip() for url in images if url.strip()]


class ProductService:
    """Service class for product management and auto-pricing."""

    @staticmethod
    def list_products(
        page: int = 1,
        limit: int = 10,
        in_stock: Optional[bool] = None,
        sacrifice_only: bool = False
    ) -> Tuple[List[Product], int]:
        """
        Page of products ordered by display_order, newest first within the same order.

        Returns:
            Tuple of (products, total matching products)
        """
        query = Product.query
        if in_stock is not None:
            query = query.filter(Product.in_stock == in_stock)
        if sacrifice_only:
            query = query.filter(Product.work_as_sacrifice == True)  # noqa: E712

        total = query.count()
        products = query.order_by(
            Product.display_order.asc(),
            Product.created_at.desc(),
            Product.id.desc()
        ).offset((page - 1) * limit).limit(limit).all()
        return products, total

    @staticmethod
    def get_product(product_id) -> Product:
        product = db.session.get(Product, _parse_product_id(product_id))
        if not product:
            raise NotFoundException("Product not found")
        return product

    @staticmethod
    def create_product(data: Dict) -> Product:
        name = data.get('name')
        base_currency = str(data.get('baseCurrency') or '').strip().upper()
        if not isinstance(name, dict) or not name.get('ar') or not name.get('en') or not base_currency:
            raise ValidationException("Missing required fields: name.ar, name.en, baseCurrency")
        if len(base_currency) != 3:
            raise ValidationException("baseCurrency must be a 3-letter currency code")
        name_ar, name_en = _bilingual(name, 'name')
        description_ar, description_en = _bilingual(data.get('description'), 'description', required=False)

        product = Product(
            name_ar=name_ar,
            name_en=name_en,
            description_ar=description_ar or None,
            description_en=description_en or None,
            base_currency=base_currency,
            images=_validate_images(data.get('images', [])),
            in_stock=data.get('inStock', True) is not False,
            work_as_sacrifice=data.get('workAsSacrifice') is True,
            display_order=ProductService._parse_display_order(data.get('displayOrder', 0)),
            sizes=_build_sizes(data.get('sizes'))
        )
        db.session.add(product)
        db.session.commit()
        logger.info(f"Product created: id={product.id}, name={product.name_en}, sizes={len(product.sizes)}")
        return product

    @staticmethod
    def update_product(product_id, data: Dict) -> Product:
        product = ProductService.get_product(product_id)

        if 'name' in data:
            product.name_ar, product.name_en = _bilingual(data.get('name'), 'name')
        if 'description' in data:
            description_ar, description_en = _bilingual(data.get('description'), 'description', required=False)
            product.description_ar = description_ar or None
            product.description_en = description_en or None
        if 'baseCurrency' in data:
            base_currency = str(data.get('baseCurrency') or '').strip().upper()
            if len(base_currency) != 3:
                raise ValidationException("baseCurrency must be a 3-letter currency code")
            product.base_currency = base_currency
        if 'images' in data:
            product.images = _validate_images(data.get('images'))
        if 'inStock' in data:
            product.in_stock = data.get('inStock') is True
        if 'workAsSacrifice' in data:
            product.work_as_sacrifice = data.get('workAsSacrifice') is True
        if 'displayOrder' in data:
            product.display_order = ProductService._parse_display_order(data.get('displayOrder'))
        if 'sizes' in data:
            # Replaced wholesale; the orphan cascade drops old sizes and their prices
            product.sizes = _build_sizes(data.get('sizes'))

        db.session.commit()
        return product

    @staticmethod
    def delete_product(product_id) -> Product:
        product = ProductService.get_product(product_id)
        db.session.delete(product)
        db.session.commit()
        logger.info(f"Product deleted: id={product.id}")
        return product

    @staticmethod
    def auto_price(product_id, override_manual: bool = False) -> Product:
        """
        Derive per-currency prices for every size from its base price.

        Target currencies are the distinct currencies of active countries. Each
        priced size gets exactly one entry per target currency; an existing
        manual entry is kept as is unless override_manual is set. Sizes without
        a positive base price are not touched.
        """
        product = ProductService.get_product(product_id)
        target_currencies = CountryService.active_currency_codes()
        base_currency = product.base_currency or 'SAR'

        for size in product.sizes:
            if size.price is None or Decimal(str(size.price)) <= 0:
                continue

            converted = convert_to_multiple_currencies(size.price, base_currency, target_currencies)
            existing = {price.currency_code: price for price in size.prices}

            new_prices = []
            for position, code in enumerate(target_currencies):
                price = existing.get(code)
                if price is not None and price.is_manual and not override_manual:
                    price.position = position
                    new_prices.append(price)
                    continue
                if price is None:
                    price = SizePrice(currency_code=code)
                price.amount = converted.get(code, Decimal('0'))
                price.is_manual = False
                price.position = position
                new_prices.append(price)

            size.prices = new_prices

        db.session.commit()
        logger.info(
            f"Auto-priced product {product.id} from {base_currency} into "
            f"{len(target_currencies)} currencies (override_manual={override_manual})"
        )
        return product

    @staticmethod
    def _parse_display_order(value) -> int:
        if isinstance(value, bool):
            raise ValidationException("displayOrder must be an integer")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationException("displayOrder must be an integer")
