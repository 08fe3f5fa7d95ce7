"""
Product API Routes
Public product listing plus admin product management and auto-pricing.
"""

from flask import Blueprint, current_app, request

from dashboard.exceptions import DashboardException
from dashboard.extensions import db
from dashboard.services.activity_service import log_activity
from dashboard.services.product_service import ProductService
from dashboard.utils.decorators import api_permission_required
from dashboard.utils.responses import (
    api_error,
    api_success,
    build_pagination,
    get_json_body,
    parse_bool,
    parse_paging,
)

products_bp = Blueprint('products', __name__, url_prefix='/api/products')


@products_bp.route('', methods=['GET'])
def list_products():
    """
    Paginated product listing.

    Query:
        page, limit: positive integers (defaults 1 and PRODUCTS_PAGE_SIZE)
        inStock: "true" / "false" to filter on stock
        sacrifice: "true" to list only products that work as a sacrifice
    """
    try:
        page, limit = parse_paging(current_app.config['PRODUCTS_PAGE_SIZE'])
        in_stock = parse_bool(request.args.get('inStock'))
        sacrifice_only = request.args.get('sacrifice') == 'true'

        products, total = ProductService.list_products(page, limit, in_stock, sacrifice_only)
        return api_success({
            'products': [product.to_dict() for product in products],
            'pagination': build_pagination(page, limit, total, total_key='totalProducts'),
        })
    except DashboardException as e:
        return api_error(e.message, e.status_code)
    except Exception as e:
        current_app.logger.error(f'Error fetching products: {e}', exc_info=True)
        return api_error('Failed to fetch products', 500)


@products_bp.route('/<product_id>', methods=['GET'])
def get_product(product_id):
    try:
        return api_success(ProductService.get_product(product_id).to_dict())
    except DashboardException as e:
        return api_error(e.message, e.status_code)
    except Exception as e:
        current_app.logger.error(f'Error fetching product {product_id}: {e}', exc_info=True)
        return api_error('Failed to fetch product', 500)


@products_bp.route('', methods=['POST'])
@api_permission_required('products')
def create_product():
    try:
        product = ProductService.create_product(get_json_body())
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error creating product: {e}', exc_info=True)
        return api_error('Failed to create product', 500)

    log_activity('create', 'product', product.id, f'Created product {product.name_ar} ({product.base_currency})')
    return api_success(product.to_dict(), 201)


@products_bp.route('/<product_id>', methods=['PUT'])
@api_permission_required('products')
def update_product(product_id):
    try:
        product = ProductService.update_product(product_id, get_json_body())
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error updating product {product_id}: {e}', exc_info=True)
        return api_error('Failed to update product', 500)

    log_activity('update', 'product', product.id, f'Updated product {product.name_ar}')
    return api_success(product.to_dict())


@products_bp.route('/<product_id>', methods=['DELETE'])
@api_permission_required('products')
def delete_product(product_id):
    try:
        product = ProductService.delete_product(product_id)
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error deleting product {product_id}: {e}', exc_info=True)
        return api_error('Failed to delete product', 500)

    log_activity('delete', 'product', product_id, f'Deleted product {product.name_ar}')
    return api_success(None, message='Product deleted successfully')


@products_bp.route('/<product_id>/auto-price', methods=['POST'])
@api_permission_required('products')
def auto_price_product(product_id):
    """
    Derive per-currency prices for every size of a product.

    Request (optional):
        {"overrideManual": true}

    Response:
        {
            "baseCurrency": "SAR",
            "sizes": [{"name": {...}, "price": 100.0, "prices": [{"currencyCode": "EGP", ...}]}]
        }
    """
    override_manual = get_json_body().get('overrideManual') is True
    try:
        product = ProductService.auto_price(product_id, override_manual=override_manual)
    except DashboardException as e:
        db.session.rollback()
        return api_error(e.message, e.status_code)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error auto-pricing product {product_id}: {e}', exc_info=True)
        return api_error('Failed to auto-price product', 500)

    log_activity(
        'update', 'product', product.id,
        f"Auto-priced product {product.name_ar}{' (manual prices overridden)' if override_manual else ''}"
    )
    return api_success({
        'baseCurrency': product.base_currency,
        'sizes': [
            {key: value for key, value in size.to_dict().items() if key in ('name', 'price', 'prices')}
            for size in product.sizes
        ],
    })
