from dashboard.extensions import csrf

from .auth import auth_bp
from .countries import countries_bp
from .currency import currency_bp
from .logs import logs_bp
from .pages import pages_bp
from .products import products_bp
from .settings import appearance_bp, payment_settings_bp
from .uploads import uploads_bp

# JSON API blueprints; clients authenticate with the session cookie and send no CSRF token
API_BLUEPRINTS = (
    countries_bp,
    products_bp,
    currency_bp,
    appearance_bp,
    payment_settings_bp,
    uploads_bp,
    logs_bp,
)

BLUEPRINTS = (auth_bp, pages_bp) + API_BLUEPRINTS


def register_blueprints(app):
    for blueprint in API_BLUEPRINTS:
        csrf.exempt(blueprint)
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
