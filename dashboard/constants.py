"""
Dashboard Constants
Projects, payment methods and admin page keys shared by models, routes and templates.
"""

PROJECTS = [
    {"key": "ghadaq", "label": "Ghadaq"},
    {"key": "manasik", "label": "Manasik"},
]

PAYMENT_METHODS = [
    {"key": "paymob", "label": "Paymob"},
    {"key": "easykash", "label": "EasyKash"},
]

ROLE_SUPER_ADMIN = "super_admin"
ROLE_ADMIN = "admin"
ROLES = (ROLE_SUPER_ADMIN, ROLE_ADMIN)

# Sidebar entries; "dashboard" is always visible
ADMIN_PAGES = [
    {"key": "dashboard", "endpoint": "pages.dashboard_home", "icon": "📊"},
    {"key": "products", "endpoint": "pages.products_page", "icon": "📦"},
    {"key": "countries", "endpoint": "pages.countries_page", "icon": "🌍"},
    {"key": "currencyRates", "endpoint": "pages.currency_rates_page", "icon": "💱"},
    {"key": "appearance", "endpoint": "pages.appearance_page", "icon": "🖼"},
    {"key": "paymentSettings", "endpoint": "pages.payment_settings_page", "icon": "💳"},
    {"key": "activityLogs", "endpoint": "pages.logs_page", "icon": "📝"},
]

LOG_ACTIONS = ("create", "update", "delete", "login", "logout")
LOG_RESOURCES = (
    "product",
    "country",
    "appearance",
    "paymentSettings",
    "image",
    "currencyRate",
    "auth",
)


def get_project_keys() -> list:
    """Get list of all project keys."""
    return [project["key"] for project in PROJECTS]


def is_valid_project(project: str) -> bool:
    """Check if a project key is valid."""
    return project in get_project_keys()


def get_payment_method_keys() -> list:
    return [method["key"] for method in PAYMENT_METHODS]


def is_valid_payment_method(method: str) -> bool:
    return method in get_payment_method_keys()


def get_page_keys() -> list:
    return [page["key"] for page in ADMIN_PAGES]
