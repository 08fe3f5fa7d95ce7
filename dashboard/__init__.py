import logging
import os

from flask import Flask, current_app, flash, jsonify, redirect, request, url_for
from flask_babel import get_locale
from flask_babel import gettext as _
from flask_login import current_user
from flask_wtf.csrf import CSRFError
from sqlalchemy.exc import OperationalError

from .config import CONFIG_BY_NAME, Config
from .constants import ADMIN_PAGES
from .exceptions import DashboardException
from .extensions import db, init_extensions, login_manager
from .utils.responses import api_error, is_api_request

RTL_LANGUAGES = ("ar",)


def select_locale():
    """Cookie set by /locale/<code>, then ?lang=, then the browser, then the default."""
    languages = list(current_app.config["LANGUAGES"])
    for candidate in (request.cookies.get("locale"), request.args.get("lang")):
        if candidate in languages:
            return candidate
    return request.accept_languages.best_match(languages)


def create_app(config_class: type[Config] | None = None):
    app = Flask(__name__, static_folder="static", static_url_path="/static")

    config_obj = config_class or CONFIG_BY_NAME.get(os.environ.get("FLASK_CONFIG", ""), Config)
    app.config.from_object(config_obj)

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    init_extensions(app, locale_selector=select_locale)

    from .utils.cloudinary_utils import init_cloudinary
    init_cloudinary(app)

    from .models import AdminUser

    @login_manager.user_loader
    def load_user(user_id):
        try:
            return db.session.get(AdminUser, int(user_id))
        except (TypeError, ValueError):
            return None

    @login_manager.unauthorized_handler
    def unauthorized():
        if is_api_request():
            return api_error("Authentication required", 401)
        flash(_("Please sign in to continue"), "error")
        return redirect(url_for("auth.login", next=request.full_path))

    from .routes import register_blueprints
    register_blueprints(app)

    from .cli import register_commands
    register_commands(app)

    @app.context_processor
    def inject_ui():
        locale = str(get_locale() or app.config["BABEL_DEFAULT_LOCALE"])
        theme = request.cookies.get("theme")
        nav_pages = []
        if current_user.is_authenticated:
            nav_pages = [page for page in ADMIN_PAGES if current_user.can_access(page["key"])]
        return {
            "current_locale": locale,
            "text_direction": "rtl" if locale in RTL_LANGUAGES else "ltr",
            "theme": theme if theme in ("light", "dark") else "light",
            "nav_pages": nav_pages,
            "languages": app.config["LANGUAGES"],
        }

    @app.route("/_health", methods=["GET"])
    def healthcheck():
        return jsonify({"status": "ok"}), 200

    @app.errorhandler(OperationalError)
    def handle_database_error(e):
        """Handle database connection errors gracefully."""
        app.logger.error(f"Database connection error: {e}", exc_info=True)
        db.session.rollback()
        if is_api_request():
            return api_error("A temporary database error occurred. Please try again.", 503)
        return "A temporary database error occurred. Please try again.", 503

    @app.errorhandler(DashboardException)
    def handle_dashboard_exception(e):
        db.session.rollback()
        if is_api_request():
            return api_error(e.message, e.status_code)
        flash(e.message, "error")
        return redirect(url_for("pages.dashboard_home"))

    @app.errorhandler(CSRFError)
    def csrf_error(e):
        if is_api_request():
            return api_error("CSRF token missing or invalid", 400)
        flash(_("Your session expired, please try again"), "error")
        return redirect(request.referrer or url_for("pages.dashboard_home"))

    @app.errorhandler(404)
    def not_found(e):
        if is_api_request():
            return api_error("Not found", 404)
        return e

    @app.errorhandler(405)
    def method_not_allowed(e):
        if is_api_request():
            return api_error("Method not allowed", 405)
        return e

    @app.errorhandler(413)
    def too_large(e):
        if is_api_request():
            return api_error("File is too large", 400)
        return e

    return app
