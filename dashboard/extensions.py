from flask_babel import Babel
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_migrate.cli import db as flask_migrate_cli
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect

# Engine options come from the config object loaded in create_app
db = SQLAlchemy(session_options={"expire_on_commit": False})
login_manager = LoginManager()
migrate = Migrate()
csrf = CSRFProtect()
babel = Babel()


def init_extensions(app, locale_selector=None):
    """Initialize all extensions with the given Flask app."""
    db.init_app(app)

    migrate.init_app(app, db)
    if "db" not in app.cli.commands:
        app.cli.add_command(flask_migrate_cli)

    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message_category = "error"

    csrf.init_app(app)

    # Flask-Babel 3+ takes the selector at init time
    babel.init_app(app, locale_selector=locale_selector)

    return app
