import logging

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from fintrack.config import Config
from fintrack.extensions import init_mongo
from fintrack.groups.registry import GroupRegistry
from fintrack.utils.errors import LedgerError

jwt = JWTManager()

logger = logging.getLogger(__name__)


def create_app(config_class=Config, mongo_client=None):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
    )

    # Disable strict slashes to prevent 308 redirects that break CORS preflight
    app.url_map.strict_slashes = False

    # Allow the React front-end to talk to Flask
    CORS(
        app,
        supports_credentials=True,
        resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}}
    )

    # Init extensions
    init_mongo(app, client=mongo_client)
    jwt.init_app(app)
    GroupRegistry.from_config(app.config).init_app(app)

    from fintrack.shared_expenses.store import SharedExpenseDB
    SharedExpenseDB.ensure_indexes()

    register_error_handlers(app)

    # Register blueprints
    from fintrack.shared_expenses.routes import shared_expenses_bp
    from fintrack.settlements.routes import settlements_bp
    from fintrack.groups.routes import groups_bp

    app.register_blueprint(shared_expenses_bp, url_prefix='/api/v1/shared-expenses')
    app.register_blueprint(settlements_bp, url_prefix='/api/v1/settlements')
    app.register_blueprint(groups_bp, url_prefix='/api/v1/groups')

    return app


def register_error_handlers(app):
    @app.errorhandler(LedgerError)
    def handle_ledger_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error"}), 500
