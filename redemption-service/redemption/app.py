"""
Redemption Service — Flask application
Vendor login via World ID, campaign/item CRUD and once-per-campaign redemptions.
"""

import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify
from flasgger import Swagger
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException, InternalServerError

from redemption.errors import RedemptionServiceError, StorageError
from redemption.extensions import db, jwt
from redemption.models import Campaign, Item, Redemption, Vendor  # noqa: F401 (register models)
from redemption.services.verifier import DEFAULT_WORLD_ID_API_URL, WorldIDVerifier

load_dotenv()

logger = logging.getLogger(__name__)


def _database_uri():
    url = os.environ.get('DATABASE_URL')
    if url:
        # Hosted providers still hand out the deprecated postgres:// scheme
        if url.startswith('postgres://'):
            url = 'postgresql://' + url[len('postgres://'):]
        return url

    db_user = os.environ.get('DB_USER', 'redemption_svc_user')
    db_pass = os.environ.get('DB_PASS', 'password')
    db_host = os.environ.get('DB_HOST', 'redemptions-db')
    db_name = os.environ.get('DB_NAME', 'redemptions_db')
    return f"postgresql://{db_user}:{db_pass}@{db_host}/{db_name}"


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {'1', 'true', 'yes', 'on'}


def create_app(test_config=None, verifier=None):
    app = Flask(__name__)

    # Configuration
    app.config['SQLALCHEMY_DATABASE_URI'] = _database_uri()
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {'pool_pre_ping': True}
    app.config['JWT_SECRET_KEY'] = os.environ.get('JWT_SECRET', 'dev-secret-change-me')
    app.config['ACCESS_TOKEN_TTL_MINUTES'] = int(os.environ.get('ACCESS_TOKEN_TTL_MINUTES', 60))
    app.config['VERIFICATION_TOKEN_TTL_SECONDS'] = int(os.environ.get('VERIFICATION_TOKEN_TTL_SECONDS', 300))
    app.config['WORLD_ID_APP_ID'] = os.environ.get('WORLD_ID_APP_ID')
    app.config['WORLD_ID_API_URL'] = os.environ.get('WORLD_ID_API_URL', DEFAULT_WORLD_ID_API_URL)
    app.config['VERIFIER_TIMEOUT_SECONDS'] = float(os.environ.get('VERIFIER_TIMEOUT_SECONDS', 5))
    app.config['VENDOR_LOGIN_ACTION'] = os.environ.get('VENDOR_LOGIN_ACTION', 'vendor_login')
    app.config['REDEEM_ACTION'] = os.environ.get('REDEEM_ACTION', 'redeem_campaign')
    app.config['AUTO_CREATE_TABLES'] = _env_flag('AUTO_CREATE_TABLES', True)
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO').upper()

    if test_config:
        app.config.update(test_config)
    app.config.setdefault('VERIFIABLE_ACTIONS', [app.config['REDEEM_ACTION']])

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Initialize Extensions
    db.init_app(app)
    jwt.init_app(app)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({"message": f"Invalid token: {reason}", "error_code": "INVALID_TOKEN"}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({"message": "Token has expired", "error_code": "TOKEN_EXPIRED"}), 401

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({"message": reason, "error_code": "UNAUTHORIZED"}), 401

    if verifier is None:
        verifier = WorldIDVerifier(
            app_id=app.config['WORLD_ID_APP_ID'],
            api_url=app.config['WORLD_ID_API_URL'],
            timeout=app.config['VERIFIER_TIMEOUT_SECONDS']
        )
    app.extensions['proof_verifier'] = verifier

    swagger_config = {
        "headers": [],
        "specs": [
            {
                "endpoint": 'apispec_1',
                "route": '/apispec_1.json',
                "rule_filter": lambda rule: True,  # all in
                "model_filter": lambda tag: True,  # all in
            }
        ],
        "static_url_path": "/flasgger_static",
        "swagger_ui": True,
        "specs_route": "/apidocs/"
    }
    Swagger(app, config=swagger_config)

    # Register Blueprints
    from redemption.routes.vendors import vendors_bp
    app.register_blueprint(vendors_bp, url_prefix='/api/vendors')

    from redemption.routes.redeem import redeem_bp
    app.register_blueprint(redeem_bp, url_prefix='/api')

    from redemption.routes.campaigns import campaigns_bp
    app.register_blueprint(campaigns_bp, url_prefix='/api/campaigns')

    from redemption.routes.items import items_bp
    app.register_blueprint(items_bp, url_prefix='/api/items')

    _register_error_handlers(app)

    @app.route('/health')
    def health():
        try:
            db.session.execute(db.text('SELECT 1'))
            return {"service": "redemption-service", "status": "healthy"}, 200
        except SQLAlchemyError as e:
            return {"service": "redemption-service", "status": "unhealthy", "error": str(e)}, 503

    if app.config['AUTO_CREATE_TABLES']:
        with app.app_context():
            db.create_all()

    logger.debug("Routes: %s", app.url_map)
    return app


def _register_error_handlers(app):
    @app.errorhandler(RedemptionServiceError)
    def handle_service_error(e):
        if e.status_code >= 500:
            db.session.rollback()
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        db.session.rollback()
        logger.exception("Database error")
        return jsonify(StorageError().to_dict()), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"message": e.description, "error_code": e.name.upper().replace(' ', '_')}), e.code

    @app.errorhandler(InternalServerError)
    def handle_unexpected_error(e):
        original = e.original_exception or e
        logger.error("Unhandled error: %s", original, exc_info=original)
        return jsonify({"message": "Internal server error", "error_code": "INTERNAL_ERROR"}), 500


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
