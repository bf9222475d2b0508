"""
Marketplace Service — Flask application
Users list products, buy them through checkout and confirm each in-person
handoff with a one-time code.
"""

import logging
import os
from datetime import datetime, timezone

import click
from dotenv import load_dotenv
from flask import Flask, jsonify
from flasgger import Swagger
from sqlalchemy import text

from marketplace.extensions import db, jwt, BLOCKLIST
from marketplace import models  # noqa: F401  (register models with SQLAlchemy)
from marketplace.services.errors import MarketplaceError

load_dotenv()

logger = logging.getLogger(__name__)


def _database_uri():
    if os.getenv('DATABASE_URL'):
        return os.environ['DATABASE_URL']
    return (
        f"postgresql://{os.getenv('DB_USER', 'marketplace_user')}"
        f":{os.getenv('DB_PASS', 'password')}"
        f"@{os.getenv('DB_HOST', 'marketplace-db')}"
        f":{os.getenv('DB_PORT', '5432')}"
        f"/{os.getenv('DB_NAME', 'marketplace_db')}"
    )


def create_app(test_config=None):
    app = Flask(__name__)

    # Configuration
    app.config['SQLALCHEMY_DATABASE_URI'] = _database_uri()
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET', 'dev-secret-change-me')
    app.config['JWT_TOKEN_LOCATION'] = ['headers', 'cookies']
    app.config['JWT_COOKIE_SECURE'] = os.getenv('JWT_COOKIE_SECURE', 'false').lower() == 'true'
    app.config['JWT_COOKIE_SAMESITE'] = 'Strict'
    app.config['JWT_COOKIE_CSRF_PROTECT'] = False
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    # Initialize Extensions
    db.init_app(app)
    jwt.init_app(app)

    @jwt.token_in_blocklist_loader
    def check_if_token_in_blocklist(jwt_header, jwt_payload):
        return jwt_payload['jti'] in BLOCKLIST

    Swagger(app)

    # Register Blueprints
    from marketplace.routes.auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')

    from marketplace.routes.user import user_bp
    app.register_blueprint(user_bp, url_prefix='/users')

    from marketplace.routes.products import product_bp
    app.register_blueprint(product_bp, url_prefix='/products')

    from marketplace.routes.orders import order_bp
    app.register_blueprint(order_bp, url_prefix='/orders')

    @app.errorhandler(MarketplaceError)
    def handle_marketplace_error(error):
        if error.status_code >= 500:
            logger.error("%s: %s", error.error_code, error.message)
        return jsonify(error.to_dict()), error.status_code

    # --- Health check ---------------------------------------------------
    @app.route('/health')
    def health():
        try:
            db.session.execute(text('SELECT 1'))
            return jsonify({
                "status": "healthy",
                "service": "marketplace-service",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }), 200
        except Exception as e:
            return jsonify({"service": "marketplace-service", "status": "unhealthy", "error": str(e)}), 503

    @app.cli.command('init-db')
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo('Database initialized.')

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=int(os.getenv('PORT', 5000)))
