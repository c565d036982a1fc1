import logging

import click
from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_migrate import Migrate

from config import Config
from models import db
from routes import health_bp, auth_bp, experiences_bp, promo_bp, booking_bp
from services.exceptions import BookingServiceError
from utils.auth_context import load_current_user
from utils.seed import seed_demo_data

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(experiences_bp)
    app.register_blueprint(promo_bp)
    app.register_blueprint(booking_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    CORS(
        app,
        origins=app.config["ALLOWED_ORIGIN"],
        allow_headers=["Authorization", "Content-Type"],
        methods=["GET", "POST", "OPTIONS"],
    )

    @app.before_request
    def _load_user():
        load_current_user()

    @app.errorhandler(BookingServiceError)
    def _booking_error(exc):
        logger.info("%s %s -> %s (%s)", request.method, request.path, exc.code, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.after_request
    def add_response_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app


def register_cli(app):
    @app.cli.command("seed-demo")
    def seed_demo():
        """Load the demo experiences and promo codes (idempotent)."""
        experiences, promos = seed_demo_data()
        click.echo(f"Seeded {experiences} experiences and {promos} promo codes")


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002, threaded=True)
