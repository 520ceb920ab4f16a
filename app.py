import json

import click
from flask import Flask
from flask_migrate import Migrate

from config import Config
from routes import health_bp, auth_bp, admin_bp, booking_bp, cancellations_bp, audit_bp

from models import db
from utils.auth_context import load_current_user


def create_app(config_class=Config, overrides=None):
    app = Flask(__name__)
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(cancellations_bp)
    app.register_blueprint(audit_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    @app.before_request
    def _load_user():
        load_current_user()

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    if not app.config.get("ADMIN_AUTH_REQUIRED", True):
        app.logger.warning("ADMIN_AUTH_REQUIRED is off: /admin routes are open")

    return app

#-------------------------
from utils.audit import log_event
from utils.legacy_import import import_document
from utils.seed import ensure_admin

def register_cli(app):
    @app.cli.command("create-admin")
    @click.password_option(help="Password for the reserved admin account.")
    def create_admin(password):
        """Create the reserved admin account, or reset its password."""
        user, created = ensure_admin(password)
        verb = "created" if created else "updated"
        click.echo(f"{user.username} ({user.id}) {verb}")

    @app.cli.command("import-data")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def import_data(path):
        """Load a legacy data.json document into the database."""
        with open(path, encoding="utf-8") as fh:
            try:
                doc = json.load(fh)
            except json.JSONDecodeError as exc:
                raise click.ClickException(f"{path} is not valid JSON: {exc}")

        if not isinstance(doc, dict):
            raise click.ClickException(f"{path} does not hold a JSON object")

        counts = import_document(doc)
        log_event("DATA_IMPORT", context={"path": path, **counts})
        app.logger.info("Imported %s: %s", path, counts)
        click.echo(", ".join(f"{k}={v}" for k, v in counts.items()))

#-------------------------




if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=3000)
