import logging
import os
import re

from dotenv import load_dotenv
from flask import Flask

# Only load from .env when DATABASE_URL is not already defined by the environment
if not os.getenv("DATABASE_URL"):
    load_dotenv()

from dental_manager.core import config  # noqa: E402
from dental_manager.core.api_utils import (  # noqa: E402
    api_response,
    close_request_session,
)
from dental_manager.core.logging_config import setup_logging  # noqa: E402
from dental_manager.db.session import create_tables  # noqa: E402

logger = logging.getLogger(__name__)


# Helper to mask password in URLs to avoid leaking secrets in logs
def _mask_url_password(url: str) -> str:
    return re.sub(r"(://[^:/?#]+):[^@]*@", r"\1:***@", url)


def create_app(
    config_overrides=None,
    appointment_service=None,
    customer_service=None,
    dentist_service=None,
):
    """Application factory.

    Args:
        config_overrides: Extra Flask config values (e.g. ``{"TESTING": True}``)
        appointment_service: Pin one service instance for every request
            instead of building one per request on a fresh DB session
        customer_service: Same, for the customer endpoints
        dentist_service: Same, for the dentist endpoints

    Tables are created (and demo data seeded) only when at least one
    service is left to the default database wiring.
    """
    app = Flask(__name__)
    app.config.update(config_overrides or {})

    testing_env = os.getenv("TESTING", "").lower().strip()
    if testing_env in ("true", "1", "yes"):
        app.config["TESTING"] = True

    setup_logging(
        app=app,
        log_level=config.get_log_level(),
        log_to_file=config.get_log_to_file(),
        use_json_format=config.get_log_json(),
    )
    logger.info(
        "Application starting",
        extra={
            "context": {
                "database_url": _mask_url_password(config.get_database_url()),
                "testing": bool(app.config.get("TESTING")),
            }
        },
    )
    config.log_email_config()

    pinned = {
        "appointment_service": appointment_service,
        "customer_service": customer_service,
        "dentist_service": dentist_service,
    }
    for name, service in pinned.items():
        if service is not None:
            app.extensions[name] = service

    if any(service is None for service in pinned.values()):
        create_tables()
        logger.info("Database tables ready")
        if config.get_seed_demo_data():
            from dental_manager.db.seed import ensure_demo_clinic_data

            ensure_demo_clinic_data()

    from dental_manager.controllers.appointment_controller import appointment_bp
    from dental_manager.controllers.customer_controller import customer_bp
    from dental_manager.controllers.dentist_controller import dentist_bp
    from dental_manager.controllers.health_controller import health_bp

    app.register_blueprint(appointment_bp)
    app.register_blueprint(customer_bp)
    app.register_blueprint(dentist_bp)
    app.register_blueprint(health_bp)
    app.teardown_appcontext(close_request_session)

    @app.errorhandler(404)
    def not_found(error):
        return api_response(False, "Resource not found.", None, 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return api_response(False, "Method not allowed.", None, 405)

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(
            "Internal server error",
            extra={"context": {"error": str(error)}},
        )
        return api_response(
            False, "An error occurred while processing your request.", None, 500
        )

    return app


if __name__ == "__main__":
    # Use PORT from environment or default to 5000 for local dev
    port = int(os.getenv("PORT", 5000))
    create_app().run(host="0.0.0.0", port=port, debug=False)
