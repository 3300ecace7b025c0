from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from app.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per day", "50 per hour"],
    storage_uri="memory://"  # Use Redis in production for distributed systems
)


def _env_flag(name, default='False'):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(config_overrides=None):
    from pathlib import Path
    from app.config import load_policy_settings, IntelligencePolicy

    app = Flask(__name__)

    logger = get_logger("inventory_intelligence")
    logger.info("Initializing Flask application")

    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-DO-NOT-USE-IN-PRODUCTION')

    # Prefer an explicit DATABASE_URL; otherwise keep the SQLite database in instance/
    base_dir = Path(__file__).parent.parent
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        instance_dir = base_dir / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'inventory_intelligence.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['RATELIMIT_ENABLED'] = _env_flag('RATELIMIT_ENABLED', 'True')
    app.config['JOB_TRIGGER_RATE_LIMIT'] = os.environ.get('JOB_TRIGGER_RATE_LIMIT', '10 per minute')

    # Intelligence policy constants (safety stock, cover days, tier weights, ...)
    app.config.update(load_policy_settings())

    if config_overrides:
        app.config.update(config_overrides)

    # Fail at startup on an invalid policy rather than inside a job run
    IntelligencePolicy.from_config(app.config)

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]}")

    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from app.data.core.user_info.user import User
    from app.data.core.supply.supplier import Supplier
    from app.data.core.supply.product import Product, ProductVariant
    from app.data.core.major_location import Location
    from app.data.inventory.base import SaleRecord, InventoryLevel, DemandForecast, Alert

    logger.debug("Models imported and registered")

    from app.presentation.routes import init_app as init_routes
    init_routes(app)

    from app.buisness.intelligence.job_runner import JobRunner
    app.extensions['intelligence_jobs'] = JobRunner(app)

    logger.info("Flask application initialization complete")

    return app
