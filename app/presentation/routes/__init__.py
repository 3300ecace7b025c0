"""
Routes package for the Inventory Intelligence service
"""

from app.logger import get_logger

logger = get_logger("inventory_intelligence.routes")


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .intelligence import bp as intelligence_bp
    app.register_blueprint(intelligence_bp, url_prefix='/intelligence')

    from .main import bp as main_bp
    app.register_blueprint(main_bp)

    logger.info("Route blueprints registered")
