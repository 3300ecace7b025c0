"""
Main routes for the Inventory Intelligence service
Landing endpoint with a health check and record counts
"""

from flask import Blueprint, jsonify
from app.data.core.major_location import Location
from app.data.core.supply.product import ProductVariant
from app.data.inventory.base import Alert, DemandForecast, SaleRecord
from app.logger import get_logger

logger = get_logger("inventory_intelligence.routes.main")
bp = Blueprint('main', __name__)


@bp.route('/')
def index():
    """Service status and basic statistics"""
    stats = {
        'locations': Location.query.filter_by(is_active=True).count(),
        'variants': ProductVariant.query.filter_by(is_active=True).count(),
        'sale_records': SaleRecord.query.count(),
        'forecasts': DemandForecast.query.count(),
        'open_alerts': Alert.query.filter_by(is_resolved=False).count(),
    }
    logger.debug(f"Index stats: {stats}")
    return jsonify({'status': 'ok', 'stats': stats})
