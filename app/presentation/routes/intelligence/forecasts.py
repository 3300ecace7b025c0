"""
Forecast history routes
"""

from flask import current_app, jsonify, request
from app.services.intelligence import ForecastHistoryService
from app.presentation.routes.intelligence import bp, optional_int_arg, require_int_arg


@bp.route('/forecasts/history', methods=['GET'])
def forecast_history():
    data = ForecastHistoryService.get_history_data(
        current_app,
        require_int_arg(request.args, 'variant_id'),
        require_int_arg(request.args, 'location_id'),
        weeks=optional_int_arg(request.args, 'weeks'),
    )
    return jsonify(data)
