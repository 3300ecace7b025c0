"""
Alert listing routes
"""

from flask import jsonify, request
from app.services.intelligence import AlertService
from app.presentation.routes.intelligence import bp, optional_int_arg


@bp.route('/alerts', methods=['GET'])
def open_alerts():
    alerts = AlertService.get_open_alerts(
        location_id=optional_int_arg(request.args, 'location_id'),
        alert_type=request.args.get('type'),
    )
    return jsonify({'alerts': [alert.to_dict() for alert in alerts]})
