"""
Intelligence routes
JSON endpoints for triggering jobs, reading forecasts and alerts, and
requesting allocation proposals
"""

from flask import Blueprint, jsonify
from app.buisness.core.errors import NotFoundError, ValidationError
from app.logger import get_logger

bp = Blueprint('intelligence', __name__)
logger = get_logger("inventory_intelligence.routes.intelligence")


@bp.errorhandler(NotFoundError)
def handle_not_found(error):
    return jsonify({'error': str(error)}), 404


@bp.errorhandler(ValidationError)
def handle_validation_error(error):
    return jsonify({'error': str(error)}), 400


def require_int_arg(args, name):
    """Read a required integer query parameter"""
    value = args.get(name)
    if value in (None, ''):
        raise ValidationError(f"Missing required parameter: {name}")
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Parameter {name} must be an integer, got {value!r}")


def optional_int_arg(args, name):
    if args.get(name) in (None, ''):
        return None
    return require_int_arg(args, name)


from . import jobs, allocation, forecasts, alerts  # noqa: E402,F401
