#!/usr/bin/env python3
"""
Debug Data Manager
Central controller for debug data insertion

Handles:
- Loading debug data JSON files
- Checking if data is already present
- Orchestrating module-specific insertion functions
- Fail-fast error handling
"""

from pathlib import Path
import json
from app import db
from app.logger import get_logger

logger = get_logger("inventory_intelligence.debug_data_manager")

DEBUG_MODULES = ['intelligence']


def insert_debug_data(enabled=True, modules=None):
    """
    Insert debug data for the given modules

    Args:
        enabled (bool): Whether to insert debug data (default: True)
        modules (list): Module names to insert (default: all)

    Returns:
        dict: Summary of inserted data

    Raises:
        Exception: If any debug data insertion fails (fail-fast)
    """
    if not enabled:
        logger.info("Debug data insertion is disabled")
        return {}

    from app.data.core.user_info.user import User
    system_user = User.query.filter_by(username='system').first()
    if not system_user:
        logger.error("System user not found - cannot insert debug data without system user")
        raise RuntimeError("System user not found - critical data must be inserted first")

    summary = {}
    for module_name in modules or DEBUG_MODULES:
        try:
            debug_data = _load_debug_data_file(module_name)
            if not debug_data:
                logger.info(f"No debug data file found for {module_name}, skipping")
                summary[module_name] = {'status': 'skipped', 'reason': 'file_not_found'}
                continue

            if _check_debug_data_present(module_name, debug_data):
                logger.info(f"Debug data for {module_name} already present, skipping")
                summary[module_name] = {'status': 'skipped', 'reason': 'data_present'}
                continue

            logger.info(f"Inserting debug data for {module_name}...")
            counts = _insert_module_debug_data(module_name, debug_data, system_user.id)
            summary[module_name] = {'status': 'inserted', 'counts': counts}
            logger.info(f"Successfully inserted debug data for {module_name}")

        except Exception as e:
            logger.error(f"Failed to insert debug data for {module_name}: {e}")
            db.session.rollback()
            raise

    logger.info("Debug data insertion completed successfully")
    return summary


def _load_debug_data_file(module_name):
    """
    Load debug data JSON file for a module

    Returns:
        dict: Debug data or None if file doesn't exist
    """
    debug_file = Path(__file__).parent / 'data' / f'{module_name}.json'

    if not debug_file.exists():
        return None

    try:
        with open(debug_file, 'r') as f:
            data = json.load(f)
        logger.debug(f"Loaded debug data file: {debug_file}")
        return data
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {debug_file}: {e}")
        raise


def _check_debug_data_present(module_name, debug_data):
    """
    Check if debug data for a module is already present

    Presence is detected by the natural keys (codes, SKUs) in the JSON file.
    """
    if module_name == 'intelligence':
        from app.data.core.major_location import Location
        from app.data.core.supply.product import ProductVariant

        for loc_data in debug_data.get('Locations', []):
            if Location.query.filter_by(code=loc_data['code']).first():
                return True
        for product_data in debug_data.get('Products', []):
            for variant_data in product_data.get('variants', []):
                if ProductVariant.query.filter_by(sku=variant_data['sku']).first():
                    return True

    return False


def _insert_module_debug_data(module_name, debug_data, system_user_id):
    """
    Insert debug data for a specific module

    Raises:
        ValueError: Unknown module
    """
    if module_name == 'intelligence':
        from app.debug.add_intelligence_debugging_data import insert_intelligence_debug_data
        return insert_intelligence_debug_data(debug_data, system_user_id)
    raise ValueError(f"Unknown module: {module_name}")
