#!/usr/bin/env python3
"""
Build orchestrator for the Inventory Intelligence service
Creates tables, inserts critical data and optionally debug data
"""

from app import create_app, db
from pathlib import Path
import json
from app.logger import get_logger

logger = get_logger("inventory_intelligence.build")

CRITICAL_DATA_FILE = Path(__file__).parent / 'data' / 'core' / 'build_data_critical.json'


def verify_critical_data():
    """
    Verify that critical data is present in the database

    Returns:
        bool: True if the system and admin users exist
    """
    from app.data.core.user_info.user import User

    system_user = User.query.filter_by(username='system', is_system=True).first()
    if not system_user:
        logger.warning("System user not found")
        return False

    admin_user = User.query.filter_by(username='admin').first()
    if not admin_user:
        logger.warning("Admin user not found")
        return False

    logger.info("Critical data verification passed")
    return True


def insert_critical_data():
    """
    Insert critical data that must always be present

    Loads from app/data/core/build_data_critical.json. Called on every build,
    regardless of flags.

    Raises:
        FileNotFoundError: If critical data file not found
        RuntimeError: If critical data insertion fails
    """
    if not CRITICAL_DATA_FILE.exists():
        error_msg = f"Critical data file not found: {CRITICAL_DATA_FILE}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    if verify_critical_data():
        logger.info("Critical data already present, skipping insertion")
        return

    logger.info("Loading critical data from build_data_critical.json...")
    with open(CRITICAL_DATA_FILE, 'r') as f:
        critical_data = json.load(f)

    from app.data.core.user_info.user import User

    try:
        users = critical_data.get('Essential', {}).get('Users', {})
        # System user first so the rest can be attributed to it
        for user_key in sorted(users, key=lambda key: not users[key].get('is_system')):
            User.find_or_create_from_dict(users[user_key], lookup_fields=['username'], commit=False)
            logger.info(f"Inserted essential user: {users[user_key].get('username')}")
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Critical data insertion failed: {e}")
        raise RuntimeError(f"Critical data insertion failed: {e}") from e

    if not verify_critical_data():
        raise RuntimeError("Critical data insertion completed but verification failed")
    logger.info("Successfully inserted critical data")


def build_database(enable_debug_data=True, app=None):
    """
    Create all tables and insert critical (and optionally debug) data

    Args:
        enable_debug_data (bool): Whether to insert debug data
        app: Flask app to build against (default: a new app from create_app)
    """
    app = app or create_app()

    with app.app_context():
        logger.info(f"Starting database build (debug data: {enable_debug_data})")

        db.create_all()
        logger.info("All database tables created")

        insert_critical_data()

        if enable_debug_data:
            from app.debug.debug_data_manager import insert_debug_data
            logger.info("Inserting debug data...")
            insert_debug_data(enabled=True)

        logger.info("Database build completed successfully")
    return app


if __name__ == '__main__':
    build_database()
