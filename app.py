#!/usr/bin/env python3
#USE VENV: source venv/bin/activate
"""
Run script for the Inventory Intelligence service

Builds the database, then either runs one job and exits or serves the API.
"""

import argparse
import json
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env file before the app reads its config
load_dotenv()

from app import create_app
from app.build import build_database
from app.buisness.core.errors import ValidationError
from app.logger import get_logger

logger = get_logger("inventory_intelligence.run")


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Inventory Intelligence service')
    parser.add_argument('--build-only', action='store_true',
                        help='Create tables and critical data, then exit without serving')
    parser.add_argument('--enable-debug-data', action='store_true', default=True,
                        help='Enable debug data insertion (default: enabled if flag not present)')
    parser.add_argument('--no-debug-data', action='store_false', dest='enable_debug_data',
                        help='Disable debug data insertion')
    parser.add_argument('--run-job', choices=['forecast', 'reorder-check'],
                        help='Run one job synchronously, print its summary and exit')
    parser.add_argument('--method', help='Forecast strategy: auto, moving-average, exponential-smoothing, naive')
    parser.add_argument('--window', type=int, help='Moving average window in weeks')
    parser.add_argument('--alpha', type=float, help='Exponential smoothing factor (0, 1]')
    parser.add_argument('--location-id', type=int, help='Only forecast this location')
    return parser.parse_args(argv)


def job_params(args):
    if args.run_job != 'forecast':
        return {}
    params = {'method': args.method, 'window': args.window, 'alpha': args.alpha, 'location_id': args.location_id}
    return {key: value for key, value in params.items() if value is not None}


def main(argv=None):
    args = parse_arguments(argv)
    logger.debug("Starting Inventory Intelligence service...")

    app = create_app()
    build_database(
        enable_debug_data=args.enable_debug_data and not args.build_only,
        app=app,
    )

    if args.build_only:
        logger.info("Build completed. Exiting without starting web server.")
        return 0

    if args.run_job:
        try:
            summary = app.extensions['intelligence_jobs'].run(args.run_job, **job_params(args))
        except ValidationError as e:
            logger.error(f"Invalid job request: {e}")
            return 2
        print(json.dumps(summary, indent=2, default=str))
        return 1 if summary.get('errors') else 0

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')
    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
    return 0


if __name__ == '__main__':
    sys.exit(main())
