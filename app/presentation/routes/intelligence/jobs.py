"""
Manual job trigger
"""

from flask import current_app, jsonify, request
from app import limiter
from app.presentation.routes.intelligence import bp, logger


def _trigger_rate_limit():
    return current_app.config.get('JOB_TRIGGER_RATE_LIMIT', '10 per minute')


@bp.route('/jobs/trigger', methods=['POST'])
@limiter.limit(_trigger_rate_limit)
def trigger_job():
    """
    Run forecast or reorder-check.

    Query parameters: job (required), method, window, alpha, location_id for
    forecast; queue=true to enqueue instead of running inline.
    """
    job = request.args.get('job')
    params = {key: request.args.get(key) for key in ('method', 'window', 'alpha', 'location_id')
              if request.args.get(key) not in (None, '')}
    runner = current_app.extensions['intelligence_jobs']

    if request.args.get('queue', '').lower() in ('true', '1', 'yes'):
        runner.submit(job, **params)
        logger.info(f"Job {job} queued via trigger endpoint")
        return jsonify({'job': job, 'queued': True}), 202

    logger.info(f"Job {job} triggered manually with {params}")
    return jsonify(runner.run(job, **params))
