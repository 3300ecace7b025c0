"""
Job runner

Runs the forecast and reorder-check jobs either synchronously (manual trigger)
or queued on a single-thread executor per job type, so runs of the same job
never overlap. Queued runs are retried in full with exponential backoff.
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from typing import Dict

from app.buisness.core.engine_context import EngineContext, SystemUserCache
from app.buisness.core.errors import ValidationError
from app.buisness.intelligence.forecast_strategies import ForecastStrategy
from app.config import IntelligencePolicy
from app.logger import get_logger

logger = get_logger("inventory_intelligence.domain.intelligence.jobs")


class JobName(str, Enum):
    FORECAST = 'forecast'
    REORDER_CHECK = 'reorder-check'

    @classmethod
    def parse(cls, value) -> 'JobName':
        if isinstance(value, cls):
            return value
        normalized = str(value or '').strip().lower().replace('_', '-')
        for member in cls:
            if member.value == normalized:
                return member
        raise ValidationError(f"Unknown job: {value!r}")


class JobRunner:

    def __init__(self, app, sleep=time.sleep, clock=None):
        self.app = app
        self.sleep = sleep
        self.clock = clock
        self.system_users = SystemUserCache(app.config.get('SYSTEM_USERNAME', 'system'))
        self._locks = {job: threading.Lock() for job in JobName}
        self._executors: Dict[JobName, ThreadPoolExecutor] = {}
        self._executor_lock = threading.Lock()

    def prepare(self, job, params):
        """Validate a job request up front so nothing runs on bad input"""
        job = JobName.parse(job)
        params = dict(params)
        if job == JobName.FORECAST:
            policy = IntelligencePolicy.from_config(self.app.config)
            params['strategy'] = ForecastStrategy.parse(
                params.pop('method', None), params.pop('window', None), params.pop('alpha', None), policy
            )
            location_id = params.pop('location_id', None)
            if location_id not in (None, ''):
                try:
                    params['location_id'] = int(location_id)
                except (TypeError, ValueError):
                    raise ValidationError(f"Invalid location_id: {location_id!r}")
        elif params:
            raise ValidationError(f"Job {job.value} takes no parameters, got {sorted(params)}")
        return job, params

    def run(self, job, **params) -> dict:
        """
        Run a job now, waiting for any in-flight run of the same job.

        Returns:
            dict: {'job': name, ...summary}
        """
        job, params = self.prepare(job, params)
        return self._execute(job, params)

    def submit(self, job, **params) -> Future:
        """Queue a job on its single-worker executor"""
        job, params = self.prepare(job, params)
        logger.info(f"Queued {job.value} job")
        return self._executor_for(job).submit(self._execute_with_retries, job, params)

    def _execute(self, job: JobName, params: dict) -> dict:
        from app import db
        from app.buisness.intelligence.forecasting_engine import DemandForecastingEngine
        from app.buisness.intelligence.reorder_engine import ReorderCheckEngine

        with self._locks[job]:
            with self.app.app_context():
                context = EngineContext.from_app(
                    self.app, session=db.session, clock=self.clock, system_users=self.system_users
                )
                started = time.monotonic()
                if job == JobName.FORECAST:
                    summary = DemandForecastingEngine(context).forecast(**params)
                else:
                    summary = ReorderCheckEngine(context).check()
                logger.info(f"Job {job.value} finished in {time.monotonic() - started:.2f}s")
        return {'job': job.value, **summary}

    def _execute_with_retries(self, job: JobName, params: dict) -> dict:
        policy = IntelligencePolicy.from_config(self.app.config)
        for attempt in range(1, policy.job_max_attempts + 1):
            try:
                return self._execute(job, params)
            except ValidationError:
                raise
            except Exception as e:
                if attempt == policy.job_max_attempts:
                    logger.error(f"Job {job.value} failed after {attempt} attempts: {e}")
                    raise
                delay = policy.job_backoff_seconds * (2 ** (attempt - 1))
                logger.warning(f"Job {job.value} attempt {attempt} failed ({e}); retrying in {delay:.1f}s")
                self.sleep(delay)

    def _executor_for(self, job: JobName) -> ThreadPoolExecutor:
        with self._executor_lock:
            executor = self._executors.get(job)
            if executor is None:
                executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"{job.value}-worker")
                self._executors[job] = executor
            return executor

    def shutdown(self, wait=True):
        with self._executor_lock:
            executors, self._executors = list(self._executors.values()), {}
        for executor in executors:
            executor.shutdown(wait=wait)
