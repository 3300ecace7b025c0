"""
Intelligence policy configuration

Policy constants used by the forecasting, reorder-check and allocation engines.
Values come from the Flask config (populated from environment variables in
create_app) and are frozen into an IntelligencePolicy for each engine run.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping


# Environment variable -> (config key, type, default)
POLICY_SETTINGS = {
    'SAFETY_STOCK_DAYS': (float, 7.0),
    'TARGET_COVER_DAYS': (float, 14.0),
    'HISTORY_WEEKS': (int, 26),
    'MOVING_AVERAGE_WINDOW': (int, 4),
    'SMOOTHING_ALPHA': (float, 0.3),
    'FORECAST_HORIZON_WEEKS': (int, 1),
    'VELOCITY_WEEKS': (int, 4),
    'TIER_WEIGHT_A': (float, 1.5),
    'TIER_WEIGHT_B': (float, 1.0),
    'TIER_WEIGHT_C': (float, 0.7),
    'JOB_MAX_ATTEMPTS': (int, 3),
    'JOB_BACKOFF_SECONDS': (float, 5.0),
}

MIN_HISTORY_WEEKS = 8


def load_policy_settings(environ: Mapping[str, str] = None) -> Dict[str, Any]:
    """
    Read policy constants from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Dictionary of config key -> typed value
    """
    environ = os.environ if environ is None else environ
    settings = {}
    for key, (cast, default) in POLICY_SETTINGS.items():
        raw = environ.get(key)
        if raw is None or raw == '':
            settings[key] = default
            continue
        try:
            settings[key] = cast(raw)
        except ValueError:
            raise ValueError(f"Invalid value for {key}: {raw!r}")
    return settings


@dataclass(frozen=True)
class IntelligencePolicy:
    """Immutable snapshot of the replenishment and allocation policy"""

    safety_stock_days: float = 7.0
    target_cover_days: float = 14.0
    history_weeks: int = 26
    moving_average_window: int = 4
    smoothing_alpha: float = 0.3
    forecast_horizon_weeks: int = 1
    velocity_weeks: int = 4
    tier_weights: Dict[str, float] = field(default_factory=lambda: {'A': 1.5, 'B': 1.0, 'C': 0.7})
    job_max_attempts: int = 3
    job_backoff_seconds: float = 5.0

    def __post_init__(self):
        if self.history_weeks < MIN_HISTORY_WEEKS:
            raise ValueError(f"HISTORY_WEEKS must be at least {MIN_HISTORY_WEEKS}")
        if self.forecast_horizon_weeks < 1:
            raise ValueError("FORECAST_HORIZON_WEEKS must be at least 1")
        if self.moving_average_window < 1:
            raise ValueError("MOVING_AVERAGE_WINDOW must be at least 1")
        if not 0 < self.smoothing_alpha <= 1:
            raise ValueError("SMOOTHING_ALPHA must be in (0, 1]")
        if self.velocity_weeks < 1:
            raise ValueError("VELOCITY_WEEKS must be at least 1")
        if self.job_max_attempts < 1:
            raise ValueError("JOB_MAX_ATTEMPTS must be at least 1")
        if self.job_backoff_seconds < 0:
            raise ValueError("JOB_BACKOFF_SECONDS must not be negative")
        if self.safety_stock_days < 0 or self.target_cover_days < 0:
            raise ValueError("SAFETY_STOCK_DAYS and TARGET_COVER_DAYS must not be negative")
        if not (self.tier_weights['A'] > self.tier_weights['B'] > self.tier_weights['C'] > 0):
            raise ValueError("Tier weights must satisfy A > B > C > 0")

    def tier_weight(self, tier: str) -> float:
        return self.tier_weights.get(tier, self.tier_weights['C'])

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'IntelligencePolicy':
        """
        Build a policy from a Flask config (or any mapping).

        Missing keys fall back to the dataclass defaults.
        """
        def get(key):
            cast, default = POLICY_SETTINGS[key]
            return cast(config.get(key, default))

        return cls(
            safety_stock_days=get('SAFETY_STOCK_DAYS'),
            target_cover_days=get('TARGET_COVER_DAYS'),
            history_weeks=get('HISTORY_WEEKS'),
            moving_average_window=get('MOVING_AVERAGE_WINDOW'),
            smoothing_alpha=get('SMOOTHING_ALPHA'),
            forecast_horizon_weeks=get('FORECAST_HORIZON_WEEKS'),
            velocity_weeks=get('VELOCITY_WEEKS'),
            tier_weights={
                'A': get('TIER_WEIGHT_A'),
                'B': get('TIER_WEIGHT_B'),
                'C': get('TIER_WEIGHT_C'),
            },
            job_max_attempts=get('JOB_MAX_ATTEMPTS'),
            job_backoff_seconds=get('JOB_BACKOFF_SECONDS'),
        )
