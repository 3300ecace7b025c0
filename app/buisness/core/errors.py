"""
Error taxonomy for the intelligence engines

- ValidationError: bad input at the boundary; fails fast with no partial effect
- NotFoundError: a referenced row does not exist
- ComputationError: a strategy cannot run on the given series; callers degrade to naive
- PersistenceError: a row write failed after its retry; batches record it and continue
"""


class IntelligenceError(Exception):
    """Base class for engine errors"""


class ValidationError(IntelligenceError, ValueError):
    """Unknown id, unknown strategy/job name, or invalid parameter"""


class NotFoundError(ValidationError):
    """Referenced variant, location or stock entry does not exist"""


class ComputationError(IntelligenceError):
    """Series too short for the requested strategy"""


class PersistenceError(IntelligenceError):
    """Write conflict that survived a retry"""
