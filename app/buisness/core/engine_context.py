"""
Engine context

Explicitly owned state passed to every engine run: the database session, the
policy snapshot, the clock and the system user cache.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from app.config import IntelligencePolicy
from app.buisness.core.week_calendar import utcnow
from app.logger import get_logger

logger = get_logger("inventory_intelligence.domain.core.context")


class SystemUserCache:
    """
    Lazily resolves and memoizes the id of the user that automated writes are
    attributed to. One instance per context, so nothing leaks between hosts
    or requests that build their own context.
    """

    def __init__(self, username: Optional[str] = None):
        self.username = username
        self._user_id = None
        self._lock = threading.Lock()

    def get_id(self, session) -> Optional[int]:
        """
        Return the system user id, querying the database on first use.

        Prefers the configured username, then any active system user, then the
        oldest active ADMIN. Returns None when no candidate exists; a miss is
        not cached so a later seed is picked up.
        """
        if self._user_id is not None:
            return self._user_id
        with self._lock:
            if self._user_id is None:
                self._user_id = self._lookup(session)
                if self._user_id is None:
                    logger.warning("No system user found; automated rows will have no created_by")
        return self._user_id

    def _lookup(self, session):
        from app.data.core.user_info.user import User

        query = session.query(User).filter(User.is_active.is_(True))
        if self.username:
            user = query.filter(User.username == self.username).first()
            if user:
                return user.id
        user = query.filter(User.is_system.is_(True)).order_by(User.id).first()
        if user is None:
            user = query.filter(User.role == 'ADMIN').order_by(User.created_at, User.id).first()
        return user.id if user else None

    def reset(self):
        with self._lock:
            self._user_id = None


@dataclass
class EngineContext:
    """Everything an engine run needs besides its arguments"""

    session: object
    policy: IntelligencePolicy = field(default_factory=IntelligencePolicy)
    clock: Callable[[], datetime] = utcnow
    system_users: SystemUserCache = field(default_factory=SystemUserCache)

    def now(self) -> datetime:
        return self.clock()

    @property
    def system_user_id(self) -> Optional[int]:
        return self.system_users.get_id(self.session)

    @classmethod
    def from_app(cls, app, session=None, clock=None, system_users=None):
        """Build a context from a Flask app's config and the shared db session"""
        from app import db

        return cls(
            session=session if session is not None else db.session,
            policy=IntelligencePolicy.from_config(app.config),
            clock=clock or utcnow,
            system_users=system_users or SystemUserCache(app.config.get('SYSTEM_USERNAME', 'system')),
        )
