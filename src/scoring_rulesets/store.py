"""SessionStore — in-memory registry of active sessions keyed by user id.

Every registry operation (lookup, insert, remove) is atomic under a single
guard lock.  On top of that each user gets a re-entrant lock; the driver
holds it for the whole handling of one message so that two messages from
the same user are never interleaved.  A user lock lives only while some
thread holds or waits on it, so the lock map does not grow with every user
id ever seen.

Sessions are not persisted: a session exists from test start until it is
completed, cancelled or replaced by a new test for the same user.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from scoring_rulesets.evaluator import RuleEvaluator
from scoring_rulesets.models.schema import ScoringTest
from scoring_rulesets.session import DiagnosisSession

logger = logging.getLogger(__name__)


@dataclass
class _UserLock:
    lock: threading.RLock = field(default_factory=threading.RLock)
    # threads currently inside user_lock() for this user
    holders: int = 0


class SessionStore:
    """Thread-safe ``{user_id: DiagnosisSession}`` map with per-user locks."""

    def __init__(self, evaluator: RuleEvaluator | None = None) -> None:
        self._evaluator = evaluator or RuleEvaluator()
        self._guard = threading.Lock()
        self._sessions: dict[str, DiagnosisSession] = {}
        self._user_locks: dict[str, _UserLock] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._sessions)

    def __contains__(self, user_id: object) -> bool:
        with self._guard:
            return user_id in self._sessions

    @contextmanager
    def user_lock(self, user_id: str) -> Iterator[None]:
        """Serialise work on *user_id*'s session.  Re-entrant."""
        with self._guard:
            entry = self._user_locks.setdefault(user_id, _UserLock())
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._user_locks[user_id]

    def start(self, user_id: str, test: ScoringTest) -> DiagnosisSession:
        """Create a session for *user_id*, discarding any previous one."""
        session = DiagnosisSession(test, self._evaluator)
        with self._guard:
            replaced = self._sessions.get(user_id)
            self._sessions[user_id] = session
        if replaced is not None:
            logger.info("Discarded unfinished %s session for user %s", replaced.test.name, user_id)
        logger.info("Started %s session for user %s", test.name, user_id)
        return session

    def get(self, user_id: str) -> DiagnosisSession | None:
        with self._guard:
            return self._sessions.get(user_id)

    def remove(self, user_id: str) -> DiagnosisSession | None:
        """Drop *user_id*'s session and return it (None if there was none)."""
        with self._guard:
            return self._sessions.pop(user_id, None)
