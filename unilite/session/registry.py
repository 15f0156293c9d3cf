import datetime
import logging
import secrets
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

from unilite.utils import mask_session
from unilite.vars import SESSION_REGISTRY, SESSION_TTL_SECONDS
from .session import Session, utcnow

logger = logging.getLogger("uvicorn.error")


class SessionRegistryBase(ABC):
    @abstractmethod
    def create(self) -> str:
        pass

    @abstractmethod
    def get(self, session_id: Optional[str]) -> Session | None:
        pass

    @abstractmethod
    def invalidate(self, session_id: Optional[str]) -> None:
        pass


def session_registry(name: str = SESSION_REGISTRY) -> SessionRegistryBase:
    if name == "InMemorySessionRegistry":
        return InMemorySessionRegistry()
    cls = globals().get(name)
    if isinstance(cls, type) and issubclass(cls, SessionRegistryBase):
        return cls()
    raise ValueError(f"Unknown session registry type: {name}")


class InMemorySessionRegistry(SessionRegistryBase):
    """
    Process-lifetime session store.

    Expired records are evicted lazily on lookup and swept whenever a new
    session is created; an expired identifier behaves like an unknown one.
    """

    def __init__(
        self,
        ttl_seconds: int = SESSION_TTL_SECONDS,
        clock: Callable[[], datetime.datetime] = utcnow,
    ):
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        self._ttl = datetime.timedelta(seconds=ttl_seconds)
        self._clock = clock

    def create(self) -> str:
        self.sweep()
        session_id = secrets.token_hex(16)
        session = Session.new(session_id, self._ttl, now=self._clock())
        with self._lock:
            self._sessions[session_id] = session
        logger.info(
            mask_session(
                f"[Session] Created session {session_id}, expires {session.expires_at.isoformat()}",
                session_id,
            )
        )
        return session_id

    def get(self, session_id: Optional[str]) -> Session | None:
        if not session_id:
            return None
        now = self._clock()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if session.is_expired(now):
                del self._sessions[session_id]
                logger.info(
                    mask_session(f"[Session] Evicted expired session {session_id}", session_id)
                )
                return None
            session.touch(now)
            return session

    def invalidate(self, session_id: Optional[str]) -> None:
        if not session_id:
            return
        with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info(mask_session(f"[Session] Invalidated session {session_id}", session_id))

    def sweep(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if s.is_expired(now)]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info(f"[Session] Swept {len(expired)} expired session(s)")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions
