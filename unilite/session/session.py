import asyncio
import datetime
from dataclasses import dataclass, field
from http.cookiejar import CookieJar
from typing import Optional


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass
class Session:
    """
    One client's browsing context against the origin.

    The cookie jar belongs to this session alone; origin clients are bound to
    the jar object itself so every Set-Cookie lands here.
    """

    session_id: str
    created_at: datetime.datetime
    last_used: datetime.datetime
    expires_at: datetime.datetime
    cookies: CookieJar = field(default_factory=CookieJar, repr=False)
    # Serialises origin requests sharing this session's cookie store
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    @classmethod
    def new(
        cls,
        session_id: str,
        ttl: datetime.timedelta,
        now: Optional[datetime.datetime] = None,
    ) -> "Session":
        now = now or utcnow()
        return cls(
            session_id=session_id,
            created_at=now,
            last_used=now,
            expires_at=now + ttl,
        )

    def touch(self, now: Optional[datetime.datetime] = None) -> None:
        self.last_used = now or utcnow()

    def is_expired(self, now: Optional[datetime.datetime] = None) -> bool:
        return (now or utcnow()) >= self.expires_at

    def cookie_names(self) -> list[str]:
        return sorted({cookie.name for cookie in self.cookies})

    def to_dict(self) -> dict:
        return {
            "sessionId": self.session_id,
            "createdAt": self.created_at.isoformat(),
            "lastUsed": self.last_used.isoformat(),
            "expiresAt": self.expires_at.isoformat(),
            "cookieCount": len(self.cookie_names()),
        }
