import logging
import threading
from datetime import datetime, timedelta

from src.domain.access import CallerIdentity

logger = logging.getLogger(__name__)

_DEFAULT_TTL_MINUTES = 30


class InMemorySessionStore:
    """In-memory 로그인 세션 저장소 (TTL 기반 자동 만료, 조회 시 갱신)"""

    def __init__(self, ttl_minutes: int = _DEFAULT_TTL_MINUTES):
        self._sessions: dict[str, tuple[CallerIdentity, datetime]] = {}
        self._ttl = timedelta(minutes=ttl_minutes)
        self._lock = threading.Lock()

    def save(self, caller: CallerIdentity) -> None:
        with self._lock:
            self._sessions[caller.session_id] = (caller, datetime.now())
        logger.info("세션 저장: id=%s, user=%s", caller.session_id, caller.user or "-")

    def get(self, session_id: str) -> CallerIdentity | None:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            caller, updated_at = entry
            if self._is_expired(updated_at):
                del self._sessions[session_id]
                logger.info("만료된 세션 삭제: id=%s", session_id)
                return None
            self._sessions[session_id] = (caller, datetime.now())
            return caller

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def cleanup_expired(self) -> int:
        with self._lock:
            expired = [
                sid for sid, (_, updated_at) in self._sessions.items()
                if self._is_expired(updated_at)
            ]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info("만료 세션 정리: %d건 삭제", len(expired))
        return len(expired)

    def _is_expired(self, updated_at: datetime) -> bool:
        return datetime.now() - updated_at > self._ttl
