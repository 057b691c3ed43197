import logging

from src.application.ports.auth_port import AuthBackendPort
from src.application.ports.session_store_port import SessionStorePort
from src.domain.access import CallerIdentity

logger = logging.getLogger(__name__)


class SessionUseCase:
    """로그인/로그오프. ACL 을 사용하지 않으면 항상 0 을 반환합니다."""

    def __init__(self, auth_backend: AuthBackendPort, session_store: SessionStorePort, use_acl: bool = True):
        self._auth = auth_backend
        self._sessions = session_store
        self._use_acl = use_acl

    def login(self, caller: CallerIdentity, user: str, password: str) -> int:
        if not self._use_acl:
            return 0
        if not self._auth.check_credentials(user, password):
            logger.info("로그인 실패: user=%s", user)
            return 0

        groups = tuple(self._auth.user_groups(user) or ())
        self._sessions.save(CallerIdentity(
            user=user,
            groups=groups,
            remote_addr=caller.remote_addr,
            session_id=caller.session_id,
        ))
        logger.info("✅ 로그인: user=%s, groups=%s", user, groups)
        return 1

    def logoff(self, caller: CallerIdentity) -> int:
        if not self._use_acl:
            return 0
        self._sessions.delete(caller.session_id)
        logger.info("로그오프: user=%s", caller.user or "-")
        return 1
