import logging
from typing import Any

from src.application.ports.session_store_port import SessionStorePort
from src.application.services.method_registry import MethodDescriptor, MethodRegistry
from src.domain.access import CallerIdentity
from src.domain.errors import AccessDenied, DeniedReason

logger = logging.getLogger(__name__)


class RemoteApi:
    """메서드 레지스트리 기반 디스패처

    비공개 메서드는 인증된 호출자만 호출할 수 있습니다. remote_users 가 설정된 경우
    해당 사용자/그룹('@그룹')에 속해야 합니다.
    """

    def __init__(
        self,
        registry: MethodRegistry,
        session_store: SessionStorePort,
        remote_enabled: bool = True,
        remote_users: tuple[str, ...] = (),
        client_ip: str = "127.0.0.1",
    ):
        self.registry = registry
        self._sessions = session_store
        self._remote_enabled = remote_enabled
        self._remote_users = remote_users
        self._client_ip = client_ip

    def caller_for(self, session_id: str) -> CallerIdentity:
        """세션에 로그인된 호출자, 없으면 익명 호출자"""
        caller = self._sessions.get(session_id)
        if caller is not None:
            return caller
        return CallerIdentity(remote_addr=self._client_ip, session_id=session_id)

    def authorize(self, name: str, caller: CallerIdentity) -> MethodDescriptor:
        """메서드를 찾고 호출 권한을 확인합니다. 인자 바인딩보다 먼저 수행됩니다."""
        descriptor = self.registry.get(name)
        self._ensure_access(descriptor, caller)
        return descriptor

    def invoke(self, descriptor: MethodDescriptor, args: list[Any], caller: CallerIdentity) -> Any:
        logger.info("메서드 실행: %s (user=%s, 인자 %d개)", descriptor.name, caller.user or "-", len(args))
        return descriptor.handler(caller, *args)

    def call(self, name: str, args: list[Any], caller: CallerIdentity) -> Any:
        return self.invoke(self.authorize(name, caller), args, caller)

    def _ensure_access(self, descriptor: MethodDescriptor, caller: CallerIdentity) -> None:
        if not self._remote_enabled:
            raise AccessDenied(DeniedReason.REMOTE_DISABLED)
        if descriptor.public:
            return
        if not caller.is_authenticated:
            logger.info("미인증 호출 거부: %s", descriptor.name)
            raise AccessDenied(DeniedReason.NOT_AUTHORIZED, method=descriptor.name)
        if self._remote_users and not caller.is_member(self._remote_users):
            logger.info("원격 호출 허용 목록 외 사용자: %s (%s)", caller.user, descriptor.name)
            raise AccessDenied(DeniedReason.NOT_AUTHORIZED, method=descriptor.name)
