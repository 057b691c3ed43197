import logging

from src.application.ports.auth_port import AuthBackendPort
from src.domain.access import CallerIdentity, PermissionLevel
from src.domain.errors import AccessDenied, DeniedReason
from src.domain.identifiers import namespace_scope

logger = logging.getLogger(__name__)


class AccessGate:
    """권한 백엔드에 권한 수준을 묻고 요구 수준과 비교합니다.

    읽기 전용이며 예외를 던지지 않습니다. 권한 부족은 낮은 PermissionLevel 로
    표현되고, 거부 여부는 호출하는 쪽이 결정합니다 (require 참고).
    """

    def __init__(self, auth_backend: AuthBackendPort):
        self._auth = auth_backend

    def level(self, caller: CallerIdentity, identifier: str) -> PermissionLevel:
        return PermissionLevel(
            self._auth.permission_level(identifier, caller.user, caller.effective_groups())
        )

    def media_level(self, caller: CallerIdentity, media_id: str) -> PermissionLevel:
        """미디어는 상위 네임스페이스 범위('<ns>:*')로 검사합니다."""
        return self.level(caller, namespace_scope(media_id))

    def check(self, caller: CallerIdentity, identifier: str, required: PermissionLevel) -> bool:
        return self.level(caller, identifier) >= required

    def check_for(
        self,
        identifier: str,
        user: str,
        groups: list[str] | tuple[str, ...] | None = None,
    ) -> PermissionLevel:
        """임의 사용자에 대한 권한 평가. groups 미지정 시 사용자 저장소에서 조회합니다."""
        if groups is None:
            found = self._auth.user_groups(user)
            groups = found if found is not None else []
            logger.info("사용자 그룹 조회: user=%s, groups=%s", user, groups)
        return PermissionLevel(self._auth.permission_level(identifier, user, tuple(groups)))

    def require(
        self,
        caller: CallerIdentity,
        identifier: str,
        required: PermissionLevel,
        reason: DeniedReason,
    ) -> PermissionLevel:
        """요구 수준 미달이면 AccessDenied 를 발생시키고, 아니면 실제 수준을 반환합니다."""
        level = self.level(caller, identifier)
        if level < required:
            logger.info(
                "권한 부족: id=%s, user=%s, level=%d < %d",
                identifier, caller.user or "-", level, required,
            )
            raise AccessDenied(reason)
        return level
