import logging
import secrets
from typing import Any, Mapping

from src.application.ports.auth_port import AuthBackendPort
from src.application.ports.password_notifier_port import PasswordNotifierPort
from src.domain.access import CallerIdentity
from src.domain.errors import AccessDenied, DeniedReason, FailureKind, OperationFailed
from src.domain.user import NewUser, clean_user_field, is_valid_mail

logger = logging.getLogger(__name__)


def generate_password() -> str:
    return secrets.token_urlsafe(12)


class CreateUserUseCase:
    """관리자 전용 사용자 생성"""

    def __init__(self, auth_backend: AuthBackendPort, notifier: PasswordNotifierPort):
        self._auth = auth_backend
        self._notifier = notifier

    def execute(self, caller: CallerIdentity, fields: Mapping[str, Any] | NewUser) -> bool:
        """
        사용자를 생성합니다.

        Args:
            fields: {'user', 'password', 'name', 'mail', 'groups', 'notify'}
                password 가 비어 있으면 무작위로 생성합니다.

        Returns:
            생성 성공 여부
        """
        if not self._auth.is_administrator(caller.user, caller.effective_groups()):
            raise AccessDenied(DeniedReason.ADMIN_ONLY_CREATE)
        if not self._auth.supports("addUser"):
            raise AccessDenied(DeniedReason.BACKEND_CANNOT_ADD_USER, backend=self._auth.name)

        if not isinstance(fields, NewUser):
            fields = NewUser.from_mapping(fields)

        user = self._auth.clean_user(fields.user).strip()
        name = clean_user_field(fields.name)
        mail = clean_user_field(fields.mail)

        # 메일 형식 오류는 다른 필드와 관계없이 우선 보고
        if not is_valid_mail(mail):
            raise OperationFailed(FailureKind.INVALID_MAIL)
        if not user:
            raise OperationFailed(FailureKind.INVALID_USER)
        if not name:
            raise OperationFailed(FailureKind.INVALID_NAME)

        password = fields.password or generate_password()
        groups = list(fields.groups) or None

        logger.info("사용자 생성: user=%s, groups=%s", user, groups)
        ok = bool(self._auth.create_user(user, password, name, mail, groups))

        if ok and fields.notify:
            sent = self._notifier.send_password(user, name, mail, password)
            logger.info("비밀번호 통지: user=%s, sent=%s", user, sent)

        return ok


class DeleteUsersUseCase:
    """관리자 전용 사용자 일괄 삭제"""

    def __init__(self, auth_backend: AuthBackendPort):
        self._auth = auth_backend

    def execute(self, caller: CallerIdentity, names: list[str]) -> bool:
        if not self._auth.is_administrator(caller.user, caller.effective_groups()):
            raise AccessDenied(DeniedReason.ADMIN_ONLY_DELETE)
        if isinstance(names, str):
            names = [names]
        logger.info("사용자 삭제: %s", names)
        return bool(self._auth.delete_users(list(names)))
