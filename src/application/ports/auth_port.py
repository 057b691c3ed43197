from typing import Protocol

from src.domain.access import PermissionLevel


class AuthBackendPort(Protocol):
    """인증/권한 백엔드 계약"""

    name: str

    def permission_level(self, identifier: str, user: str, groups: tuple[str, ...]) -> PermissionLevel:
        """주어진 사용자/그룹의 ID(또는 '<ns>:*' 범위)에 대한 권한 수준을 반환합니다."""
        ...

    def is_administrator(self, user: str, groups: tuple[str, ...]) -> bool:
        """관리자 역할 여부"""
        ...

    def supports(self, capability: str) -> bool:
        """백엔드 기능 지원 여부 (예: 'addUser', 'delUser')"""
        ...

    def clean_user(self, user: str) -> str:
        """백엔드 규칙에 맞게 사용자명을 정리합니다."""
        ...

    def check_credentials(self, user: str, password: str) -> bool:
        ...

    def create_user(
        self,
        user: str,
        password: str,
        name: str,
        mail: str,
        groups: list[str] | None,
    ) -> bool:
        """groups 가 None 이면 백엔드 기본 그룹을 적용합니다."""
        ...

    def delete_users(self, names: list[str]) -> bool:
        ...

    def user_groups(self, user: str) -> list[str] | None:
        """사용자의 그룹 목록. 사용자가 없으면 None"""
        ...
