from dataclasses import dataclass
from enum import IntEnum


class PermissionLevel(IntEnum):
    """권한 수준 (전순서). 숫자가 클수록 강한 권한"""
    NONE = 0
    READ = 1
    EDIT = 2
    CREATE = 4
    UPLOAD = 8
    DELETE = 16
    ADMIN = 255


ANONYMOUS_GROUPS: tuple[str, ...] = ("ALL",)


@dataclass(frozen=True)
class CallerIdentity:
    """호출자 정보. 호출마다 명시적으로 전달됩니다."""
    user: str = ""
    groups: tuple[str, ...] = ()
    remote_addr: str = "127.0.0.1"
    session_id: str = ""

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user)

    @property
    def lock_owner(self) -> str:
        """잠금 파일에 기록되는 소유자 (사용자명, 없으면 접속 주소)"""
        return self.user or self.remote_addr

    def effective_groups(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys((*ANONYMOUS_GROUPS, *self.groups)))

    def is_member(self, members: list[str] | tuple[str, ...]) -> bool:
        """사용자명 또는 '@그룹' 목록에 포함되는지 확인합니다."""
        groups = set(self.effective_groups())
        for member in members:
            member = member.strip()
            if not member:
                continue
            if member.startswith("@"):
                if member[1:] in groups:
                    return True
            elif self.user and member == self.user:
                return True
        return False
