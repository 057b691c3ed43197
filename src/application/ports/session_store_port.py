from typing import Protocol

from src.domain.access import CallerIdentity


class SessionStorePort(Protocol):
    """로그인된 호출자 세션 저장소 계약"""

    def save(self, caller: CallerIdentity) -> None:
        """caller.session_id 를 키로 저장합니다."""
        ...

    def get(self, session_id: str) -> CallerIdentity | None:
        """세션을 조회합니다. 만료된 세션은 None을 반환합니다."""
        ...

    def delete(self, session_id: str) -> None:
        ...

    def cleanup_expired(self) -> int:
        """만료된 세션을 정리합니다. 삭제된 세션 수를 반환합니다."""
        ...
