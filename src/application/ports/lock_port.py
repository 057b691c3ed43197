from typing import Protocol

from src.domain.access import CallerIdentity


class LockPort(Protocol):
    """페이지 편집 잠금 계약 (권고 잠금)"""

    def is_locked(self, page_id: str, caller: CallerIdentity) -> bool:
        """caller 가 아닌 다른 사용자가 잠금을 보유 중이면 True"""
        ...

    def acquire(self, page_id: str, caller: CallerIdentity) -> None:
        ...

    def release(self, page_id: str, caller: CallerIdentity) -> bool:
        """caller 가 보유한 잠금을 해제한 경우에만 True"""
        ...
