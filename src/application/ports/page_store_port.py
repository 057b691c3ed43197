from typing import Protocol

from src.domain.access import CallerIdentity


class PageStorePort(Protocol):
    """페이지 본문 저장소 계약. revision 이 None 이면 현재 상태"""

    def read_text(self, page_id: str, revision: int | None = None) -> str | None:
        ...

    def write_text(
        self,
        page_id: str,
        text: str,
        summary: str,
        minor: bool,
        author: CallerIdentity,
    ) -> None:
        """본문을 저장하고 변경 이력을 남깁니다. 빈 본문은 페이지 삭제입니다."""
        ...

    def exists(self, page_id: str) -> bool:
        ...

    def modification_time(self, page_id: str, revision: int | None = None) -> int | None:
        ...

    def size(self, page_id: str) -> int | None:
        ...

    def list_pages(self, namespace: str = "") -> list[str]:
        """네임스페이스 하위의 모든 페이지 ID (재귀)"""
        ...
