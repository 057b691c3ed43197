from typing import Protocol


class PageIndexPort(Protocol):
    """페이지 색인 계약 (전문 검색, 역링크, 미디어 참조)"""

    def ensure_indexed(self, page_id: str) -> None:
        ...

    def all_pages(self) -> list[str]:
        ...

    def search(self, query: str) -> dict[str, int]:
        """{page_id: score} 점수 내림차순"""
        ...

    def backlinks(self, page_id: str) -> list[str]:
        ...

    def media_references(self, media_id: str) -> list[str]:
        ...
