from typing import Protocol

from src.domain.wiki import PageLink


class MarkupRendererPort(Protocol):
    """위키 마크업 처리 계약"""

    def render_html(self, text: str) -> str:
        ...

    def extract_links(self, text: str) -> list[PageLink]:
        """본문의 내부(local)/외부(extern) 링크"""
        ...

    def extract_media(self, text: str) -> list[str]:
        """본문이 참조하는 미디어 ID"""
        ...

    def first_heading(self, text: str) -> str | None:
        ...
