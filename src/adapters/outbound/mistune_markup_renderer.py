import logging
import re
from urllib.parse import quote

import mistune
from markupsafe import escape

from src.domain.identifiers import clean_id
from src.domain.wiki import PageLink

logger = logging.getLogger(__name__)

# scheme:// 또는 mailto: 로 시작하면 외부 링크, 나머지는 위키 페이지 ID
_EXTERNAL_PATTERN = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*://|mailto:)")


def is_external(url: str) -> bool:
    return bool(_EXTERNAL_PATTERN.match(url))


def _local_target(url: str) -> str:
    return clean_id(url.split("#", 1)[0].split("?", 1)[0])


class _WikiRenderer(mistune.HTMLRenderer):
    """위키 페이지/미디어 ID 링크를 위키 URL 로 바꾸는 HTML 렌더러"""

    def __init__(self, base_url: str):
        super().__init__(escape=True)
        self._base_url = base_url.rstrip("/")

    def page_url(self, page_id: str) -> str:
        return f"{self._base_url}/doku.php?id={quote(page_id, safe=':')}"

    def media_url(self, media_id: str) -> str:
        return f"{self._base_url}/lib/exe/fetch.php?media={quote(media_id, safe=':')}"

    def link(self, text: str, url: str, title=None) -> str:
        if is_external(url) or url.startswith("#"):
            return super().link(text, url, title)
        href = self.page_url(_local_target(url))
        title_attr = f' title="{escape(title)}"' if title else ""
        return f'<a href="{escape(href)}" class="wikilink"{title_attr}>{text}</a>'

    def image(self, text: str, url: str, title=None) -> str:
        if is_external(url):
            return super().image(text, url, title)
        return super().image(text, self.media_url(_local_target(url)), title)


class MistuneMarkupRenderer:
    """Markdown 위키 본문 처리 (HTML 변환, 링크/미디어/제목 추출)"""

    def __init__(self, base_url: str = ""):
        self._renderer = _WikiRenderer(base_url)
        self._html = mistune.create_markdown(
            renderer=self._renderer,
            plugins=["table", "strikethrough"],
        )
        self._ast = mistune.create_markdown(renderer="ast", plugins=["table", "strikethrough"])

    def render_html(self, text: str) -> str:
        return self._html(text)

    def _walk(self, tokens: list[dict]):
        for token in tokens:
            yield token
            children = token.get("children")
            if isinstance(children, list):
                yield from self._walk(children)

    def extract_links(self, text: str) -> list[PageLink]:
        links: list[PageLink] = []
        for token in self._walk(self._ast(text)):
            if token.get("type") != "link":
                continue
            url = token.get("attrs", {}).get("url", "")
            if not url or url.startswith("#"):
                continue
            if is_external(url):
                links.append(PageLink(type="extern", page=url, href=url))
            else:
                page_id = _local_target(url)
                if page_id:
                    links.append(PageLink(type="local", page=page_id, href=self._renderer.page_url(page_id)))
        return links

    def extract_media(self, text: str) -> list[str]:
        media: list[str] = []
        for token in self._walk(self._ast(text)):
            if token.get("type") != "image":
                continue
            url = token.get("attrs", {}).get("url", "")
            if url and not is_external(url):
                media_id = _local_target(url)
                if media_id:
                    media.append(media_id)
        return media

    def first_heading(self, text: str) -> str | None:
        for token in self._walk(self._ast(text)):
            if token.get("type") == "heading":
                return "".join(
                    child.get("raw", "") for child in self._walk(token.get("children", []))
                    if child.get("type") in ("text", "codespan")
                ).strip() or None
        return None
