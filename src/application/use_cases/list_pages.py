import hashlib
import logging
import re
from typing import Any, Mapping

from src.application.ports.indexer_port import PageIndexPort
from src.application.ports.markup_renderer_port import MarkupRendererPort
from src.application.ports.page_store_port import PageStorePort
from src.application.services.access_gate import AccessGate
from src.domain.access import CallerIdentity, PermissionLevel
from src.domain.identifiers import clean_id, relative_depth
from src.domain.wiki import ListOptions, NamespacePage, PageListItem, SearchHit

logger = logging.getLogger(__name__)

# 검색 결과 중 스니펫을 만드는 상위 결과 수
SNIPPET_COUNT = 15
_SNIPPET_RADIUS = 50


def build_snippet(text: str, query: str) -> str:
    """첫 번째 검색어 주변 텍스트"""
    terms = [t for t in re.findall(r"\w+", query.lower()) if t]
    lowered = text.lower()
    positions = [lowered.find(t) for t in terms if lowered.find(t) >= 0]
    if not positions:
        return ""
    start = max(min(positions) - _SNIPPET_RADIUS, 0)
    end = min(min(positions) + _SNIPPET_RADIUS, len(text))
    snippet = text[start:end].replace("\n", " ").strip()
    if start > 0:
        snippet = "..." + snippet
    if end < len(text):
        snippet += "..."
    return snippet


class ListPagesUseCase:
    """페이지 목록, 네임스페이스 탐색, 전문 검색"""

    def __init__(
        self,
        access_gate: AccessGate,
        page_store: PageStorePort,
        page_index: PageIndexPort,
        markup_renderer: MarkupRendererPort,
        use_heading: bool = True,
    ):
        self._gate = access_gate
        self._pages = page_store
        self._index = page_index
        self._markup = markup_renderer
        self._use_heading = use_heading

    def list_pages(self, caller: CallerIdentity) -> list[PageListItem]:
        """색인된 페이지 중 읽을 수 있는 페이지 전체"""
        items: list[PageListItem] = []
        for page_id in sorted(self._index.all_pages()):
            if not self._pages.exists(page_id):
                continue
            perms = self._gate.level(caller, page_id)
            if perms < PermissionLevel.READ:
                continue
            items.append(PageListItem(
                id=page_id.strip(),
                perms=int(perms),
                size=self._pages.size(page_id),
                last_modified=self._pages.modification_time(page_id),
            ))
        return items

    def read_namespace(
        self,
        caller: CallerIdentity,
        namespace: str,
        options: Mapping[str, Any] | None = None,
    ) -> list[NamespacePage]:
        """
        네임스페이스 하위 페이지 목록.

        Args:
            namespace: 네임스페이스 (빈 문자열이면 전체)
            options: {'depth': 재귀 깊이(0=무제한), 'hash': md5 포함 여부}
        """
        namespace = clean_id(namespace)
        opts = ListOptions.from_mapping(options)

        pages: list[NamespacePage] = []
        for page_id in self._pages.list_pages(namespace):
            if opts.depth and relative_depth(page_id, namespace) > opts.depth:
                continue
            # 원격 호출에서는 ACL 을 건너뛰지 않음
            if self._gate.level(caller, page_id) < PermissionLevel.READ:
                continue
            mtime = self._pages.modification_time(page_id) or 0
            digest = ""
            if opts.hash:
                digest = hashlib.md5((self._pages.read_text(page_id) or "").encode("utf-8")).hexdigest()
            pages.append(NamespacePage(
                id=page_id,
                rev=mtime,
                mtime=mtime,
                size=self._pages.size(page_id) or 0,
                hash=digest,
            ))
        logger.info("네임스페이스 조회: ns=%s, %d건", namespace or "(root)", len(pages))
        return pages

    def search(self, caller: CallerIdentity, query: str) -> list[SearchHit]:
        hits: list[SearchHit] = []
        for page_id, score in self._index.search(query or "").items():
            if self._gate.level(caller, page_id) < PermissionLevel.READ:
                continue
            mtime = self._pages.modification_time(page_id)
            if not mtime:
                continue
            text = self._pages.read_text(page_id) or ""
            snippet = build_snippet(text, query) if len(hits) < SNIPPET_COUNT else ""
            title = page_id
            if self._use_heading:
                title = self._markup.first_heading(text) or page_id
            hits.append(SearchHit(
                id=page_id,
                score=int(score),
                rev=mtime,
                mtime=mtime,
                size=self._pages.size(page_id) or 0,
                snippet=snippet,
                title=title,
            ))
        logger.info("검색: query=%s, %d건", query, len(hits))
        return hits
