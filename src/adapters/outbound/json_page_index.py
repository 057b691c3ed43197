import json
import logging
import re
import threading
from collections import Counter
from pathlib import Path

from src.application.ports.markup_renderer_port import MarkupRendererPort
from src.application.ports.page_store_port import PageStorePort

logger = logging.getLogger(__name__)

_WORD_PATTERN = re.compile(r"\w{2,}")


def tokenize(text: str) -> list[str]:
    return _WORD_PATTERN.findall(text.lower())


class JsonPageIndex:
    """
    JSON 파일 하나에 보관하는 페이지 색인.

    {page_id: {"words": {단어: 빈도}, "links": [페이지 ID], "media": [미디어 ID]}}
    """

    def __init__(
        self,
        index_file: str | Path,
        page_store: PageStorePort,
        markup_renderer: MarkupRendererPort,
    ):
        self._path = Path(index_file)
        self._pages = page_store
        self._markup = markup_renderer
        self._lock = threading.Lock()
        self._entries: dict[str, dict] | None = None

    def _load(self) -> dict[str, dict]:
        if self._entries is None:
            if self._path.exists():
                with open(self._path, "r", encoding="utf-8") as f:
                    self._entries = json.load(f)
                logger.info("페이지 색인 로드: %d건", len(self._entries))
            else:
                self._entries = {}
        return self._entries

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self._entries, f, ensure_ascii=False)
        tmp.replace(self._path)

    def _entry_for(self, text: str) -> dict:
        links = [link.page for link in self._markup.extract_links(text) if link.type == "local"]
        return {
            "words": dict(Counter(tokenize(text))),
            "links": sorted(set(links)),
            "media": sorted(set(self._markup.extract_media(text))),
        }

    def ensure_indexed(self, page_id: str) -> None:
        """현재 본문 기준으로 색인을 갱신합니다. 페이지가 없으면 색인에서 제거합니다."""
        text = self._pages.read_text(page_id)
        with self._lock:
            entries = self._load()
            if text:
                entries[page_id] = self._entry_for(text)
            else:
                entries.pop(page_id, None)
            self._flush()
        logger.debug("색인 갱신: %s", page_id)

    def rebuild(self) -> int:
        """저장소의 모든 페이지를 다시 색인합니다."""
        with self._lock:
            self._entries = {}
            for page_id in self._pages.list_pages():
                text = self._pages.read_text(page_id)
                if text:
                    self._entries[page_id] = self._entry_for(text)
            self._flush()
            count = len(self._entries)
        logger.info("페이지 색인 재구성: %d건", count)
        return count

    def all_pages(self) -> list[str]:
        with self._lock:
            return sorted(self._load())

    def search(self, query: str) -> dict[str, int]:
        """모든 검색어를 포함하는 페이지만 반환합니다 (점수 = 빈도 합)."""
        terms = tokenize(query)
        if not terms:
            return {}
        scores: dict[str, int] = {}
        with self._lock:
            for page_id, entry in self._load().items():
                words = entry.get("words", {})
                if all(term in words for term in terms):
                    scores[page_id] = sum(words[term] for term in terms)
        return dict(sorted(scores.items(), key=lambda item: (-item[1], item[0])))

    def backlinks(self, page_id: str) -> list[str]:
        with self._lock:
            return sorted(
                source for source, entry in self._load().items()
                if page_id in entry.get("links", ()) and source != page_id
            )

    def media_references(self, media_id: str) -> list[str]:
        with self._lock:
            return sorted(
                source for source, entry in self._load().items()
                if media_id in entry.get("media", ())
            )
