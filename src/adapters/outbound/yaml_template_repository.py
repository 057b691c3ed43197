import logging
from pathlib import Path

import yaml

from src.domain.identifiers import get_ns

logger = logging.getLogger(__name__)

_DEFAULT_MESSAGES = {
    "created": "created",
    "deleted": "removed",
}


class YamlTemplateRepository:
    """YAML 파일 기반 새 페이지 템플릿/문구 저장소 (mtime 캐시)"""

    def __init__(self, yaml_path: str | Path):
        self._path = Path(yaml_path)
        self._cache: dict | None = None
        self._cache_mtime: float = 0.0

    def _ensure_loaded(self) -> dict:
        """파일이 변경되었으면 다시 로드합니다."""
        try:
            current_mtime = self._path.stat().st_mtime
        except FileNotFoundError:
            raise FileNotFoundError(
                f"템플릿 YAML 파일을 찾을 수 없습니다: {self._path}"
            )

        if self._cache is None or current_mtime > self._cache_mtime:
            logger.info("YAML 템플릿 로드: %s", self._path)
            with open(self._path, "r", encoding="utf-8") as f:
                self._cache = yaml.safe_load(f) or {}
            self._cache_mtime = current_mtime
            logger.info(
                "YAML 템플릿 로드 완료: %d 네임스페이스",
                len(self._cache.get("page_templates") or {}),
            )

        return self._cache

    def get_page_template(self, namespace: str) -> str | None:
        """가장 가까운 상위 네임스페이스의 템플릿. 최상위 기본값은 '' 키"""
        templates = self._ensure_loaded().get("page_templates") or {}
        current = namespace
        while True:
            body = templates.get(current)
            if body is not None:
                return body
            if not current:
                return None
            current = get_ns(current)

    def get_message(self, key: str) -> str:
        messages = self._ensure_loaded().get("messages") or {}
        return str(messages.get(key, _DEFAULT_MESSAGES.get(key, key)))

    def reload(self) -> None:
        """캐시를 강제로 무효화합니다."""
        logger.info("템플릿 캐시 강제 무효화")
        self._cache = None
        self._cache_mtime = 0.0
