import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)


class WordblockSpamPolicy:
    """
    금칙어 목록 파일 기반 스팸 정책.

    한 줄에 정규식 하나. '#' 이후는 주석이며 빈 줄은 무시합니다.
    파일이 변경되면 다시 로드합니다.
    """

    def __init__(self, wordblock_path: str | Path, enabled: bool = True):
        self._path = Path(wordblock_path)
        self._enabled = enabled
        self._patterns: list[re.Pattern] = []
        self._mtime: float = 0.0

    def _ensure_loaded(self) -> list[re.Pattern]:
        try:
            current_mtime = self._path.stat().st_mtime
        except FileNotFoundError:
            return []
        if current_mtime > self._mtime:
            patterns: list[re.Pattern] = []
            for line in self._path.read_text(encoding="utf-8").splitlines():
                line = re.sub(r"(?<!\\)#.*$", "", line).strip()
                if not line:
                    continue
                try:
                    patterns.append(re.compile(line, re.IGNORECASE))
                except re.error:
                    logger.warning("잘못된 금칙어 패턴 무시: %s", line)
            self._patterns = patterns
            self._mtime = current_mtime
            logger.info("금칙어 목록 로드: %d개", len(patterns))
        return self._patterns

    def is_blocked(self, text: str) -> bool:
        if not self._enabled:
            return False
        for pattern in self._ensure_loaded():
            if pattern.search(text):
                logger.info("금칙어 일치: %s", pattern.pattern)
                return True
        return False
