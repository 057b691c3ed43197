import logging
import time

from src.adapters.outbound.wiki_paths import WikiPaths
from src.domain.access import CallerIdentity

logger = logging.getLogger(__name__)


class FileLockStore:
    """
    잠금 파일 기반 페이지 편집 잠금.

    locks/<md5(id)>.lock 에 소유자(사용자명 또는 접속 주소)를 기록하며
    파일 mtime 이 lock_time 초보다 오래되면 만료된 것으로 봅니다.
    """

    def __init__(self, paths: WikiPaths, lock_time: int = 900):
        self._paths = paths
        self._lock_time = lock_time

    def _owner(self, page_id: str) -> str | None:
        path = self._paths.lock_file(page_id)
        try:
            if time.time() - path.stat().st_mtime > self._lock_time:
                return None
            return path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None

    def is_locked(self, page_id: str, caller: CallerIdentity) -> bool:
        owner = self._owner(page_id)
        return bool(owner) and owner != caller.lock_owner

    def acquire(self, page_id: str, caller: CallerIdentity) -> None:
        path = self._paths.lock_file(page_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(caller.lock_owner, encoding="utf-8")
        logger.debug("잠금 획득: id=%s, owner=%s", page_id, caller.lock_owner)

    def release(self, page_id: str, caller: CallerIdentity) -> bool:
        path = self._paths.lock_file(page_id)
        if self._owner(page_id) != caller.lock_owner:
            return False
        path.unlink(missing_ok=True)
        logger.debug("잠금 해제: id=%s", page_id)
        return True
