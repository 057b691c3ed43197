import logging
import os
import threading
import time

from src.adapters.outbound.wiki_paths import WikiPaths
from src.application.ports.changelog_port import ChangelogPort
from src.domain.access import CallerIdentity
from src.domain.wiki import ChangeKind, ChangeType, RevisionInfo

logger = logging.getLogger(__name__)


class FilesystemPageStore:
    """
    파일 시스템 기반 페이지 저장소.

    현재 본문은 pages/ 에, 저장 시점의 리비전 사본은 attic/ 에 둡니다.
    리비전 타임스탬프는 본문 파일의 mtime 과 같습니다.
    """

    def __init__(self, paths: WikiPaths, changelog: ChangelogPort):
        self._paths = paths
        self._changelog = changelog
        self._lock = threading.Lock()

    def read_text(self, page_id: str, revision: int | None = None) -> str | None:
        path = self._paths.page_file(page_id)
        if revision is not None and self.modification_time(page_id) != revision:
            path = self._paths.page_file(page_id, revision)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write_text(
        self,
        page_id: str,
        text: str,
        summary: str,
        minor: bool,
        author: CallerIdentity,
    ) -> None:
        path = self._paths.page_file(page_id)
        with self._lock:
            old_mtime = self.modification_time(page_id)
            old_size = path.stat().st_size if old_mtime else 0
            if old_mtime:
                self._save_old_revision(page_id, old_mtime)

            stamp = int(time.time())
            if old_mtime and stamp <= old_mtime:
                stamp = old_mtime + 1

            if not text:
                path.unlink(missing_ok=True)
                change_type = ChangeType.DELETE
                new_size = 0
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(text, encoding="utf-8")
                os.utime(path, (stamp, stamp))
                self._save_old_revision(page_id, stamp)
                new_size = path.stat().st_size
                if not old_mtime:
                    change_type = ChangeType.CREATE
                elif minor and author.is_authenticated:
                    change_type = ChangeType.MINOR_EDIT
                else:
                    change_type = ChangeType.EDIT

            self._changelog.append(
                RevisionInfo(
                    date=stamp,
                    ip=author.remote_addr,
                    type=change_type,
                    id=page_id,
                    user=author.user,
                    sum=summary,
                    size_change=new_size - old_size,
                ),
                ChangeKind.PAGE,
            )
        logger.info("페이지 기록: id=%s, type=%s, rev=%d", page_id, change_type, stamp)

    def _save_old_revision(self, page_id: str, revision: int) -> None:
        """현재 본문을 attic 에 복사합니다. 이미 있으면 건너뜁니다."""
        target = self._paths.page_file(page_id, revision)
        if target.exists():
            return
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self._paths.page_file(page_id).read_bytes())

    def exists(self, page_id: str) -> bool:
        return self._paths.page_file(page_id).is_file()

    def modification_time(self, page_id: str, revision: int | None = None) -> int | None:
        current = self._paths.page_file(page_id)
        current_mtime = int(current.stat().st_mtime) if current.is_file() else None
        if revision is None or revision == current_mtime:
            return current_mtime
        if self._paths.page_file(page_id, revision).is_file():
            return revision
        return None

    def size(self, page_id: str) -> int | None:
        path = self._paths.page_file(page_id)
        if not path.is_file():
            return None
        return path.stat().st_size

    def list_pages(self, namespace: str = "") -> list[str]:
        base = self._paths.namespace_dir(self._paths.pages, namespace)
        if not base.is_dir():
            return []
        return sorted(self._paths.page_id_for(path) for path in base.rglob("*.txt") if path.is_file())
