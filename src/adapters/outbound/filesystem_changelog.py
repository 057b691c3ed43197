import logging
import threading
from pathlib import Path

from src.adapters.outbound.wiki_paths import WikiPaths
from src.domain.wiki import ChangeKind, RevisionInfo

logger = logging.getLogger(__name__)

_FIELD_COUNT = 8


def parse_line(line: str) -> RevisionInfo | None:
    """탭 구분 변경 이력 한 줄: date ip type id user sum extra sizechange"""
    fields = line.rstrip("\n").split("\t")
    if len(fields) < 4 or not fields[0].isdigit():
        return None
    fields += [""] * (_FIELD_COUNT - len(fields))
    size_change = None
    if fields[7].lstrip("-").isdigit():
        size_change = int(fields[7])
    return RevisionInfo(
        date=int(fields[0]),
        ip=fields[1],
        type=fields[2],
        id=fields[3],
        user=fields[4],
        sum=fields[5],
        extra=fields[6],
        size_change=size_change,
    )


def format_line(entry: RevisionInfo) -> str:
    size_change = "" if entry.size_change is None else str(entry.size_change)
    fields = [
        str(entry.date), entry.ip, entry.type, entry.id, entry.user,
        entry.sum.replace("\t", " ").replace("\n", " "), entry.extra, size_change,
    ]
    return "\t".join(fields) + "\n"


class FilesystemChangelog:
    """ID 별 .changes 파일과 전체 변경 로그에 이력을 기록합니다."""

    def __init__(self, paths: WikiPaths):
        self._paths = paths
        self._lock = threading.Lock()

    def _file_for(self, identifier: str, kind: ChangeKind) -> Path:
        if kind is ChangeKind.MEDIA:
            return self._paths.media_changes(identifier)
        return self._paths.page_changes(identifier)

    def _global_file(self, kind: ChangeKind) -> Path:
        if kind is ChangeKind.MEDIA:
            return self._paths.global_media_changes
        return self._paths.global_page_changes

    @staticmethod
    def _read(path: Path) -> list[RevisionInfo]:
        """파일의 모든 항목 (최신 항목이 먼저)"""
        if not path.exists():
            return []
        entries: list[RevisionInfo] = []
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                entry = parse_line(line)
                if entry is None:
                    if line.strip():
                        logger.debug("잘못된 변경 이력 줄 무시: %s: %r", path, line)
                    continue
                entries.append(entry)
        entries.reverse()
        return entries

    def revisions(
        self,
        identifier: str,
        skip: int,
        limit: int,
        kind: ChangeKind = ChangeKind.PAGE,
    ) -> list[int]:
        entries = self._read(self._file_for(identifier, kind))
        # 가장 최근 항목은 현재 상태
        stamps = [entry.date for entry in entries[1:]]
        skip = max(skip, 0)
        return stamps[skip:skip + limit]

    def revision_info(
        self,
        identifier: str,
        stamp: int,
        kind: ChangeKind = ChangeKind.PAGE,
    ) -> RevisionInfo | None:
        for entry in self._read(self._file_for(identifier, kind)):
            if entry.date == stamp:
                return entry
        return None

    def recent_since(self, timestamp: int, kind: ChangeKind = ChangeKind.PAGE) -> list[RevisionInfo]:
        seen: set[str] = set()
        recent: list[RevisionInfo] = []
        for entry in self._read(self._global_file(kind)):
            if entry.date < timestamp:
                break
            if entry.id in seen:
                continue
            seen.add(entry.id)
            recent.append(entry)
        return recent

    def append(self, entry: RevisionInfo, kind: ChangeKind = ChangeKind.PAGE) -> None:
        line = format_line(entry)
        with self._lock:
            for path in (self._file_for(entry.id, kind), self._global_file(kind)):
                path.parent.mkdir(parents=True, exist_ok=True)
                with open(path, "a", encoding="utf-8") as f:
                    f.write(line)
        logger.debug("변경 이력 기록: %s %s %s", kind.value, entry.type, entry.id)
