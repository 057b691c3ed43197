import logging
import re

from src.application.ports.changelog_port import ChangelogPort
from src.application.ports.media_store_port import MediaStorePort
from src.application.ports.page_store_port import PageStorePort
from src.application.services.access_gate import AccessGate
from src.domain.access import CallerIdentity, PermissionLevel
from src.domain.errors import FailureKind, OperationFailed
from src.domain.identifiers import namespace_scope
from src.domain.wiki import ChangeKind, RecentChange

logger = logging.getLogger(__name__)

# 초 단위 유닉스 타임스탬프 (10자리)
_TIMESTAMP_PATTERN = re.compile(r"[0-9]{10}")


class RecentChangesUseCase:
    """주어진 시각 이후의 페이지/미디어 변경 목록"""

    def __init__(
        self,
        access_gate: AccessGate,
        changelog: ChangelogPort,
        page_store: PageStorePort,
        media_store: MediaStorePort,
    ):
        self._gate = access_gate
        self._changelog = changelog
        self._pages = page_store
        self._media = media_store

    def pages(self, caller: CallerIdentity, since: int | str) -> list[RecentChange]:
        return self._execute(caller, since, ChangeKind.PAGE)

    def media(self, caller: CallerIdentity, since: int | str) -> list[RecentChange]:
        return self._execute(caller, since, ChangeKind.MEDIA)

    def _execute(self, caller: CallerIdentity, since: int | str, kind: ChangeKind) -> list[RecentChange]:
        """
        Raises:
            OperationFailed: 타임스탬프 형식 오류 또는 변경 내역 없음
        """
        if isinstance(since, bool) or not _TIMESTAMP_PATTERN.fullmatch(str(since)):
            raise OperationFailed(FailureKind.INVALID_TIMESTAMP)

        logger.info("최근 변경 조회: since=%s, kind=%s", since, kind.value)
        changes: list[RecentChange] = []
        for entry in self._changelog.recent_since(int(since), kind):
            perms = self._permission(caller, entry.id, kind)
            if perms < PermissionLevel.READ:
                continue
            changes.append(RecentChange(
                name=entry.id,
                last_modified=entry.date,
                author=entry.user,
                version=entry.date,
                perms=int(perms),
                size=self._size(entry.id, kind),
            ))

        if not changes:
            raise OperationFailed(FailureKind.NO_CHANGES)
        logger.info("✅ 최근 변경 %d건", len(changes))
        return changes

    def _permission(self, caller: CallerIdentity, identifier: str, kind: ChangeKind) -> PermissionLevel:
        if kind is ChangeKind.MEDIA:
            return self._gate.level(caller, namespace_scope(identifier))
        return self._gate.level(caller, identifier)

    def _size(self, identifier: str, kind: ChangeKind) -> int | None:
        """현재 파일 크기. 조회 실패 시 None (보조 정보이므로 오류로 취급하지 않음)"""
        try:
            if kind is ChangeKind.MEDIA:
                return self._media.size(identifier)
            return self._pages.size(identifier)
        except OSError:
            logger.warning("파일 크기 조회 실패: %s", identifier)
            return None
