from typing import Protocol

from src.domain.wiki import ChangeKind, RevisionInfo


class ChangelogPort(Protocol):
    """변경 이력 계약. 최신 항목이 먼저 옵니다."""

    def revisions(
        self,
        identifier: str,
        skip: int,
        limit: int,
        kind: ChangeKind = ChangeKind.PAGE,
    ) -> list[int]:
        """현재 상태 이전의 리비전 스탬프 목록 (현재 상태는 포함하지 않음)"""
        ...

    def revision_info(
        self,
        identifier: str,
        stamp: int,
        kind: ChangeKind = ChangeKind.PAGE,
    ) -> RevisionInfo | None:
        ...

    def recent_since(self, timestamp: int, kind: ChangeKind = ChangeKind.PAGE) -> list[RevisionInfo]:
        """timestamp 이후의 변경 (ID 별 최신 1건)"""
        ...

    def append(self, entry: RevisionInfo, kind: ChangeKind = ChangeKind.PAGE) -> None:
        ...
