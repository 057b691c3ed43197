import logging

from src.application.ports.changelog_port import ChangelogPort
from src.application.ports.page_store_port import PageStorePort
from src.application.services.access_gate import AccessGate
from src.application.services.identifier_resolver import IdentifierResolver
from src.domain.access import CallerIdentity, PermissionLevel
from src.domain.errors import DeniedReason, FailureKind, OperationFailed
from src.domain.wiki import ChangeType, PageVersion, RevisionInfo

logger = logging.getLogger(__name__)


class PageVersionsUseCase:
    """
    페이지 리비전 목록 (최신순, 최대 page_size 건).

    변경 이력에는 현재 상태 이전의 리비전만 있으므로, skip 이 0 이면 현재 상태를
    맨 앞에 붙이고 개수가 넘치면 가장 오래된 항목을 버립니다.
    본문 파일이 없는 리비전은 건너뛰므로 page_size 보다 적게 반환될 수 있습니다.
    """

    def __init__(
        self,
        resolver: IdentifierResolver,
        access_gate: AccessGate,
        page_store: PageStorePort,
        changelog: ChangelogPort,
        page_size: int,
    ):
        self._resolver = resolver
        self._gate = access_gate
        self._pages = page_store
        self._changelog = changelog
        self._page_size = page_size

    def execute(self, caller: CallerIdentity, page_id: str, skip: int = 0) -> list[PageVersion]:
        """
        Args:
            page_id: 페이지 ID
            skip: 0 = 현재 버전부터, 1 = 첫 번째 이전 버전부터, 2 = 두 번째 이전 버전부터 ...

        Returns:
            PageVersion 목록
        """
        page_id = self._resolver.resolve(page_id)
        self._gate.require(caller, page_id, PermissionLevel.READ, DeniedReason.READ_PAGE)
        if not page_id:
            raise OperationFailed(FailureKind.EMPTY_PAGE_ID)

        try:
            skip = max(int(skip or 0), 0)
        except (TypeError, ValueError) as e:
            raise OperationFailed(FailureKind.INVALID_ARGUMENTS, f"Skip must be an integer: {skip!r}") from e
        first_rev = max(skip - 1, 0)

        revisions: list[int | None] = list(
            self._changelog.revisions(page_id, first_rev, self._page_size)
        )
        if skip == 0:
            revisions.insert(0, None)
            if len(revisions) > self._page_size:
                revisions.pop()

        versions: list[PageVersion] = []
        for rev in revisions:
            mtime = self._pages.modification_time(page_id, rev)
            if not mtime:
                # 본문이 사라진 리비전은 건너뜀
                continue
            info = self._changelog.revision_info(page_id, rev or mtime)
            if info is None and rev is None:
                info = RevisionInfo(date=mtime, ip="", type=ChangeType.EDIT, id=page_id)
            if info is None:
                continue
            versions.append(PageVersion(
                user=info.user,
                ip=info.ip,
                type=info.type,
                sum=info.sum,
                modified=info.date,
                version=info.date,
                author=info.author,
            ))

        logger.info("리비전 조회: id=%s, skip=%d, %d건", page_id, skip, len(versions))
        return versions
