import logging

from src.application.ports.changelog_port import ChangelogPort
from src.application.ports.indexer_port import PageIndexPort
from src.application.ports.markup_renderer_port import MarkupRendererPort
from src.application.ports.page_store_port import PageStorePort
from src.application.services.access_gate import AccessGate
from src.application.services.identifier_resolver import IdentifierResolver
from src.application.services.template_renderer import TemplateRenderer
from src.domain.access import CallerIdentity, PermissionLevel
from src.domain.errors import DeniedReason, FailureKind, OperationFailed
from src.domain.wiki import PageInfo, PageLink

logger = logging.getLogger(__name__)


def normalize_revision(revision: int | str | None) -> int | None:
    """'' / 0 / None 은 현재 상태를 뜻합니다."""
    if revision in (None, ""):
        return None
    try:
        revision = int(revision)
    except (TypeError, ValueError) as e:
        raise OperationFailed(
            FailureKind.INVALID_ARGUMENTS,
            f"Revision must be a timestamp: {revision!r}",
        ) from e
    return revision or None


class ReadPageUseCase:
    """페이지 조회 (원문, HTML, 정보, 링크, 역링크)"""

    def __init__(
        self,
        resolver: IdentifierResolver,
        access_gate: AccessGate,
        page_store: PageStorePort,
        changelog: ChangelogPort,
        page_index: PageIndexPort,
        markup_renderer: MarkupRendererPort,
        template_renderer: TemplateRenderer,
    ):
        self._resolver = resolver
        self._gate = access_gate
        self._pages = page_store
        self._changelog = changelog
        self._index = page_index
        self._markup = markup_renderer
        self._templates = template_renderer

    def raw_page(self, caller: CallerIdentity, page_id: str, revision: int | str | None = None) -> str:
        """
        페이지 원문을 반환합니다. 저장된 본문이 없으면 페이지 템플릿을 반환합니다.

        Args:
            page_id: 페이지 ID
            revision: 리비전 타임스탬프. 생략하면 현재 버전
        """
        page_id = self._resolver.resolve(page_id)
        self._gate.require(caller, page_id, PermissionLevel.READ, DeniedReason.READ_FILE)
        text = self._pages.read_text(page_id, normalize_revision(revision))
        if not text:
            logger.info("저장된 본문 없음, 템플릿 사용: id=%s", page_id)
            return self._templates.render_page_template(page_id)
        return text

    def html_page(self, caller: CallerIdentity, page_id: str, revision: int | str | None = None) -> str:
        page_id = self._resolver.resolve(page_id)
        self._gate.require(caller, page_id, PermissionLevel.READ, DeniedReason.READ_PAGE)
        text = self._pages.read_text(page_id, normalize_revision(revision))
        if not text:
            return ""
        return self._markup.render_html(text)

    def page_info(self, caller: CallerIdentity, page_id: str, revision: int | str | None = None) -> PageInfo:
        """
        페이지 기본 정보를 반환합니다.

        Raises:
            OperationFailed: 페이지(또는 해당 리비전)가 없는 경우
        """
        page_id = self._resolver.resolve(page_id)
        self._gate.require(caller, page_id, PermissionLevel.READ, DeniedReason.READ_PAGE)

        rev = normalize_revision(revision)
        mtime = self._pages.modification_time(page_id, rev)
        if not mtime:
            raise OperationFailed(FailureKind.PAGE_NOT_FOUND)

        # 리비전 미지정이면 현재 파일 시각을 사용 (이전 파일의 시각은 신뢰하지 않음)
        if rev is None:
            rev = mtime

        info = self._changelog.revision_info(page_id, rev)
        return PageInfo(
            name=page_id,
            last_modified=rev,
            author=info.author if info else None,
            version=rev,
        )

    def list_links(self, caller: CallerIdentity, page_id: str) -> list[PageLink]:
        page_id = self._resolver.resolve(page_id)
        self._gate.require(caller, page_id, PermissionLevel.READ, DeniedReason.READ_PAGE)
        text = self._pages.read_text(page_id) or ""
        links = self._markup.extract_links(text)
        logger.info("링크 추출: id=%s, %d건", page_id, len(links))
        return links

    def list_backlinks(self, caller: CallerIdentity, page_id: str) -> list[str]:
        page_id = self._resolver.resolve(page_id)
        return [
            source for source in self._index.backlinks(page_id)
            if self._gate.check(caller, source, PermissionLevel.READ)
        ]
