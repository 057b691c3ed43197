import logging
from typing import Any, Mapping

from src.application.ports.indexer_port import PageIndexPort
from src.application.ports.lock_port import LockPort
from src.application.ports.page_store_port import PageStorePort
from src.application.ports.spam_policy_port import SpamPolicyPort
from src.application.services.access_gate import AccessGate
from src.application.services.identifier_resolver import IdentifierResolver
from src.application.services.template_renderer import TemplateRenderer
from src.application.services.text_cleaner import clean_text
from src.application.use_cases.read_page import ReadPageUseCase
from src.domain.access import CallerIdentity, PermissionLevel
from src.domain.errors import DeniedReason, FailureKind, OperationFailed
from src.domain.wiki import PutPageParams

logger = logging.getLogger(__name__)


class PutPageUseCase:
    """
    페이지 저장 파이프라인.

    검증 순서: ID → 빈 새 페이지 → 편집 권한 → 잠금 → 금칙어.
    잠금은 저장 직전에 획득하고 저장이 실패해도 반드시 해제합니다.
    """

    def __init__(
        self,
        resolver: IdentifierResolver,
        access_gate: AccessGate,
        page_store: PageStorePort,
        lock_store: LockPort,
        spam_policy: SpamPolicyPort,
        page_index: PageIndexPort,
        template_renderer: TemplateRenderer,
    ):
        self._resolver = resolver
        self._gate = access_gate
        self._pages = page_store
        self._locks = lock_store
        self._spam = spam_policy
        self._index = page_index
        self._renderer = template_renderer

    def execute(
        self,
        caller: CallerIdentity,
        page_id: str,
        text: str,
        params: Mapping[str, Any] | PutPageParams | None = None,
    ) -> bool:
        """
        페이지 본문을 저장합니다.

        Args:
            page_id: 페이지 ID (비어 있으면 시작 페이지)
            text: 새 본문. 기존 페이지에 빈 본문을 쓰면 페이지가 삭제됩니다
            params: {'sum': 편집 요약, 'minor': 사소한 편집 여부}

        Returns:
            True
        """
        if not isinstance(params, PutPageParams):
            params = PutPageParams.from_mapping(params)

        page_id = self._resolver.resolve(page_id)
        text = clean_text(text)
        logger.info("페이지 저장 요청: id=%s, 길이=%d, minor=%s", page_id, len(text), params.minor)

        if not page_id:
            raise OperationFailed(FailureKind.EMPTY_PAGE_ID)

        existed = self._pages.exists(page_id)
        if not existed and not text.strip():
            raise OperationFailed(FailureKind.EMPTY_NEW_PAGE)

        self._gate.require(caller, page_id, PermissionLevel.EDIT, DeniedReason.EDIT_PAGE)

        if self._locks.is_locked(page_id, caller):
            raise OperationFailed(FailureKind.PAGE_LOCKED)

        if self._spam.is_blocked(text):
            logger.warning("금칙어 검출로 저장 거부: id=%s", page_id)
            raise OperationFailed(FailureKind.SPAM_DETECTED)

        summary = self._derive_summary(params.summary, existed, text)

        self._locks.acquire(page_id, caller)
        try:
            self._pages.write_text(page_id, text, summary, params.minor, caller)
        finally:
            self._locks.release(page_id, caller)

        self._index.ensure_indexed(page_id)

        logger.info("✅ 페이지 저장 완료: id=%s, summary=%s", page_id, summary)
        return True

    def _derive_summary(self, summary: str, existed: bool, text: str) -> str:
        if summary:
            return summary
        if not existed:
            return self._renderer.message("created")
        if not text:
            return self._renderer.message("deleted")
        return summary


class AppendPageUseCase:
    """현재 본문 뒤에 텍스트를 덧붙여 저장합니다."""

    def __init__(self, read_page: ReadPageUseCase, put_page: PutPageUseCase):
        self._read_page = read_page
        self._put_page = put_page

    def execute(
        self,
        caller: CallerIdentity,
        page_id: str,
        text: str,
        params: Mapping[str, Any] | None = None,
    ) -> bool | Any:
        current = self._read_page.raw_page(caller, page_id)
        if not isinstance(current, str):
            # 본문이 텍스트가 아니면 저장하지 않고 그대로 돌려줌
            return current
        return self._put_page.execute(caller, page_id, current + (text or ""), params)
