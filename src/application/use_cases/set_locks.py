import logging
from typing import Any, Mapping

from src.application.ports.lock_port import LockPort
from src.application.services.access_gate import AccessGate
from src.application.services.identifier_resolver import IdentifierResolver
from src.domain.access import CallerIdentity, PermissionLevel
from src.domain.wiki import LockRequest, LockSetResult

logger = logging.getLogger(__name__)


class SetLocksUseCase:
    """여러 페이지를 한 번에 잠그거나 해제합니다. 항목별로 결과를 기록하며 중간에 중단하지 않습니다."""

    def __init__(self, resolver: IdentifierResolver, access_gate: AccessGate, lock_store: LockPort):
        self._resolver = resolver
        self._gate = access_gate
        self._locks = lock_store

    def execute(self, caller: CallerIdentity, request: Mapping[str, Any] | LockRequest) -> LockSetResult:
        if not isinstance(request, LockRequest):
            request = LockRequest.from_mapping(request)

        result = LockSetResult()
        for raw_id in request.lock:
            page_id = self._resolver.resolve(raw_id)
            if (
                not self._gate.check(caller, page_id, PermissionLevel.EDIT)
                or self._locks.is_locked(page_id, caller)
            ):
                result.lockfail.append(page_id)
            else:
                self._locks.acquire(page_id, caller)
                result.locked.append(page_id)

        for raw_id in request.unlock:
            page_id = self._resolver.resolve(raw_id)
            if (
                not self._gate.check(caller, page_id, PermissionLevel.EDIT)
                or not self._locks.release(page_id, caller)
            ):
                result.unlockfail.append(page_id)
            else:
                result.unlocked.append(page_id)

        logger.info(
            "잠금 일괄 처리: locked=%d, lockfail=%d, unlocked=%d, unlockfail=%d",
            len(result.locked), len(result.lockfail), len(result.unlocked), len(result.unlockfail),
        )
        return result
