from src.application.services.access_gate import AccessGate
from src.application.services.identifier_resolver import IdentifierResolver
from src.domain.access import CallerIdentity


class AclCheckUseCase:
    """페이지 권한 수준 조회 (기본: 현재 호출자)"""

    def __init__(self, resolver: IdentifierResolver, access_gate: AccessGate):
        self._resolver = resolver
        self._gate = access_gate

    def execute(
        self,
        caller: CallerIdentity,
        page_id: str,
        user: str | None = None,
        groups: list[str] | None = None,
    ) -> int:
        page_id = self._resolver.resolve(page_id)
        if user is None:
            return int(self._gate.level(caller, page_id))
        return int(self._gate.check_for(page_id, user, groups))
