from typing import Protocol


class SpamPolicyPort(Protocol):
    """금칙어 정책 계약"""

    def is_blocked(self, text: str) -> bool:
        ...
