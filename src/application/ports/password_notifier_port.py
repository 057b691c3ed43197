from typing import Protocol


class PasswordNotifierPort(Protocol):
    """신규 사용자 비밀번호 통지 계약"""

    def send_password(self, user: str, name: str, mail: str, password: str) -> bool:
        ...
