import re
from dataclasses import dataclass, field
from typing import Any, Mapping

# 제어문자와 구분자 (이름/메일 필드에서 제거)
_FIELD_STRIP = re.compile(r"[\x00-\x1f:<>&%,;]+")

_MAIL_PATTERN = re.compile(
    r"^[a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z]{2,}$",
    re.IGNORECASE,
)


def clean_user_field(value: Any) -> str:
    return _FIELD_STRIP.sub("", str(value or "")).strip()


def is_valid_mail(mail: str) -> bool:
    return bool(mail) and bool(_MAIL_PATTERN.match(mail))


@dataclass(frozen=True)
class NewUser:
    """createUser 요청 구조체"""
    user: str = ""
    password: str = ""
    name: str = ""
    mail: str = ""
    groups: tuple[str, ...] = field(default_factory=tuple)
    notify: bool = False

    @classmethod
    def from_mapping(cls, fields: Mapping[str, Any] | None) -> "NewUser":
        if not isinstance(fields, Mapping):
            return cls()
        groups = fields.get("groups") or ()
        if isinstance(groups, str):
            groups = [groups]
        return cls(
            user=str(fields.get("user") or ""),
            password=str(fields.get("password") or ""),
            name=str(fields.get("name") or ""),
            mail=str(fields.get("mail") or ""),
            groups=tuple(str(g) for g in groups),
            notify=bool(fields.get("notify", False)),
        )
