import re

# 페이지/미디어 ID 정규화 규칙
_SEPARATOR_CHARS = re.compile(r"[/;]")
_SPECIAL_CHARS = re.compile(r"[\x00-\x1f\"#$%&'*+,<=>?@\[\\\]^`{|}~!()\s]+")
_REPEATED_SEPCHAR = re.compile(r"_{2,}")
_SEPCHAR_AFTER_COLON = re.compile(r":[:._\-]+")
_SEPCHAR_BEFORE_COLON = re.compile(r"[:._\-]+:")


def clean_id(raw: str | None) -> str:
    """호출자가 넘긴 ID를 정규형으로 변환합니다.

    소문자화 후 공백은 '_', '/'와 ';'는 네임스페이스 구분자 ':'로 바꾸고
    허용되지 않는 문자를 제거합니다. 결과가 비어 있을 수 있습니다.
    """
    if not raw:
        return ""
    value = str(raw).strip().lower()
    value = _SEPARATOR_CHARS.sub(":", value)
    value = _SPECIAL_CHARS.sub("_", value)
    value = _REPEATED_SEPCHAR.sub("_", value)
    value = _SEPCHAR_AFTER_COLON.sub(":", value)
    value = _SEPCHAR_BEFORE_COLON.sub(":", value)
    return value.strip(":._-")


def get_ns(identifier: str) -> str:
    """상위 네임스페이스를 반환합니다. 최상위이면 빈 문자열."""
    if ":" not in identifier:
        return ""
    return identifier.rsplit(":", 1)[0]


def no_ns(identifier: str) -> str:
    return identifier.rsplit(":", 1)[-1]


def namespace_scope(identifier: str) -> str:
    """미디어 권한 검사에 쓰는 '<ns>:*' 범위 문자열"""
    return f"{get_ns(identifier)}:*"


def is_namespace_scope(identifier: str) -> bool:
    return identifier == "*" or identifier.endswith(":*")


def acl_scopes(identifier: str) -> list[str]:
    """ACL 규칙 검색 순서 (가장 구체적인 범위부터 '*' 까지)

    예: "a:b:c" -> ["a:b:c", "a:b:*", "a:*", "*"]
    """
    scopes: list[str] = []
    if is_namespace_scope(identifier):
        ns = identifier[:-2] if identifier.endswith(":*") else ""
    else:
        scopes.append(identifier)
        ns = get_ns(identifier)
    while ns:
        scopes.append(f"{ns}:*")
        ns = get_ns(ns)
    scopes.append("*")
    return scopes


def relative_depth(identifier: str, namespace: str) -> int:
    """네임스페이스 기준 깊이. 바로 아래 항목이 1"""
    if namespace and identifier.startswith(namespace + ":"):
        identifier = identifier[len(namespace) + 1:]
    return identifier.count(":") + 1
