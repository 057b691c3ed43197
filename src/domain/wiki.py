from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class ChangeKind(Enum):
    """변경 이력 종류 (페이지 / 미디어)"""
    PAGE = "page"
    MEDIA = "media"


class ChangeType:
    """변경 이력 한 줄의 유형 태그"""
    CREATE = "C"
    EDIT = "E"
    MINOR_EDIT = "e"
    DELETE = "D"
    REVERT = "R"


@dataclass(frozen=True)
class RevisionInfo:
    """변경 이력(changelog) 한 줄"""
    date: int
    ip: str
    type: str
    id: str
    user: str = ""
    sum: str = ""
    extra: str = ""
    size_change: int | None = None

    @property
    def author(self) -> str:
        """등록 사용자가 없으면 편집자의 접속 주소"""
        return self.user or self.ip


@dataclass(frozen=True)
class PageVersion:
    user: str
    ip: str
    type: str
    sum: str
    modified: int
    version: int
    author: str


@dataclass(frozen=True)
class PageInfo:
    name: str
    last_modified: int
    author: str | None
    version: int


@dataclass(frozen=True)
class RecentChange:
    name: str
    last_modified: int
    author: str
    version: int
    perms: int
    size: int | None


@dataclass(frozen=True)
class PageListItem:
    id: str
    perms: int
    size: int | None
    last_modified: int | None


@dataclass(frozen=True)
class NamespacePage:
    id: str
    rev: int
    mtime: int
    size: int
    hash: str = ""


@dataclass(frozen=True)
class SearchHit:
    id: str
    score: int
    rev: int
    mtime: int
    size: int
    snippet: str
    title: str


@dataclass(frozen=True)
class PageLink:
    type: str   # "local" | "extern"
    page: str
    href: str


@dataclass(frozen=True)
class PutPageParams:
    """putPage / appendPage 의 부가 파라미터"""
    summary: str = ""
    minor: bool = False

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any] | None) -> "PutPageParams":
        if not isinstance(params, Mapping):
            return cls()
        return cls(
            summary=str(params.get("sum") or ""),
            minor=bool(params.get("minor", False)),
        )


@dataclass(frozen=True)
class ListOptions:
    """목록 조회 옵션. 알 수 없는 키는 무시합니다.

    depth: 재귀 깊이 (0 이면 무제한)
    pattern: 미디어 ID 필터 정규식
    hash: 내용 md5 포함 여부

    skipacl 키는 받지 않습니다. 원격 목록 조회에는 항상 ACL 이 적용됩니다.
    """
    depth: int = 0
    pattern: str = ""
    hash: bool = False

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> "ListOptions":
        if not isinstance(options, Mapping):
            return cls()
        try:
            depth = int(options.get("depth") or 0)
        except (TypeError, ValueError):
            depth = 0
        return cls(
            depth=max(depth, 0),
            pattern=str(options.get("pattern") or ""),
            hash=bool(options.get("hash", False)),
        )


@dataclass(frozen=True)
class LockRequest:
    lock: tuple[str, ...] = ()
    unlock: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, request: Mapping[str, Any] | None) -> "LockRequest":
        if not isinstance(request, Mapping):
            return cls()
        return cls(
            lock=tuple(request.get("lock") or ()),
            unlock=tuple(request.get("unlock") or ()),
        )


@dataclass
class LockSetResult:
    locked: list[str] = field(default_factory=list)
    lockfail: list[str] = field(default_factory=list)
    unlocked: list[str] = field(default_factory=list)
    unlockfail: list[str] = field(default_factory=list)
