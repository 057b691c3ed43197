from dataclasses import dataclass
from enum import Enum

# 미디어 삭제 결과 비트 플래그 (저장소 경계에서만 사용)
MEDIA_DELETED = 1
MEDIA_NOT_AUTH = 2
MEDIA_INUSE = 4
MEDIA_EMPTY_NS = 8


class AttachmentDeleteOutcome(Enum):
    DELETED_OK = "deletedOk"
    NOT_AUTHORIZED = "notAuthorized"
    IN_USE = "inUse"
    OTHER_FAILURE = "otherFailure"

    @classmethod
    def from_flags(cls, flags: int) -> "AttachmentDeleteOutcome":
        """비트 플래그를 결과 유형으로 해석합니다. 삭제 성공이 가장 우선합니다."""
        if flags & MEDIA_DELETED:
            return cls.DELETED_OK
        if flags & MEDIA_NOT_AUTH:
            return cls.NOT_AUTHORIZED
        if flags & MEDIA_INUSE:
            return cls.IN_USE
        return cls.OTHER_FAILURE


@dataclass(frozen=True)
class MediaSaveFailure:
    """업로드 실패 상세 (메시지, 코드)"""
    message: str
    code: int


@dataclass(frozen=True)
class AttachmentInfo:
    last_modified: int
    size: int


@dataclass(frozen=True)
class MediaItem:
    id: str
    size: int
    last_modified: int
    perms: int
    isimg: bool
    writable: bool
    hash: str = ""
