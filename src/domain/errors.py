from enum import Enum


class DeniedReason(Enum):
    """권한 부족 사유. (코드, 메시지)"""
    READ_PAGE = (111, "You are not allowed to read this page")
    READ_FILE = (111, "You are not allowed to read this file")
    EDIT_PAGE = (112, "You are not allowed to edit this page")
    ADMIN_ONLY_CREATE = (114, "Only admins are allowed to create users")
    ADMIN_ONLY_DELETE = (114, "Only admins are allowed to delete users")
    BACKEND_CANNOT_ADD_USER = (114, "Authentication backend {backend} can't do addUser")
    READ_MEDIA = (211, "You are not allowed to read this file")
    DELETE_MEDIA = (212, "You don't have permissions to delete files.")
    LIST_MEDIA = (215, "You are not allowed to list media files.")
    REMOTE_DISABLED = (-32604, "server error. remote api disabled.")
    NOT_AUTHORIZED = (-32604, "server error. not authorized to call method {method}")

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message


class FailureKind(Enum):
    """권한과 무관하게 현재 상태로는 처리할 수 없는 요청 유형. (코드, 메시지)"""
    PAGE_NOT_FOUND = (121, "The requested page does not exist")
    EMPTY_PAGE_ID = (131, "Empty page ID")
    EMPTY_NEW_PAGE = (132, "Refusing to write an empty new wiki page")
    PAGE_LOCKED = (133, "The page is currently locked")
    SPAM_DETECTED = (134, "Positive wordblock check")
    FILE_NOT_FOUND = (221, "The requested file does not exist")
    FILENAME_MISSING = (231, "Filename not given.")
    FILE_IN_USE = (232, "File is still referenced")
    DELETE_FAILED = (233, "Could not delete file")
    UPLOAD_FAILED = (0, "Upload failed")
    INVALID_TIMESTAMP = (311, "The provided value is not a valid timestamp")
    NO_CHANGES = (321, "There are no changes in the specified timeframe")
    INVALID_USER = (401, "empty or invalid user")
    INVALID_NAME = (402, "empty or invalid user name")
    INVALID_MAIL = (403, "empty or invalid mail address")
    UNKNOWN_METHOD = (-32601, "Method does not exist")
    INVALID_ARGUMENTS = (-32602, "Invalid method parameters")

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message


class RemoteError(Exception):
    """원격 호출자에게 (code, message) 쌍으로 전달되는 오류의 공통 부모"""

    def __init__(self, message: str, code: int):
        super().__init__(message)
        self.message = message
        self.code = code

    def to_fault(self) -> dict:
        return {"code": self.code, "message": self.message}


class AccessDenied(RemoteError):
    """호출자의 권한 수준이 부족한 경우"""

    def __init__(self, reason: DeniedReason, **details: str):
        super().__init__(reason.message.format(**details), reason.code)
        self.reason = reason


class OperationFailed(RemoteError):
    """형식은 올바르지만 현재 상태로 수행할 수 없는 요청"""

    def __init__(self, kind: FailureKind, message: str | None = None, code: int | None = None):
        super().__init__(
            message if message is not None else kind.message,
            code if code is not None else kind.code,
        )
        self.kind = kind
