from pathlib import Path
from typing import Protocol

from src.domain.access import CallerIdentity, PermissionLevel
from src.domain.media import AttachmentDeleteOutcome, MediaSaveFailure


class MediaStorePort(Protocol):
    """첨부 파일 저장소 계약"""

    def exists(self, media_id: str) -> bool:
        ...

    def read_bytes(self, media_id: str) -> bytes:
        ...

    def size(self, media_id: str) -> int | None:
        ...

    def modification_time(self, media_id: str) -> int | None:
        ...

    def list_media(self, namespace: str = "") -> list[str]:
        ...

    def save(
        self,
        temp_file: Path,
        media_id: str,
        overwrite: bool,
        level: PermissionLevel,
        author: CallerIdentity,
    ) -> str | MediaSaveFailure:
        """성공하면 저장된 미디어 ID, 실패하면 MediaSaveFailure"""
        ...

    def delete(
        self,
        media_id: str,
        level: PermissionLevel,
        author: CallerIdentity,
    ) -> AttachmentDeleteOutcome:
        ...
