import hashlib
import logging
import re
from pathlib import Path
from typing import Any, Mapping

from src.application.ports.changelog_port import ChangelogPort
from src.application.ports.media_store_port import MediaStorePort
from src.application.services.access_gate import AccessGate
from src.domain.access import CallerIdentity, PermissionLevel
from src.domain.errors import AccessDenied, DeniedReason, FailureKind, OperationFailed
from src.domain.identifiers import clean_id, get_ns, relative_depth
from src.domain.media import AttachmentDeleteOutcome, AttachmentInfo, MediaItem, MediaSaveFailure
from src.domain.wiki import ChangeKind, ListOptions

logger = logging.getLogger(__name__)

_IMAGE_EXTENSIONS = frozenset({"gif", "jpg", "jpeg", "png", "svg", "webp"})


class AttachmentsUseCase:
    """첨부(미디어) 파일 조회/업로드/삭제"""

    def __init__(
        self,
        access_gate: AccessGate,
        media_store: MediaStorePort,
        changelog: ChangelogPort,
        tmp_dir: str | Path,
    ):
        self._gate = access_gate
        self._media = media_store
        self._changelog = changelog
        self._tmp_dir = Path(tmp_dir)

    def get_attachment(self, caller: CallerIdentity, media_id: str) -> bytes:
        """
        Raises:
            AccessDenied: 네임스페이스 읽기 권한 없음
            OperationFailed: 파일 없음
        """
        media_id = clean_id(media_id)
        if self._gate.media_level(caller, media_id) < PermissionLevel.READ:
            raise AccessDenied(DeniedReason.READ_MEDIA)
        if not self._media.exists(media_id):
            raise OperationFailed(FailureKind.FILE_NOT_FOUND)
        return self._media.read_bytes(media_id)

    def get_attachment_info(self, caller: CallerIdentity, media_id: str) -> AttachmentInfo:
        """파일 정보. 권한이 없으면 0 으로 채워진 정보를 반환합니다."""
        media_id = clean_id(media_id)
        last_modified, size = 0, 0
        if self._gate.media_level(caller, media_id) >= PermissionLevel.READ:
            if self._media.exists(media_id):
                last_modified = self._media.modification_time(media_id) or 0
                size = self._media.size(media_id) or 0
            else:
                # 삭제된 파일이면 마지막 변경 이력 시각
                revisions = self._changelog.revisions(media_id, 0, 1, ChangeKind.MEDIA)
                if revisions:
                    last_modified = revisions[0]
        return AttachmentInfo(last_modified=last_modified, size=size)

    def list_attachments(
        self,
        caller: CallerIdentity,
        namespace: str,
        options: Mapping[str, Any] | None = None,
    ) -> list[MediaItem]:
        namespace = clean_id(namespace)
        opts = ListOptions.from_mapping(options)
        if self._gate.level(caller, f"{namespace}:*") < PermissionLevel.READ:
            raise AccessDenied(DeniedReason.LIST_MEDIA)

        pattern = re.compile(opts.pattern) if opts.pattern else None
        items: list[MediaItem] = []
        for media_id in self._media.list_media(namespace):
            if opts.depth and relative_depth(media_id, namespace) > opts.depth:
                continue
            if pattern and not pattern.search(media_id):
                continue
            perms = self._gate.media_level(caller, media_id)
            if perms < PermissionLevel.READ:
                continue
            items.append(MediaItem(
                id=media_id,
                size=self._media.size(media_id) or 0,
                last_modified=self._media.modification_time(media_id) or 0,
                perms=int(perms),
                isimg=media_id.rsplit(".", 1)[-1] in _IMAGE_EXTENSIONS,
                writable=perms >= PermissionLevel.DELETE,
                hash=hashlib.md5(self._media.read_bytes(media_id)).hexdigest() if opts.hash else "",
            ))
        logger.info("첨부 목록: ns=%s, %d건", namespace or "(root)", len(items))
        return items

    def put_attachment(
        self,
        caller: CallerIdentity,
        media_id: str,
        data: bytes,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        """
        파일을 업로드합니다.

        Args:
            media_id: 미디어 ID
            data: 파일 내용
            params: {'ow': 덮어쓰기 허용 여부}

        Returns:
            저장된 미디어 ID
        """
        media_id = clean_id(media_id)
        if not media_id:
            raise OperationFailed(FailureKind.FILENAME_MISSING)
        level = self._gate.media_level(caller, media_id)
        overwrite = bool((params or {}).get("ow", False))

        self._tmp_dir.mkdir(parents=True, exist_ok=True)
        staged = self._tmp_dir / hashlib.md5(f"{media_id}{caller.remote_addr}".encode("utf-8")).hexdigest()
        staged.unlink(missing_ok=True)
        staged.write_bytes(data or b"")

        try:
            result = self._media.save(staged, media_id, overwrite, level, caller)
        finally:
            staged.unlink(missing_ok=True)

        if isinstance(result, MediaSaveFailure):
            logger.info("업로드 실패: id=%s, %s (%d)", media_id, result.message, result.code)
            raise OperationFailed(FailureKind.UPLOAD_FAILED, result.message, -result.code)
        logger.info("✅ 업로드 완료: %s", result)
        return result

    def delete_attachment(self, caller: CallerIdentity, media_id: str) -> int:
        """
        파일을 삭제합니다. 성공하면 0

        Raises:
            AccessDenied: 삭제 권한 없음
            OperationFailed: 참조 중이거나 삭제 실패
        """
        media_id = clean_id(media_id)
        level = self._gate.media_level(caller, media_id)
        outcome = self._media.delete(media_id, level, caller)
        logger.info("첨부 삭제: id=%s, ns=%s, 결과=%s", media_id, get_ns(media_id), outcome.value)

        if outcome is AttachmentDeleteOutcome.DELETED_OK:
            return 0
        if outcome is AttachmentDeleteOutcome.NOT_AUTHORIZED:
            raise AccessDenied(DeniedReason.DELETE_MEDIA)
        if outcome is AttachmentDeleteOutcome.IN_USE:
            raise OperationFailed(FailureKind.FILE_IN_USE)
        raise OperationFailed(FailureKind.DELETE_FAILED)
