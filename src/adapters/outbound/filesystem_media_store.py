import logging
import os
import shutil
import time
from pathlib import Path

from src.adapters.outbound.wiki_paths import WikiPaths
from src.application.ports.changelog_port import ChangelogPort
from src.application.ports.indexer_port import PageIndexPort
from src.domain.access import CallerIdentity, PermissionLevel
from src.domain.media import (
    MEDIA_DELETED,
    MEDIA_EMPTY_NS,
    MEDIA_INUSE,
    MEDIA_NOT_AUTH,
    AttachmentDeleteOutcome,
    MediaSaveFailure,
)
from src.domain.wiki import ChangeKind, ChangeType, RevisionInfo

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = frozenset({
    "jpg", "jpeg", "gif", "png", "svg", "webp", "ico",
    "pdf", "txt", "csv", "zip", "gz", "tgz", "odt", "ods", "docx", "xlsx", "pptx",
})

# 업로드 내용에 포함되면 거부하는 마크업 (이미지/문서 위장 스크립트)
_XSS_MARKERS = (b"<script", b"<html", b"<body", b"<head", b"javascript:")
_XSS_CHECKED = frozenset({"svg", "txt", "csv"})


class FilesystemMediaStore:
    """
    파일 시스템 기반 미디어 저장소.

    덮어쓰기/삭제 시 이전 파일은 media_attic/ 에 보관하고 미디어 변경 이력에 기록합니다.
    """

    def __init__(
        self,
        paths: WikiPaths,
        changelog: ChangelogPort,
        page_index: PageIndexPort,
        extensions: frozenset[str] = DEFAULT_EXTENSIONS,
        ref_check: bool = True,
    ):
        self._paths = paths
        self._changelog = changelog
        self._index = page_index
        self._extensions = frozenset(ext.lower() for ext in extensions)
        self._ref_check = ref_check

    def exists(self, media_id: str) -> bool:
        return self._paths.media_file(media_id).is_file()

    def read_bytes(self, media_id: str) -> bytes:
        return self._paths.media_file(media_id).read_bytes()

    def size(self, media_id: str) -> int | None:
        path = self._paths.media_file(media_id)
        if not path.is_file():
            return None
        return path.stat().st_size

    def modification_time(self, media_id: str) -> int | None:
        path = self._paths.media_file(media_id)
        if not path.is_file():
            return None
        return int(path.stat().st_mtime)

    def list_media(self, namespace: str = "") -> list[str]:
        base = self._paths.namespace_dir(self._paths.media, namespace)
        if not base.is_dir():
            return []
        return sorted(self._paths.media_id_for(path) for path in base.rglob("*") if path.is_file())

    def save(
        self,
        temp_file: Path,
        media_id: str,
        overwrite: bool,
        level: PermissionLevel,
        author: CallerIdentity,
    ) -> str | MediaSaveFailure:
        if level < PermissionLevel.UPLOAD:
            return MediaSaveFailure("You don't have permissions to upload files.", -1)
        if not temp_file.is_file():
            return MediaSaveFailure("Upload failed. Maybe wrong permissions?", -1)

        extension = media_id.rsplit(".", 1)[-1].lower() if "." in media_id else ""
        if extension not in self._extensions:
            return MediaSaveFailure("Upload denied. This file extension is forbidden!", -1)

        target = self._paths.media_file(media_id)
        existed = target.is_file()
        if existed and not overwrite:
            return MediaSaveFailure("File already exists. Nothing done.", 0)

        if extension in _XSS_CHECKED:
            head = temp_file.read_bytes()[:1024].lower()
            if any(marker in head for marker in _XSS_MARKERS):
                return MediaSaveFailure("The upload was rejected because it contains possibly malicious HTML code.", -1)

        old_size = target.stat().st_size if existed else 0
        stamp = self._next_stamp(target)
        if existed:
            self._save_old_revision(media_id)

        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(temp_file, target)
        os.utime(target, (stamp, stamp))
        self._changelog.append(
            RevisionInfo(
                date=stamp,
                ip=author.remote_addr,
                type=ChangeType.EDIT if existed else ChangeType.CREATE,
                id=media_id,
                user=author.user,
                size_change=target.stat().st_size - old_size,
            ),
            ChangeKind.MEDIA,
        )
        logger.info("미디어 저장: id=%s, overwrite=%s", media_id, existed)
        return media_id

    def delete(
        self,
        media_id: str,
        level: PermissionLevel,
        author: CallerIdentity,
    ) -> AttachmentDeleteOutcome:
        return AttachmentDeleteOutcome.from_flags(self._delete_flags(media_id, level, author))

    def _delete_flags(self, media_id: str, level: PermissionLevel, author: CallerIdentity) -> int:
        if level < PermissionLevel.DELETE:
            return MEDIA_NOT_AUTH
        if self._ref_check and self._index.media_references(media_id):
            logger.info("참조 중인 미디어 삭제 거부: %s", media_id)
            return MEDIA_INUSE

        target = self._paths.media_file(media_id)
        if not target.is_file():
            return 0
        old_size = target.stat().st_size
        stamp = self._next_stamp(target)
        self._save_old_revision(media_id)
        try:
            target.unlink()
        except OSError:
            logger.exception("미디어 파일 삭제 실패: %s", media_id)
            return 0

        self._changelog.append(
            RevisionInfo(
                date=stamp,
                ip=author.remote_addr,
                type=ChangeType.DELETE,
                id=media_id,
                user=author.user,
                size_change=-old_size,
            ),
            ChangeKind.MEDIA,
        )
        flags = MEDIA_DELETED
        if self._sweep_namespace(target.parent):
            flags |= MEDIA_EMPTY_NS
        return flags

    def _next_stamp(self, target: Path) -> int:
        """현재 시각과 기존 파일 mtime + 1 중 큰 값"""
        stamp = int(time.time())
        if target.is_file():
            stamp = max(stamp, int(target.stat().st_mtime) + 1)
        return stamp

    def _save_old_revision(self, media_id: str) -> None:
        current = self._paths.media_file(media_id)
        revision = int(current.stat().st_mtime)
        target = self._paths.media_file(media_id, revision)
        if target.exists():
            return
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(current, target)

    def _sweep_namespace(self, directory: Path) -> bool:
        """비어 있는 상위 네임스페이스 디렉토리를 정리합니다. 하나라도 지웠으면 True"""
        removed = False
        while directory != self._paths.media and not any(directory.iterdir()):
            directory.rmdir()
            removed = True
            directory = directory.parent
        return removed
