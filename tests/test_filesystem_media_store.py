import pytest

from src.adapters.outbound.filesystem_changelog import FilesystemChangelog
from src.adapters.outbound.filesystem_media_store import FilesystemMediaStore
from src.adapters.outbound.wiki_paths import WikiPaths
from src.application.services.access_gate import AccessGate
from src.application.use_cases.attachments import AttachmentsUseCase
from src.domain.access import PermissionLevel
from src.domain.errors import OperationFailed
from src.domain.media import AttachmentDeleteOutcome, MediaSaveFailure
from src.domain.wiki import ChangeKind, ChangeType

from fakes import ALICE, FakeAuthBackend, FakeIndex


@pytest.fixture
def paths(tmp_path):
    wiki_paths = WikiPaths(tmp_path / "data")
    wiki_paths.ensure_dirs()
    return wiki_paths


@pytest.fixture
def changelog(paths):
    return FilesystemChangelog(paths)


@pytest.fixture
def index():
    return FakeIndex()


@pytest.fixture
def store(paths, changelog, index):
    return FilesystemMediaStore(paths, changelog, index)


@pytest.fixture
def upload(tmp_path):
    def _write(content: bytes):
        staged = tmp_path / "staged"
        staged.write_bytes(content)
        return staged
    return _write


def test_save_new_file(store, changelog, upload):
    result = store.save(upload(b"pdfdata"), "docs:manual.pdf", False, PermissionLevel.UPLOAD, ALICE)

    assert result == "docs:manual.pdf"
    assert store.read_bytes("docs:manual.pdf") == b"pdfdata"
    assert store.size("docs:manual.pdf") == 7
    assert store.list_media("docs") == ["docs:manual.pdf"]
    entry = changelog.recent_since(0, ChangeKind.MEDIA)[0]
    assert (entry.type, entry.user, entry.size_change) == (ChangeType.CREATE, "alice", 7)


def test_save_requires_upload_permission(store, upload):
    result = store.save(upload(b"x"), "docs:a.pdf", False, PermissionLevel.EDIT, ALICE)

    assert isinstance(result, MediaSaveFailure)
    assert result.code == -1


def test_save_rejects_forbidden_extension(store, upload):
    result = store.save(upload(b"#!/bin/sh"), "docs:run.sh", False, PermissionLevel.DELETE, ALICE)

    assert isinstance(result, MediaSaveFailure)
    assert "extension" in result.message


def test_existing_file_needs_overwrite_flag(store, paths, upload):
    store.save(upload(b"v1"), "docs:a.txt", False, PermissionLevel.UPLOAD, ALICE)

    refused = store.save(upload(b"v2"), "docs:a.txt", False, PermissionLevel.UPLOAD, ALICE)
    assert refused == MediaSaveFailure("File already exists. Nothing done.", 0)

    assert store.save(upload(b"v2"), "docs:a.txt", True, PermissionLevel.UPLOAD, ALICE) == "docs:a.txt"
    assert store.read_bytes("docs:a.txt") == b"v2"
    assert [p.read_bytes() for p in (paths.media_attic / "docs").iterdir()] == [b"v1"]


def test_save_rejects_embedded_script(store, upload):
    result = store.save(upload(b"<svg><script>alert(1)</script></svg>"), "pics:x.svg", False, PermissionLevel.UPLOAD, ALICE)

    assert isinstance(result, MediaSaveFailure)
    assert not store.exists("pics:x.svg")


def test_delete_outcomes(store, index, upload):
    store.save(upload(b"img"), "pics:cat.png", False, PermissionLevel.UPLOAD, ALICE)

    assert store.delete("pics:cat.png", PermissionLevel.UPLOAD, ALICE) is AttachmentDeleteOutcome.NOT_AUTHORIZED

    index.media_refs["pics:cat.png"] = ["start"]
    assert store.delete("pics:cat.png", PermissionLevel.DELETE, ALICE) is AttachmentDeleteOutcome.IN_USE

    index.media_refs.clear()
    assert store.delete("pics:cat.png", PermissionLevel.DELETE, ALICE) is AttachmentDeleteOutcome.DELETED_OK
    assert not store.exists("pics:cat.png")
    assert store.list_media("pics") == []

    assert store.delete("pics:cat.png", PermissionLevel.DELETE, ALICE) is AttachmentDeleteOutcome.OTHER_FAILURE


def test_reference_check_can_be_disabled(paths, changelog, upload):
    index = FakeIndex(media_refs={"pics:cat.png": ["start"]})
    store = FilesystemMediaStore(paths, changelog, index, ref_check=False)
    store.save(upload(b"img"), "pics:cat.png", False, PermissionLevel.UPLOAD, ALICE)

    assert store.delete("pics:cat.png", PermissionLevel.DELETE, ALICE) is AttachmentDeleteOutcome.DELETED_OK


def test_delete_flags_decoding():
    assert AttachmentDeleteOutcome.from_flags(1 | 8) is AttachmentDeleteOutcome.DELETED_OK
    assert AttachmentDeleteOutcome.from_flags(2) is AttachmentDeleteOutcome.NOT_AUTHORIZED
    assert AttachmentDeleteOutcome.from_flags(4) is AttachmentDeleteOutcome.IN_USE
    assert AttachmentDeleteOutcome.from_flags(0) is AttachmentDeleteOutcome.OTHER_FAILURE


def test_quick_overwrites_keep_every_old_revision(store, paths, changelog, upload):
    for content in (b"v1", b"v2", b"v3"):
        store.save(upload(content), "docs:a.txt", True, PermissionLevel.UPLOAD, ALICE)

    attic = sorted((paths.media_attic / "docs").iterdir(), key=lambda p: p.name)
    assert [p.read_bytes() for p in attic] == [b"v1", b"v2"]
    stamps = [e.date for e in changelog.recent_since(0, ChangeKind.MEDIA)]
    assert store.modification_time("docs:a.txt") == stamps[0]
    assert store.read_bytes("docs:a.txt") == b"v3"


def test_deleting_a_gone_file_twice_fails_the_same_way(store, changelog, upload, tmp_path):
    use_case = AttachmentsUseCase(AccessGate(FakeAuthBackend()), store, changelog, tmp_path / "tmp")
    store.save(upload(b"img"), "pics:cat.png", False, PermissionLevel.UPLOAD, ALICE)
    assert use_case.delete_attachment(ALICE, "pics:cat.png") == 0

    codes = []
    for _ in range(2):
        with pytest.raises(OperationFailed) as exc_info:
            use_case.delete_attachment(ALICE, "pics:cat.png")
        codes.append(exc_info.value.code)

    assert codes == [233, 233]
