import os
import time

import pytest

from src.adapters.outbound.file_lock_store import FileLockStore
from src.adapters.outbound.filesystem_changelog import FilesystemChangelog, format_line, parse_line
from src.adapters.outbound.filesystem_page_store import FilesystemPageStore
from src.adapters.outbound.wiki_paths import WikiPaths
from src.domain.access import CallerIdentity
from src.domain.wiki import ChangeKind, ChangeType, RevisionInfo

from fakes import ALICE, ANONYMOUS, BOB


@pytest.fixture
def paths(tmp_path):
    wiki_paths = WikiPaths(tmp_path / "data")
    wiki_paths.ensure_dirs()
    return wiki_paths


@pytest.fixture
def changelog(paths):
    return FilesystemChangelog(paths)


@pytest.fixture
def store(paths, changelog):
    return FilesystemPageStore(paths, changelog)


def test_paths_layout(paths):
    assert paths.page_file("a:b:c") == paths.pages / "a" / "b" / "c.txt"
    assert paths.page_file("v1.2") == paths.pages / "v1.2.txt"
    assert paths.page_file("a:c", 123) == paths.attic / "a" / "c.123.txt"
    assert paths.media_file("pics:cat.png", 5) == paths.media_attic / "pics" / "cat.5.png"
    assert paths.page_id_for(paths.page_file("a:b:c")) == "a:b:c"
    assert paths.lock_file("x").suffix == ".lock"


def test_changelog_line_format():
    entry = RevisionInfo(
        date=1_700_000_000, ip="10.0.0.1", type=ChangeType.EDIT, id="ns:page",
        user="alice", sum="fix\ttabs", size_change=-4,
    )

    line = format_line(entry)

    assert line == "1700000000\t10.0.0.1\tE\tns:page\talice\tfix tabs\t\t-4\n"
    assert parse_line(line) == RevisionInfo(
        date=1_700_000_000, ip="10.0.0.1", type="E", id="ns:page",
        user="alice", sum="fix tabs", extra="", size_change=-4,
    )
    assert parse_line("garbage") is None


def test_create_edit_delete_cycle(store, changelog, paths):
    store.write_text("ns:page", "one", "created", False, ALICE)
    first = store.modification_time("ns:page")
    store.write_text("ns:page", "two", "", False, ALICE)
    second = store.modification_time("ns:page")

    assert second > first
    assert store.read_text("ns:page") == "two"
    assert store.read_text("ns:page", first) == "one"
    assert store.modification_time("ns:page", first) == first
    assert store.modification_time("ns:page", 42) is None
    assert store.size("ns:page") == 3
    assert changelog.revisions("ns:page", 0, 10) == [first]

    store.write_text("ns:page", "", "removed", False, BOB)

    assert not store.exists("ns:page")
    assert store.read_text("ns:page") is None
    assert store.read_text("ns:page", second) == "two"
    types = [changelog.revision_info("ns:page", stamp).type for stamp in changelog.revisions("ns:page", 0, 10)]
    assert types == [ChangeType.EDIT, ChangeType.CREATE]
    assert paths.global_page_changes.exists()


def test_minor_edit_only_for_registered_users(store, changelog):
    store.write_text("p", "one", "", False, ALICE)
    store.write_text("p", "two", "", True, ANONYMOUS)
    store.write_text("p", "three", "", True, ALICE)

    latest = changelog.recent_since(0)[0]
    older = changelog.revisions("p", 0, 10)

    assert latest.type == ChangeType.MINOR_EDIT
    assert changelog.revision_info("p", older[0]).type == ChangeType.EDIT
    assert changelog.revision_info("p", older[0]).ip == ANONYMOUS.remote_addr


def test_list_pages(store):
    for page_id in ("start", "team:plan", "team:sub:deep"):
        store.write_text(page_id, "x", "", False, ALICE)

    assert store.list_pages() == ["start", "team:plan", "team:sub:deep"]
    assert store.list_pages("team") == ["team:plan", "team:sub:deep"]
    assert store.list_pages("nothing") == []


def test_recent_since_deduplicates(changelog):
    for stamp, page_id in ((100, "a"), (200, "b"), (300, "a")):
        changelog.append(RevisionInfo(date=1_700_000_000 + stamp, ip="ip", type="E", id=page_id))

    recent = changelog.recent_since(1_700_000_150)

    assert [(e.id, e.date) for e in recent] == [("a", 1_700_000_300), ("b", 1_700_000_200)]


def test_media_changelog_is_separate(changelog):
    changelog.append(RevisionInfo(date=1_700_000_000, ip="ip", type="C", id="pics:a.png"), ChangeKind.MEDIA)

    assert changelog.recent_since(0, ChangeKind.PAGE) == []
    assert [e.id for e in changelog.recent_since(0, ChangeKind.MEDIA)] == ["pics:a.png"]


def test_lock_ownership(paths):
    locks = FileLockStore(paths, lock_time=900)

    locks.acquire("page", ALICE)

    assert not locks.is_locked("page", ALICE)
    assert locks.is_locked("page", BOB)
    assert locks.release("page", BOB) is False
    assert locks.release("page", ALICE) is True
    assert not locks.is_locked("page", BOB)


def test_anonymous_lock_owner_is_address(paths):
    locks = FileLockStore(paths)
    same_host = CallerIdentity(remote_addr=ANONYMOUS.remote_addr)

    locks.acquire("page", ANONYMOUS)

    assert paths.lock_file("page").read_text(encoding="utf-8") == ANONYMOUS.remote_addr
    assert not locks.is_locked("page", same_host)


def test_expired_lock_ignored(paths):
    locks = FileLockStore(paths, lock_time=60)
    locks.acquire("page", ALICE)
    old = time.time() - 3600
    os.utime(paths.lock_file("page"), (old, old))

    assert not locks.is_locked("page", BOB)
    assert locks.release("page", ALICE) is False
