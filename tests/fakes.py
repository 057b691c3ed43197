"""포트 계약을 메모리에서 흉내 내는 테스트용 구현"""
from pathlib import Path

from src.domain.access import CallerIdentity, PermissionLevel
from src.domain.identifiers import acl_scopes
from src.domain.media import AttachmentDeleteOutcome, MediaSaveFailure
from src.domain.wiki import ChangeKind, ChangeType, PageLink, RevisionInfo

ALICE = CallerIdentity(user="alice", groups=("user",), remote_addr="10.0.0.1", session_id="s1")
BOB = CallerIdentity(user="bob", groups=("user",), remote_addr="10.0.0.2", session_id="s2")
ADMIN = CallerIdentity(user="root", groups=("admin",), remote_addr="10.0.0.9", session_id="s9")
ANONYMOUS = CallerIdentity(remote_addr="10.0.0.3", session_id="anon")


class FakeAuthBackend:
    """scope → level 규칙. 사용자별 규칙이 그룹 규칙보다 우선합니다."""

    name = "fake"

    def __init__(self, default=PermissionLevel.DELETE, rules=None, users=None, capabilities=("addUser", "delUser")):
        self.default = default
        self.rules: dict[tuple[str, str], PermissionLevel] = dict(rules or {})
        self.users: dict[str, dict] = dict(users or {})
        self.capabilities = set(capabilities)
        self.created: list[tuple] = []
        self.deleted: list[list[str]] = []
        self.checked: list[tuple] = []

    def permission_level(self, identifier, user, groups):
        self.checked.append((identifier, user, tuple(groups)))
        subjects = [user] + [f"@{g}" for g in groups]
        for scope in acl_scopes(identifier):
            levels = [self.rules[(scope, s)] for s in subjects if (scope, s) in self.rules]
            if levels:
                return max(levels)
        return self.default

    def is_administrator(self, user, groups):
        return "admin" in groups

    def supports(self, capability):
        return capability in self.capabilities

    def clean_user(self, user):
        return (user or "").strip().lower()

    def check_credentials(self, user, password):
        record = self.users.get(user)
        return bool(record) and record.get("password") == password

    def create_user(self, user, password, name, mail, groups):
        self.created.append((user, password, name, mail, groups))
        return True

    def delete_users(self, names):
        self.deleted.append(list(names))
        return True

    def user_groups(self, user):
        record = self.users.get(user)
        if record is None:
            return None
        return list(record.get("groups", []))


class FakeChangelog:
    def __init__(self):
        self.entries: dict[ChangeKind, list[RevisionInfo]] = {ChangeKind.PAGE: [], ChangeKind.MEDIA: []}

    def _for(self, identifier, kind):
        return sorted(
            (e for e in self.entries[kind] if e.id == identifier),
            key=lambda e: e.date,
            reverse=True,
        )

    def revisions(self, identifier, skip, limit, kind=ChangeKind.PAGE):
        stamps = [e.date for e in self._for(identifier, kind)][1:]
        return stamps[skip:skip + limit]

    def revision_info(self, identifier, stamp, kind=ChangeKind.PAGE):
        for entry in self._for(identifier, kind):
            if entry.date == stamp:
                return entry
        return None

    def recent_since(self, timestamp, kind=ChangeKind.PAGE):
        seen = set()
        result = []
        for entry in sorted(self.entries[kind], key=lambda e: e.date, reverse=True):
            if entry.date < timestamp or entry.id in seen:
                continue
            seen.add(entry.id)
            result.append(entry)
        return result

    def append(self, entry, kind=ChangeKind.PAGE):
        self.entries[kind].append(entry)


class FakePageStore:
    """{page_id: {revision: text}} 현재 리비전은 가장 큰 타임스탬프"""

    def __init__(self, changelog=None, clock_start=1_700_000_000):
        self.revisions: dict[str, dict[int, str]] = {}
        self.changelog = changelog
        self._clock = clock_start
        self.writes: list[tuple] = []
        self.fail_write = False

    def seed(self, page_id, text, stamp, user="alice", ip="10.0.0.1", summary=""):
        self.revisions.setdefault(page_id, {})[stamp] = text
        if self.changelog is not None:
            self.changelog.append(RevisionInfo(
                date=stamp, ip=ip, type=ChangeType.EDIT, id=page_id, user=user, sum=summary,
            ))

    def _current(self, page_id):
        revs = self.revisions.get(page_id)
        if not revs:
            return None
        stamp = max(revs)
        if revs[stamp] == "":
            return None
        return stamp

    def read_text(self, page_id, revision=None):
        if revision is None:
            revision = self._current(page_id)
            if revision is None:
                return None
        return self.revisions.get(page_id, {}).get(revision)

    def write_text(self, page_id, text, summary, minor, author):
        if self.fail_write:
            raise OSError("disk full")
        self._clock += 1
        self.writes.append((page_id, text, summary, minor, author))
        self.revisions.setdefault(page_id, {})[self._clock] = text
        if self.changelog is not None:
            self.changelog.append(RevisionInfo(
                date=self._clock, ip=author.remote_addr,
                type=ChangeType.DELETE if not text else ChangeType.EDIT,
                id=page_id, user=author.user, sum=summary,
            ))

    def exists(self, page_id):
        return self._current(page_id) is not None

    def modification_time(self, page_id, revision=None):
        if revision is None:
            return self._current(page_id)
        if revision in self.revisions.get(page_id, {}):
            return revision
        return None

    def size(self, page_id):
        text = self.read_text(page_id)
        return None if text is None else len(text.encode("utf-8"))

    def list_pages(self, namespace=""):
        prefix = f"{namespace}:" if namespace else ""
        return sorted(p for p in self.revisions if p.startswith(prefix) and self.exists(p))


class FakeLockStore:
    def __init__(self):
        self.owners: dict[str, str] = {}
        self.events: list[tuple[str, str]] = []

    def is_locked(self, page_id, caller):
        owner = self.owners.get(page_id)
        return bool(owner) and owner != caller.lock_owner

    def acquire(self, page_id, caller):
        self.events.append(("acquire", page_id))
        self.owners[page_id] = caller.lock_owner

    def release(self, page_id, caller):
        self.events.append(("release", page_id))
        if self.owners.get(page_id) != caller.lock_owner:
            return False
        del self.owners[page_id]
        return True


class FakeIndex:
    def __init__(self, pages=(), hits=None, backlinks=None, media_refs=None):
        self.pages = list(pages)
        self.hits = dict(hits or {})
        self.links = dict(backlinks or {})
        self.media_refs = dict(media_refs or {})
        self.indexed: list[str] = []

    def ensure_indexed(self, page_id):
        self.indexed.append(page_id)

    def all_pages(self):
        return list(self.pages)

    def search(self, query):
        return dict(self.hits)

    def backlinks(self, page_id):
        return list(self.links.get(page_id, []))

    def media_references(self, media_id):
        return list(self.media_refs.get(media_id, []))


class FakeSpamPolicy:
    def __init__(self, blocked_words=()):
        self.blocked_words = list(blocked_words)

    def is_blocked(self, text):
        return any(word in text for word in self.blocked_words)


class FakeTemplateRepo:
    def __init__(self, templates=None, messages=None):
        self.templates = dict(templates or {})
        self.messages = dict(messages or {"created": "created", "deleted": "removed"})

    def get_page_template(self, namespace):
        return self.templates.get(namespace)

    def get_message(self, key):
        return self.messages.get(key, key)

    def reload(self):
        pass


class FakeMarkupRenderer:
    def render_html(self, text):
        return f"<p>{text}</p>"

    def extract_links(self, text):
        return [
            PageLink(type="local", page=word[2:-2], href=f"http://wiki/doku.php?id={word[2:-2]}")
            for word in text.split() if word.startswith("[[") and word.endswith("]]")
        ]

    def extract_media(self, text):
        return []

    def first_heading(self, text):
        for line in text.splitlines():
            if line.startswith("# "):
                return line[2:].strip()
        return None


class FakeMediaStore:
    def __init__(self):
        self.files: dict[str, tuple[bytes, int]] = {}
        self.saved: list[tuple] = []
        self.save_result = None
        self.delete_outcome = AttachmentDeleteOutcome.DELETED_OK

    def exists(self, media_id):
        return media_id in self.files

    def read_bytes(self, media_id):
        return self.files[media_id][0]

    def size(self, media_id):
        entry = self.files.get(media_id)
        return None if entry is None else len(entry[0])

    def modification_time(self, media_id):
        entry = self.files.get(media_id)
        return None if entry is None else entry[1]

    def list_media(self, namespace=""):
        prefix = f"{namespace}:" if namespace else ""
        return sorted(m for m in self.files if m.startswith(prefix))

    def save(self, temp_file: Path, media_id, overwrite, level, author):
        self.saved.append((temp_file, temp_file.read_bytes(), media_id, overwrite, level, author))
        if isinstance(self.save_result, MediaSaveFailure):
            return self.save_result
        self.files[media_id] = (temp_file.read_bytes(), 1_700_000_000)
        return media_id

    def delete(self, media_id, level, author):
        return self.delete_outcome


class FakeNotifier:
    def __init__(self, result=True):
        self.result = result
        self.sent: list[tuple] = []

    def send_password(self, user, name, mail, password):
        self.sent.append((user, name, mail, password))
        return self.result
