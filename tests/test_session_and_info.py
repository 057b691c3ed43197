from src.adapters.outbound.in_memory_session_store import InMemorySessionStore
from src.application.use_cases.session import SessionUseCase
from src.application.use_cases.wiki_info import API_VERSION, WIKI_RPC_VERSION, WikiInfoUseCase
from src.domain.access import CallerIdentity

from fakes import ALICE, ANONYMOUS, FakeAuthBackend


def _auth():
    return FakeAuthBackend(users={"alice": {"password": "pw", "groups": ["user", "editors"]}})


def test_login_stores_authenticated_caller():
    store = InMemorySessionStore()
    use_case = SessionUseCase(_auth(), store)

    assert use_case.login(ANONYMOUS, "alice", "pw") == 1

    caller = store.get(ANONYMOUS.session_id)
    assert caller.user == "alice"
    assert caller.groups == ("user", "editors")
    assert caller.remote_addr == ANONYMOUS.remote_addr


def test_login_failure():
    store = InMemorySessionStore()

    assert SessionUseCase(_auth(), store).login(ANONYMOUS, "alice", "wrong") == 0
    assert store.get(ANONYMOUS.session_id) is None


def test_logoff_drops_session():
    store = InMemorySessionStore()
    store.save(ALICE)

    assert SessionUseCase(_auth(), store).logoff(ALICE) == 1
    assert store.get(ALICE.session_id) is None


def test_acl_disabled_returns_zero():
    use_case = SessionUseCase(_auth(), InMemorySessionStore(), use_acl=False)

    assert use_case.login(ANONYMOUS, "alice", "pw") == 0
    assert use_case.logoff(ALICE) == 0


def test_session_expiry():
    store = InMemorySessionStore(ttl_minutes=-1)
    store.save(CallerIdentity(user="alice", session_id="old"))

    assert store.get("old") is None

    store.save(CallerIdentity(user="alice", session_id="old"))
    assert store.cleanup_expired() == 1


def test_wiki_info():
    info = WikiInfoUseCase(version="1.0", title="Docs")

    assert info.get_version(ANONYMOUS) == "1.0"
    assert info.get_title(ANONYMOUS) == "Docs"
    assert info.get_api_version(ANONYMOUS) == API_VERSION == 11
    assert info.wiki_rpc_version(ANONYMOUS) == WIKI_RPC_VERSION == 2
    assert info.get_time(ANONYMOUS) > 1_600_000_000
