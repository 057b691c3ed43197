import pytest

from src.application.use_cases.user_admin import CreateUserUseCase, DeleteUsersUseCase
from src.domain.errors import AccessDenied, FailureKind, OperationFailed

from fakes import ADMIN, ALICE, FakeAuthBackend, FakeNotifier

VALID = {"user": "Dave", "name": "Dave Doe", "mail": "dave@example.com"}


@pytest.fixture
def auth():
    return FakeAuthBackend()


@pytest.fixture
def notifier():
    return FakeNotifier()


def test_create_user_requires_admin(auth, notifier):
    with pytest.raises(AccessDenied) as exc_info:
        CreateUserUseCase(auth, notifier).execute(ALICE, VALID)

    assert exc_info.value.code == 114
    assert exc_info.value.message == "Only admins are allowed to create users"


def test_backend_without_add_user(notifier):
    auth = FakeAuthBackend(capabilities=())

    with pytest.raises(AccessDenied) as exc_info:
        CreateUserUseCase(auth, notifier).execute(ADMIN, VALID)

    assert exc_info.value.message == "Authentication backend fake can't do addUser"


def test_invalid_mail_reported_first(auth, notifier):
    with pytest.raises(OperationFailed) as exc_info:
        CreateUserUseCase(auth, notifier).execute(ADMIN, {"user": "", "name": "", "mail": "not-a-mail"})

    assert exc_info.value.kind is FailureKind.INVALID_MAIL
    assert exc_info.value.code == 403


@pytest.mark.parametrize(
    ("fields", "code"),
    [
        ({**VALID, "user": "  "}, 401),
        ({**VALID, "name": "<>;"}, 402),
    ],
)
def test_invalid_fields(auth, notifier, fields, code):
    with pytest.raises(OperationFailed) as exc_info:
        CreateUserUseCase(auth, notifier).execute(ADMIN, fields)

    assert exc_info.value.code == code


def test_create_user_generates_password_and_default_groups(auth, notifier):
    assert CreateUserUseCase(auth, notifier).execute(ADMIN, VALID) is True

    user, password, name, mail, groups = auth.created[0]
    assert user == "dave"
    assert len(password) >= 12
    assert name == "Dave Doe"
    assert mail == "dave@example.com"
    assert groups is None
    assert notifier.sent == []


def test_create_user_with_groups_and_notify(auth, notifier):
    fields = {**VALID, "password": "secret", "groups": ["editors"], "notify": True}

    CreateUserUseCase(auth, notifier).execute(ADMIN, fields)

    assert auth.created[0][1] == "secret"
    assert auth.created[0][4] == ["editors"]
    assert notifier.sent == [("dave", "Dave Doe", "dave@example.com", "secret")]


def test_delete_users_requires_admin(auth):
    with pytest.raises(AccessDenied) as exc_info:
        DeleteUsersUseCase(auth).execute(ALICE, ["bob"])

    assert exc_info.value.message == "Only admins are allowed to delete users"


def test_delete_users(auth):
    assert DeleteUsersUseCase(auth).execute(ADMIN, ["bob", "carol"]) is True
    assert DeleteUsersUseCase(auth).execute(ADMIN, "dave") is True

    assert auth.deleted == [["bob", "carol"], ["dave"]]
