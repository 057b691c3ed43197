import pytest

from src.configuration.settings import build_settings


@pytest.fixture
def env(monkeypatch, tmp_path):
    monkeypatch.setenv("APP_ENV", "unittest")
    monkeypatch.setenv("SERVER_NAME", "wiki")
    monkeypatch.setenv("WIKI_DATA_DIR", str(tmp_path))
    for name in ("WIKI_USE_ACL", "WIKI_REMOTE_USERS", "WIKI_MEDIA_EXTENSIONS", "WIKI_RECENT", "WIKI_TITLE"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(env, tmp_path):
    settings = build_settings()

    assert settings.data_dir == str(tmp_path)
    assert settings.wiki_title == "Wiki"
    assert settings.recent == 20
    assert settings.use_acl is True
    assert settings.remote_users == ()
    assert settings.template_yaml_path.endswith("wiki_templates.yaml")


def test_flags_and_lists(env):
    env.setenv("WIKI_USE_ACL", "off")
    env.setenv("WIKI_REMOTE_USERS", "alice, @editors,,")
    env.setenv("WIKI_MEDIA_EXTENSIONS", "png,pdf")
    env.setenv("WIKI_RECENT", "5")

    settings = build_settings()

    assert settings.use_acl is False
    assert settings.remote_users == ("alice", "@editors")
    assert settings.media_extensions == ("png", "pdf")
    assert settings.recent == 5


def test_missing_required_variables(env):
    env.delenv("WIKI_DATA_DIR")

    with pytest.raises(RuntimeError, match="WIKI_DATA_DIR"):
        build_settings()
