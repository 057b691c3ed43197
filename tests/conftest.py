import pytest
import yaml

from src.adapters.outbound.yaml_auth_backend import hash_password
from src.configuration.container import build_container_from
from src.configuration.settings import Settings


def make_settings(tmp_path, **overrides) -> Settings:
    config_dir = tmp_path / "config"
    config_dir.mkdir(exist_ok=True)

    templates = config_dir / "wiki_templates.yaml"
    templates.write_text(
        "page_templates:\n"
        "  \"\": \"\"\n"
        "  meeting: \"# {{ PAGE }}\\n\"\n"
        "messages:\n"
        "  created: created\n"
        "  deleted: removed\n",
        encoding="utf-8",
    )

    users = config_dir / "users.yaml"
    users.write_text(yaml.safe_dump({
        "default_groups": ["user"],
        "users": {
            "alice": {
                "password_hash": hash_password("wonderland", "s1"),
                "name": "Alice",
                "mail": "alice@example.com",
                "groups": ["user"],
            },
            "root": {
                "password_hash": hash_password("toor", "s2"),
                "name": "Root",
                "mail": "root@example.com",
                "groups": ["admin"],
            },
        },
        "acl": [
            {"scope": "*", "subject": "@ALL", "level": 1},
            {"scope": "*", "subject": "@user", "level": 16},
            {"scope": "secret:*", "subject": "@ALL", "level": 0},
        ],
    }), encoding="utf-8")

    wordblock = config_dir / "wordblock.conf"
    wordblock.write_text("\\bviagra\\b\n", encoding="utf-8")

    values = dict(
        app_env="test",
        server_name="wiki-test",
        data_dir=str(tmp_path / "data"),
        wiki_title="Test Wiki",
        start_page="start",
        wiki_base_url="http://wiki.test",
        recent=20,
        lock_time=900,
        use_acl=True,
        superuser="@admin",
        remote_enabled=True,
        remote_users=(),
        use_heading=True,
        ref_check=True,
        use_wordblock=True,
        media_extensions=(),
        client_ip="127.0.0.1",
        template_yaml_path=str(templates),
        users_yaml_path=str(users),
        wordblock_path=str(wordblock),
        password_webhook_url="",
        remote_user="",
        remote_password="",
        session_ttl_minutes=30,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def wiki_settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def container(wiki_settings):
    return build_container_from(wiki_settings)
