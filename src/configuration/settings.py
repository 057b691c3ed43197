import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _load_env() -> None:
    app_env = os.getenv("APP_ENV", "local")
    # 프로젝트 루트 디렉토리 찾기 (src/configuration/settings.py -> ../../)
    project_root = Path(__file__).parent.parent.parent
    env_file = project_root / f".env.{app_env}"
    load_dotenv(env_file)


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _csv(name: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in os.getenv(name, "").split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    app_env: str
    server_name: str
    data_dir: str
    wiki_title: str
    start_page: str
    wiki_base_url: str
    recent: int  # 리비전 목록 한 페이지 크기
    lock_time: int  # 잠금 유지 시간(초)
    use_acl: bool
    superuser: str
    remote_enabled: bool
    remote_users: tuple[str, ...]
    use_heading: bool
    ref_check: bool
    use_wordblock: bool
    media_extensions: tuple[str, ...]  # 비어 있으면 기본 허용 목록
    client_ip: str
    template_yaml_path: str
    users_yaml_path: str
    wordblock_path: str
    password_webhook_url: str
    remote_user: str
    remote_password: str
    session_ttl_minutes: int


def build_settings() -> Settings:
    _load_env()

    required_vars = ("APP_ENV", "SERVER_NAME", "WIKI_DATA_DIR")
    missing = [k for k in required_vars if not os.getenv(k)]
    if missing:
        raise RuntimeError(f"필수 환경 변수 누락: {', '.join(missing)}")

    project_root = Path(__file__).parent.parent.parent
    config_dir = project_root / "config"

    return Settings(
        app_env=os.environ["APP_ENV"],
        server_name=os.environ["SERVER_NAME"],
        data_dir=os.environ["WIKI_DATA_DIR"],
        wiki_title=os.getenv("WIKI_TITLE", "Wiki"),
        start_page=os.getenv("WIKI_START_PAGE", "start"),
        wiki_base_url=os.getenv("WIKI_BASE_URL", ""),
        recent=int(os.getenv("WIKI_RECENT", "20")),
        lock_time=int(os.getenv("WIKI_LOCK_TIME", "900")),
        use_acl=_flag("WIKI_USE_ACL", True),
        superuser=os.getenv("WIKI_SUPERUSER", "@admin"),
        remote_enabled=_flag("WIKI_REMOTE_ENABLED", True),
        remote_users=_csv("WIKI_REMOTE_USERS"),
        use_heading=_flag("WIKI_USE_HEADING", True),
        ref_check=_flag("WIKI_REF_CHECK", True),
        use_wordblock=_flag("WIKI_USE_WORDBLOCK", True),
        media_extensions=_csv("WIKI_MEDIA_EXTENSIONS"),
        client_ip=os.getenv("WIKI_CLIENT_IP", "127.0.0.1"),
        template_yaml_path=os.getenv("TEMPLATE_YAML_PATH", str(config_dir / "wiki_templates.yaml")),
        users_yaml_path=os.getenv("USERS_YAML_PATH", str(config_dir / "users.yaml")),
        wordblock_path=os.getenv("WORDBLOCK_PATH", str(config_dir / "wordblock.conf")),
        password_webhook_url=os.getenv("PASSWORD_WEBHOOK_URL", ""),
        remote_user=os.getenv("REMOTE_USER", ""),
        remote_password=os.getenv("REMOTE_PASSWORD", ""),
        session_ttl_minutes=int(os.getenv("SESSION_TTL_MINUTES", "30")),
    )
