from dataclasses import dataclass
from functools import lru_cache

from src.adapters.outbound.file_lock_store import FileLockStore
from src.adapters.outbound.filesystem_changelog import FilesystemChangelog
from src.adapters.outbound.filesystem_media_store import DEFAULT_EXTENSIONS, FilesystemMediaStore
from src.adapters.outbound.filesystem_page_store import FilesystemPageStore
from src.adapters.outbound.in_memory_session_store import InMemorySessionStore
from src.adapters.outbound.json_page_index import JsonPageIndex
from src.adapters.outbound.mistune_markup_renderer import MistuneMarkupRenderer
from src.adapters.outbound.webhook_password_notifier import WebhookPasswordNotifier
from src.adapters.outbound.wiki_paths import WikiPaths
from src.adapters.outbound.wordblock_spam_policy import WordblockSpamPolicy
from src.adapters.outbound.yaml_auth_backend import YamlAuthBackend
from src.adapters.outbound.yaml_template_repository import YamlTemplateRepository
from src.application.services.access_gate import AccessGate
from src.application.services.core_methods import build_core_registry
from src.application.services.identifier_resolver import IdentifierResolver
from src.application.services.method_registry import MethodRegistry
from src.application.services.remote_api import RemoteApi
from src.application.services.template_renderer import TemplateRenderer
from src.application.use_cases.acl_check import AclCheckUseCase
from src.application.use_cases.attachments import AttachmentsUseCase
from src.application.use_cases.list_pages import ListPagesUseCase
from src.application.use_cases.page_versions import PageVersionsUseCase
from src.application.use_cases.put_page import AppendPageUseCase, PutPageUseCase
from src.application.use_cases.read_page import ReadPageUseCase
from src.application.use_cases.recent_changes import RecentChangesUseCase
from src.application.use_cases.session import SessionUseCase
from src.application.use_cases.set_locks import SetLocksUseCase
from src.application.use_cases.user_admin import CreateUserUseCase, DeleteUsersUseCase
from src.application.use_cases.wiki_info import WikiInfoUseCase
from src.configuration.settings import Settings, build_settings

WIKI_VERSION = "wiki-mcp-server 0.1.0"


@dataclass(frozen=True)
class Container:
    settings: Settings
    registry: MethodRegistry
    remote_api: RemoteApi
    session_use_case: SessionUseCase
    session_store: InMemorySessionStore


@lru_cache(maxsize=1)
def build_container() -> Container:
    settings = build_settings()
    return build_container_from(settings)


def build_container_from(settings: Settings) -> Container:
    paths = WikiPaths(settings.data_dir)
    paths.ensure_dirs()

    # 저장소 계층
    changelog = FilesystemChangelog(paths)
    page_store = FilesystemPageStore(paths, changelog)
    lock_store = FileLockStore(paths, lock_time=settings.lock_time)
    markup_renderer = MistuneMarkupRenderer(base_url=settings.wiki_base_url)
    page_index = JsonPageIndex(paths.page_index_file, page_store, markup_renderer)
    if not paths.page_index_file.exists():
        page_index.rebuild()
    media_store = FilesystemMediaStore(
        paths,
        changelog,
        page_index,
        extensions=frozenset(settings.media_extensions) or DEFAULT_EXTENSIONS,
        ref_check=settings.ref_check,
    )

    # 인증/정책
    auth_backend = YamlAuthBackend(
        settings.users_yaml_path,
        superuser=settings.superuser,
        use_acl=settings.use_acl,
    )
    spam_policy = WordblockSpamPolicy(settings.wordblock_path, enabled=settings.use_wordblock)
    notifier = WebhookPasswordNotifier(settings.password_webhook_url, wiki_title=settings.wiki_title)
    session_store = InMemorySessionStore(ttl_minutes=settings.session_ttl_minutes)

    # 템플릿 저장소 + 렌더러
    template_repo = YamlTemplateRepository(yaml_path=settings.template_yaml_path)
    template_renderer = TemplateRenderer(template_repo=template_repo)

    resolver = IdentifierResolver(settings.start_page)
    access_gate = AccessGate(auth_backend)

    # Use Cases
    read_page = ReadPageUseCase(
        resolver=resolver,
        access_gate=access_gate,
        page_store=page_store,
        changelog=changelog,
        page_index=page_index,
        markup_renderer=markup_renderer,
        template_renderer=template_renderer,
    )
    put_page = PutPageUseCase(
        resolver=resolver,
        access_gate=access_gate,
        page_store=page_store,
        lock_store=lock_store,
        spam_policy=spam_policy,
        page_index=page_index,
        template_renderer=template_renderer,
    )
    session_use_case = SessionUseCase(auth_backend, session_store, use_acl=settings.use_acl)

    registry = build_core_registry(
        wiki_info=WikiInfoUseCase(version=WIKI_VERSION, title=settings.wiki_title),
        session=session_use_case,
        read_page=read_page,
        put_page=put_page,
        append_page=AppendPageUseCase(read_page, put_page),
        list_pages=ListPagesUseCase(
            access_gate, page_store, page_index, markup_renderer, use_heading=settings.use_heading,
        ),
        page_versions=PageVersionsUseCase(
            resolver, access_gate, page_store, changelog, page_size=settings.recent,
        ),
        recent_changes=RecentChangesUseCase(access_gate, changelog, page_store, media_store),
        attachments=AttachmentsUseCase(access_gate, media_store, changelog, tmp_dir=paths.tmp),
        set_locks=SetLocksUseCase(resolver, access_gate, lock_store),
        acl_check=AclCheckUseCase(resolver, access_gate),
        create_user=CreateUserUseCase(auth_backend, notifier),
        delete_users=DeleteUsersUseCase(auth_backend),
    )

    remote_api = RemoteApi(
        registry,
        session_store,
        remote_enabled=settings.remote_enabled,
        remote_users=settings.remote_users,
        client_ip=settings.client_ip,
    )

    return Container(
        settings=settings,
        registry=registry,
        remote_api=remote_api,
        session_use_case=session_use_case,
        session_store=session_store,
    )


def clear_container() -> None:
    build_container.cache_clear()
