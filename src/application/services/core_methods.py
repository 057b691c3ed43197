from src.application.services.method_registry import MethodRegistry, describe
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


def build_core_registry(
    *,
    wiki_info: WikiInfoUseCase,
    session: SessionUseCase,
    read_page: ReadPageUseCase,
    put_page: PutPageUseCase,
    append_page: AppendPageUseCase,
    list_pages: ListPagesUseCase,
    page_versions: PageVersionsUseCase,
    recent_changes: RecentChangesUseCase,
    attachments: AttachmentsUseCase,
    set_locks: SetLocksUseCase,
    acl_check: AclCheckUseCase,
    create_user: CreateUserUseCase,
    delete_users: DeleteUsersUseCase,
) -> MethodRegistry:
    """'wiki.*' / 'dokuwiki.*' 네임스페이스의 코어 메서드 목록"""
    return MethodRegistry([
        describe("dokuwiki.getVersion", [], "string", wiki_info.get_version,
                 "Returns the running wiki version."),
        describe("dokuwiki.login", ["string", "string"], "int", session.login,
                 "Tries to login with the given credentials.", public=True),
        describe("dokuwiki.logoff", [], "int", session.logoff,
                 "Tries to logoff by dropping the caller session."),
        describe("dokuwiki.getPagelist", ["string", "array"], "array", list_pages.read_namespace,
                 "List all pages within the given namespace."),
        describe("dokuwiki.search", ["string"], "array", list_pages.search,
                 "Perform a fulltext search and return a list of matching pages"),
        describe("dokuwiki.getTime", [], "int", wiki_info.get_time,
                 "Returns the current time at the remote wiki server as Unix timestamp."),
        describe("dokuwiki.setLocks", ["array"], "array", set_locks.execute,
                 "Lock or unlock pages."),
        describe("dokuwiki.getTitle", [], "string", wiki_info.get_title,
                 "Returns the wiki title.", public=True),
        describe("dokuwiki.appendPage", ["string", "string", "array"], "bool", append_page.execute,
                 "Append text to a wiki page."),
        describe("dokuwiki.createUser", ["struct"], "bool", create_user.execute,
                 "Create a user. The result is boolean"),
        describe("dokuwiki.deleteUsers", ["array"], "bool", delete_users.execute,
                 "Remove one or more users from the list of registered users."),
        describe("wiki.getPage", ["string"], "string", read_page.raw_page,
                 "Get the raw Wiki text of page, latest version."),
        describe("wiki.getPageVersion", ["string", "int"], "string", read_page.raw_page,
                 "Return a raw wiki page"),
        describe("wiki.getPageHTML", ["string"], "string", read_page.html_page,
                 "Return page in rendered HTML, latest version."),
        describe("wiki.getPageHTMLVersion", ["string", "int"], "string", read_page.html_page,
                 "Return page in rendered HTML."),
        describe("wiki.getAllPages", [], "array", list_pages.list_pages,
                 "Returns a list of all pages. The result is an array of utf8 pagenames."),
        describe("wiki.getAttachments", ["string", "array"], "array", attachments.list_attachments,
                 "Returns a list of all media files."),
        describe("wiki.getBackLinks", ["string"], "array", read_page.list_backlinks,
                 "Returns the pages that link to this page."),
        describe("wiki.getPageInfo", ["string"], "array", read_page.page_info,
                 "Returns a struct with info about the page, latest version."),
        describe("wiki.getPageInfoVersion", ["string", "int"], "array", read_page.page_info,
                 "Returns a struct with info about the page."),
        describe("wiki.getPageVersions", ["string", "int"], "array", page_versions.execute,
                 "Returns the available revisions of the page."),
        describe("wiki.putPage", ["string", "string", "array"], "bool", put_page.execute,
                 "Saves a wiki page."),
        describe("wiki.listLinks", ["string"], "array", read_page.list_links,
                 "Lists all links contained in a wiki page."),
        describe("wiki.getRecentChanges", ["int"], "array", recent_changes.pages,
                 "Returns a struct about all recent changes since given timestamp."),
        describe("wiki.getRecentMediaChanges", ["int"], "array", recent_changes.media,
                 "Returns a struct about all recent media changes since given timestamp."),
        describe("wiki.aclCheck", ["string", "string", "array"], "int", acl_check.execute,
                 "Returns the permissions of a given wiki page. By default, for current user/groups"),
        describe("wiki.putAttachment", ["string", "file", "array"], "array", attachments.put_attachment,
                 "Upload a file to the wiki."),
        describe("wiki.deleteAttachment", ["string"], "int", attachments.delete_attachment,
                 "Delete a file from the wiki."),
        describe("wiki.getAttachment", ["string"], "file", attachments.get_attachment,
                 "Return a media file"),
        describe("wiki.getAttachmentInfo", ["string"], "array", attachments.get_attachment_info,
                 "Returns a struct with info about the attachment."),
        describe("dokuwiki.getXMLRPCAPIVersion", [], "int", wiki_info.get_api_version,
                 "Returns the XMLRPC API version.", public=True),
        describe("wiki.getRPCVersionSupported", [], "int", wiki_info.wiki_rpc_version,
                 "Returns 2 with the supported RPC API version.", public=True),
    ])
