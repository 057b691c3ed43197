import logging
from datetime import date

from jinja2 import BaseLoader, Environment, Undefined

from src.application.ports.template_repository_port import TemplateRepositoryPort
from src.domain.identifiers import get_ns, no_ns

logger = logging.getLogger(__name__)


class LoggingUndefined(Undefined):
    """미치환 변수 접근 시 경고 로그를 출력합니다."""
    def __str__(self) -> str:
        logger.warning("템플릿 미치환 변수: %s", self._undefined_name)
        return ""


class TemplateRenderer:
    """Jinja2 기반 새 페이지 템플릿 렌더러"""

    def __init__(self, template_repo: TemplateRepositoryPort):
        self._repo = template_repo
        # 위키 원문을 만들기 때문에 HTML 이스케이프는 하지 않음
        self._env = Environment(
            loader=BaseLoader(),
            undefined=LoggingUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )

    def render_page_template(self, page_id: str) -> str:
        """저장된 본문이 없는 페이지에 보여줄 템플릿을 렌더링합니다. 템플릿이 없으면 빈 문자열"""
        namespace = get_ns(page_id)
        body = self._repo.get_page_template(namespace)
        if not body:
            return ""
        page = no_ns(page_id)
        template = self._env.from_string(body)
        rendered = template.render(
            ID=page_id,
            NS=namespace,
            PAGE=page.replace("_", " "),
            DATE=date.today().isoformat(),
        )
        logger.info("페이지 템플릿 렌더링: id=%s, 길이=%d", page_id, len(rendered))
        return rendered

    def message(self, key: str) -> str:
        return self._repo.get_message(key)
