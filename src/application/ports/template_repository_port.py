from typing import Protocol


class TemplateRepositoryPort(Protocol):
    """페이지 템플릿과 지역화 문구 저장소 계약"""

    def get_page_template(self, namespace: str) -> str | None:
        """네임스페이스(상위 포함)에 적용되는 새 페이지 템플릿"""
        ...

    def get_message(self, key: str) -> str:
        """지역화 문구 (예: 'created', 'deleted')"""
        ...

    def reload(self) -> None:
        """캐시를 무효화하고 설정 파일을 다시 로드합니다."""
        ...
