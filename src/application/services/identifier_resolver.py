from src.domain.identifiers import clean_id


class IdentifierResolver:
    """호출자가 넘긴 페이지 ID를 정규화합니다. 비어 있으면 시작 페이지를 사용합니다."""

    def __init__(self, start_page: str):
        self._start_page = clean_id(start_page)

    def resolve(self, raw: str | None) -> str:
        page_id = clean_id(raw)
        if not page_id:
            return self._start_page
        return page_id
