import hashlib
from pathlib import Path


class WikiPaths:
    """
    위키 데이터 디렉토리 구조.

    pages/<ns>/<name>.txt            현재 페이지 본문
    attic/<ns>/<name>.<rev>.txt      이전 리비전
    meta/<ns>/<name>.changes         페이지별 변경 이력
    meta/_dokuwiki.changes           전체 페이지 변경 이력
    media/<ns>/<file>                현재 미디어
    media_attic/<ns>/<name>.<rev>.<ext>
    media_meta/<ns>/<file>.changes
    media_meta/_media.changes
    locks/<md5(id)>.lock
    index/pages.json
    tmp/
    """

    def __init__(self, data_dir: str | Path):
        self.root = Path(data_dir)
        self.pages = self.root / "pages"
        self.attic = self.root / "attic"
        self.meta = self.root / "meta"
        self.media = self.root / "media"
        self.media_attic = self.root / "media_attic"
        self.media_meta = self.root / "media_meta"
        self.locks = self.root / "locks"
        self.index = self.root / "index"
        self.tmp = self.root / "tmp"

    def ensure_dirs(self) -> None:
        for directory in (
            self.pages, self.attic, self.meta, self.media, self.media_attic,
            self.media_meta, self.locks, self.index, self.tmp,
        ):
            directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _relative(identifier: str) -> Path:
        return Path(*identifier.split(":"))

    def page_file(self, page_id: str, revision: int | None = None) -> Path:
        if revision is None:
            relative = self._relative(page_id)
            return self.pages / relative.with_name(f"{relative.name}.txt")
        return self.attic / self._relative(page_id).with_name(f"{page_id.rsplit(':', 1)[-1]}.{revision}.txt")

    def page_changes(self, page_id: str) -> Path:
        return self.meta / self._relative(page_id).with_name(f"{page_id.rsplit(':', 1)[-1]}.changes")

    @property
    def global_page_changes(self) -> Path:
        return self.meta / "_dokuwiki.changes"

    def media_file(self, media_id: str, revision: int | None = None) -> Path:
        relative = self._relative(media_id)
        if revision is None:
            return self.media / relative
        name = relative.name
        stem, dot, ext = name.rpartition(".")
        if not dot:
            stem, ext = name, ""
        attic_name = f"{stem}.{revision}.{ext}" if ext else f"{stem}.{revision}"
        return self.media_attic / relative.with_name(attic_name)

    def media_changes(self, media_id: str) -> Path:
        relative = self._relative(media_id)
        return self.media_meta / relative.with_name(f"{relative.name}.changes")

    @property
    def global_media_changes(self) -> Path:
        return self.media_meta / "_media.changes"

    def lock_file(self, page_id: str) -> Path:
        return self.locks / f"{hashlib.md5(page_id.encode('utf-8')).hexdigest()}.lock"

    @property
    def page_index_file(self) -> Path:
        return self.index / "pages.json"

    def page_id_for(self, path: Path) -> str:
        """pages/ 아래 파일 경로를 페이지 ID 로 변환합니다."""
        relative = path.relative_to(self.pages).with_suffix("")
        return ":".join(relative.parts)

    def media_id_for(self, path: Path) -> str:
        return ":".join(path.relative_to(self.media).parts)

    def namespace_dir(self, base: Path, namespace: str) -> Path:
        return base / self._relative(namespace) if namespace else base
