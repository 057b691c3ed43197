import time

from src.domain.access import CallerIdentity

API_VERSION = 11
WIKI_RPC_VERSION = 2


class WikiInfoUseCase:
    """위키 버전/시각/제목 등 단순 정보"""

    def __init__(self, version: str, title: str):
        self._version = version
        self._title = title

    def get_version(self, caller: CallerIdentity) -> str:
        return self._version

    def get_time(self, caller: CallerIdentity) -> int:
        return int(time.time())

    def get_title(self, caller: CallerIdentity) -> str:
        return self._title

    def get_api_version(self, caller: CallerIdentity) -> int:
        return API_VERSION

    def wiki_rpc_version(self, caller: CallerIdentity) -> int:
        return WIKI_RPC_VERSION
