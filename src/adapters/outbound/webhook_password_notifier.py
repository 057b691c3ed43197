import logging

import httpx

logger = logging.getLogger(__name__)


class WebhookPasswordNotifier:
    """신규 사용자 비밀번호를 웹훅(JSON POST)으로 전달하는 Outbound Adapter"""

    def __init__(
        self,
        webhook_url: str,
        wiki_title: str = "",
        transport: httpx.BaseTransport | None = None,
    ):
        self.webhook_url = webhook_url
        self.wiki_title = wiki_title
        self._transport = transport

    def _client(self) -> httpx.Client:
        """timeout이 설정된 httpx.Client를 반환합니다."""
        return httpx.Client(timeout=10.0, transport=self._transport)

    def send_password(self, user: str, name: str, mail: str, password: str) -> bool:
        """
        비밀번호 통지를 보냅니다. 전송에 실패해도 예외를 던지지 않습니다.

        Returns:
            전송 성공 여부
        """
        if not self.webhook_url:
            logger.warning("PASSWORD_WEBHOOK_URL 미설정, 비밀번호 통지 생략: user=%s", user)
            return False

        payload = {
            "wiki": self.wiki_title,
            "user": user,
            "name": name,
            "mail": mail,
            "password": password,
        }
        logger.info("🌐 비밀번호 통지 전송: user=%s, mail=%s", user, mail)
        try:
            with self._client() as client:
                response = client.post(self.webhook_url, json=payload)
                logger.info("HTTP Status: %d", response.status_code)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("❌ HTTP 오류 발생: %d", e.response.status_code)
            return False
        except httpx.HTTPError as e:
            logger.error("❌ 네트워크 오류: %s", str(e))
            return False
        return True
