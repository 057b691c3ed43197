import asyncio
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path

from mcp.server import Server
from mcp.server.stdio import stdio_server

from src.adapters.inbound.mcp.tools import MCP_SESSION_ID, register_tools
from src.configuration.container import build_container, clear_container


def setup_logging():
    """로깅 설정: stderr와 파일 두 곳에 로그 출력"""
    # 로그 디렉토리 생성
    log_dir = Path(__file__).parent.parent / "logs"
    log_dir.mkdir(exist_ok=True)

    # 로그 파일 경로
    log_file = log_dir / "mcp-server.log"

    # 로그 포맷
    formatter = logging.Formatter(
        '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # 루트 로거 설정
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    # 1. stderr 핸들러 (stdout 은 MCP 프로토콜 전용)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    # 2. 파일 핸들러 (로그 파일에 저장, 최대 10MB, 5개 백업)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    return logging.getLogger(__name__)


logger = setup_logging()


def startup_login(container) -> None:
    """REMOTE_USER/REMOTE_PASSWORD 가 설정되어 있으면 stdio 세션을 미리 로그인합니다."""
    settings = container.settings
    if not settings.remote_user:
        logger.info("시작 로그인 생략: 익명 세션")
        return
    caller = container.remote_api.caller_for(MCP_SESSION_ID)
    if container.session_use_case.login(caller, settings.remote_user, settings.remote_password):
        logger.info("✅ 시작 로그인 완료: %s", settings.remote_user)
    else:
        logger.warning("시작 로그인 실패: %s", settings.remote_user)


async def main() -> None:
    try:
        logger.info("=" * 60)
        logger.info("MCP 서버 초기화 시작")

        container = build_container()
        logger.info("✅ Container 빌드 완료")
        logger.info("서버 이름: %s", container.settings.server_name)
        logger.info("환경: %s", container.settings.app_env)
        logger.info("데이터 디렉토리: %s", container.settings.data_dir)
        logger.info("위키 제목: %s", container.settings.wiki_title)
        logger.info("ACL 사용: %s", container.settings.use_acl)
        logger.info("Template YAML: %s", container.settings.template_yaml_path)
        logger.info("원격 메서드: %d개", len(container.registry))

        startup_login(container)

        app = Server(container.settings.server_name)
        register_tools(app)
        logger.info("✅ MCP Tools 등록 완료")

        logger.info("MCP 서버 시작 중...")
        logger.info("=" * 60)

        try:
            async with stdio_server() as (read_stream, write_stream):
                await app.run(read_stream, write_stream, app.create_initialization_options())
        finally:
            if container.settings.app_env == "local":
                clear_container()
            logger.info("MCP 서버 종료")

    except Exception as e:
        logger.error("=" * 60)
        logger.error("MCP 서버 시작 실패!")
        logger.error("오류 타입: %s", type(e).__name__)
        logger.error("오류 메시지: %s", str(e))
        logger.error("=" * 60)
        traceback.print_exc(file=sys.stderr)
        raise


if __name__ == "__main__":
    asyncio.run(main())
