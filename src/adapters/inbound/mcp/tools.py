import asyncio
import base64
import binascii
import dataclasses
import json
import logging
import sys
import traceback
from enum import Enum
from typing import Any, Mapping

from mcp.server import Server
from mcp.types import TextContent, Tool

from src.application.services.method_registry import MethodDescriptor, MethodRegistry
from src.domain.errors import FailureKind, OperationFailed, RemoteError

logger = logging.getLogger(__name__)

# stdio 연결 하나가 세션 하나
MCP_SESSION_ID = "mcp-stdio"

INTERNAL_ERROR_CODE = -32603

# 타입 태그 → JSON Schema
_SCHEMA_TYPES: dict[str, dict] = {
    "string": {"type": "string"},
    "int": {"type": "integer"},
    "bool": {"type": "boolean"},
    "array": {"type": ["array", "object"]},
    "struct": {"type": "object"},
    "file": {"type": "string", "contentEncoding": "base64"},
    "date": {"type": "string"},
}

# 로그에서 마스킹할 민감 필드 (값이 긴 텍스트이거나 비밀정보)
_SENSITIVE_FIELDS = {"password", "text", "data"}


def tool_name(method_name: str) -> str:
    """'wiki.getPage' → 'wiki_getPage' (MCP 도구 이름에는 '.' 을 쓰지 않음)"""
    return method_name.replace(".", "_")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_jsonable(value: Any) -> Any:
    """결과 값을 JSON 직렬화 가능한 형태로 변환합니다. bytes 는 base64 문자열"""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            _camel(f.name): to_jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    return value


def mask_arguments(arguments: Mapping[str, Any]) -> dict:
    """로깅용으로 민감 필드를 마스킹합니다."""
    masked = {}
    for key, value in arguments.items():
        if key in _SENSITIVE_FIELDS:
            if isinstance(value, str) and len(value) > 20:
                masked[key] = f"{value[:20]}... ({len(value)}자)"
            else:
                masked[key] = "***"
        elif isinstance(value, Mapping):
            masked[key] = mask_arguments(value)
        else:
            masked[key] = value
    return masked


def _input_schema(descriptor: MethodDescriptor) -> dict:
    properties = {
        param: dict(_SCHEMA_TYPES[tag])
        for param, tag in zip(descriptor.parameter_names, descriptor.args)
    }
    return {
        "type": "object",
        "properties": properties,
        "required": list(descriptor.parameter_names[:descriptor.required_count]),
    }


def list_tool_definitions(registry: MethodRegistry) -> list[Tool]:
    tools = []
    for name, descriptor in registry.methods.items():
        description = f"{descriptor.doc} (remote method: {name}, returns {descriptor.returns})"
        if descriptor.public:
            description += " Public: no login required."
        tools.append(Tool(
            name=tool_name(name),
            description=description,
            inputSchema=_input_schema(descriptor),
        ))
    return tools


def resolve_method_name(registry: MethodRegistry, name: str) -> str:
    """도구 이름 또는 원래 메서드 이름을 레지스트리의 메서드 이름으로 되돌립니다."""
    if name in registry:
        return name
    for method_name in registry.methods:
        if tool_name(method_name) == name:
            return method_name
    return name


def _decode_files(descriptor: MethodDescriptor, args: list[Any]) -> list[Any]:
    decoded = list(args)
    for index, tag in enumerate(descriptor.args[:len(decoded)]):
        if tag != "file" or not isinstance(decoded[index], str):
            continue
        try:
            decoded[index] = base64.b64decode(decoded[index], validate=True)
        except (binascii.Error, ValueError) as e:
            raise OperationFailed(
                FailureKind.INVALID_ARGUMENTS,
                f"Parameter '{descriptor.parameter_names[index]}' is not valid base64",
            ) from e
    return decoded


def _text(payload: Any) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(payload, ensure_ascii=False, indent=2))]


async def dispatch_tool(container, name: str, arguments: Mapping[str, Any] | None) -> list[TextContent]:
    """
    도구 호출을 원격 메서드 호출로 변환해 실행합니다.

    결과는 JSON 텍스트, 원격 오류는 {"fault": {code, message}} 형태로 반환합니다.
    """
    arguments = arguments or {}
    remote_api = container.remote_api
    method_name = resolve_method_name(container.registry, name)
    try:
        logger.info("=" * 60)
        logger.info("🔧 Tool 호출: %s", method_name)
        logger.info("인자: %s", mask_arguments(arguments))
        logger.info("=" * 60)

        container.session_store.cleanup_expired()
        caller = remote_api.caller_for(MCP_SESSION_ID)
        descriptor = remote_api.authorize(method_name, caller)
        args = _decode_files(descriptor, descriptor.bind(arguments))
        result = await asyncio.to_thread(remote_api.invoke, descriptor, args, caller)
        return _text({"result": to_jsonable(result)})

    except RemoteError as e:
        logger.info("원격 오류: %s (%d) %s", method_name, e.code, e.message)
        return _text({"fault": e.to_fault()})

    except Exception as e:
        logger.error("=" * 60)
        logger.error("❌ Tool 실행 실패!")
        logger.error("Tool: %s", method_name)
        logger.error("오류 타입: %s", type(e).__name__)
        logger.error("오류 메시지: %s", str(e))
        logger.error("=" * 60)
        traceback.print_exc(file=sys.stderr)
        return _text({"fault": {"code": INTERNAL_ERROR_CODE, "message": f"{type(e).__name__}: {e}"}})


def register_tools(app: Server) -> None:
    """MCP Tool 핸들러를 서버에 등록합니다."""
    from src.configuration.container import build_container

    @app.call_tool()
    async def call_tool(name: str, arguments: dict):
        return await dispatch_tool(build_container(), name, arguments)

    @app.list_tools()
    async def list_tools():
        return list_tool_definitions(build_container().registry)
