import inspect
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

from src.domain.errors import FailureKind, OperationFailed

logger = logging.getLogger(__name__)

# 인자/반환 타입 태그 (소개용 메타데이터, 호출 시 검증하지 않음)
TYPE_TAGS = frozenset({"string", "int", "bool", "array", "struct", "file", "date"})


@dataclass(frozen=True)
class MethodDescriptor:
    """외부 호출 이름과 내부 핸들러의 바인딩

    handler 는 (caller, *args) 형태로 호출됩니다. 같은 핸들러를 인자 수가 다른
    여러 이름으로 등록할 수 있습니다 (예: wiki.getPage / wiki.getPageVersion).
    """
    name: str
    args: tuple[str, ...]
    returns: str
    handler: Callable[..., Any]
    public: bool = False
    doc: str = ""
    parameter_names: tuple[str, ...] = field(default=(), compare=False)
    required_count: int = field(default=0, compare=False)

    def bind(self, arguments: Mapping[str, Any] | None) -> list[Any]:
        """이름 기반 인자를 선언 순서의 위치 인자로 변환합니다.

        생략된 선택 인자 뒤의 인자는 전달하지 않습니다.
        """
        arguments = arguments or {}
        bound: list[Any] = []
        for index, param in enumerate(self.parameter_names):
            if param not in arguments or arguments[param] is None:
                if index < self.required_count:
                    raise OperationFailed(
                        FailureKind.INVALID_ARGUMENTS,
                        f"Missing parameter '{param}' for method {self.name}",
                    )
                break
            bound.append(arguments[param])
        return bound


def _handler_parameters(handler: Callable[..., Any]) -> tuple[list[str], int]:
    """caller 를 제외한 위치 인자 이름 목록과 필수 인자 수"""
    params = [
        p for p in inspect.signature(handler).parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    if not params:
        raise ValueError(f"핸들러에 caller 인자가 없습니다: {handler!r}")
    params = params[1:]
    required = sum(1 for p in params if p.default is p.empty)
    return [p.name for p in params], required


def describe(
    name: str,
    args: list[str] | tuple[str, ...],
    returns: str,
    handler: Callable[..., Any],
    doc: str,
    public: bool = False,
) -> MethodDescriptor:
    """핸들러 시그니처를 검사하여 MethodDescriptor 를 만듭니다."""
    unknown = [tag for tag in (*args, returns) if tag not in TYPE_TAGS]
    if unknown:
        raise ValueError(f"{name}: 알 수 없는 타입 태그 {unknown}")

    names, required = _handler_parameters(handler)
    if not (required <= len(args) <= len(names)):
        raise ValueError(
            f"{name}: 인자 수 {len(args)} 가 핸들러 시그니처와 맞지 않습니다 "
            f"(필수 {required}, 전체 {len(names)})"
        )
    return MethodDescriptor(
        name=name,
        args=tuple(args),
        returns=returns,
        handler=handler,
        public=public,
        doc=doc,
        parameter_names=tuple(names[:len(args)]),
        required_count=required,
    )


class MethodRegistry:
    """외부 호출 가능한 메서드 목록. 생성 후 변경되지 않습니다."""

    def __init__(self, descriptors: list[MethodDescriptor]):
        table: dict[str, MethodDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in table:
                raise ValueError(f"중복된 메서드 이름: {descriptor.name}")
            table[descriptor.name] = descriptor
        self._methods = MappingProxyType(table)
        logger.info("메서드 레지스트리 구성 완료: %d개", len(table))

    @property
    def methods(self) -> Mapping[str, MethodDescriptor]:
        return self._methods

    def get(self, name: str) -> MethodDescriptor:
        descriptor = self._methods.get(name)
        if descriptor is None:
            raise OperationFailed(
                FailureKind.UNKNOWN_METHOD,
                f"Method does not exist: {name}",
            )
        return descriptor

    def __contains__(self, name: str) -> bool:
        return name in self._methods

    def __len__(self) -> int:
        return len(self._methods)
