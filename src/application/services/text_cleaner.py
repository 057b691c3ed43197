import re

_LINE_ENDINGS = re.compile(r"\r\n|\r")
_TRAILING_CONTROL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]+$")


def clean_text(text: str | None) -> str:
    """줄바꿈을 '\\n' 으로 통일하고 끝의 제어문자를 제거합니다."""
    if not text:
        return ""
    text = _LINE_ENDINGS.sub("\n", str(text))
    return _TRAILING_CONTROL.sub("", text)
