"""
nexlayer.yaml 생성기

Application 모델을 정해진 키 순서와 따옴표 규칙으로 YAML 텍스트로 변환합니다.

사용 예시:
    from nexlayer_kit.manifest import build, render

    app = build("blog", [{"name": "web", "image": "nginx:1.25", "servicePorts": [80]}])
    print(render(app))
"""

import re
from contextlib import contextmanager
from typing import Iterator, List, Sequence, Union

from .schema import Application, Pod

LAYOUT_NESTED = "nested"    # application.pods (기본)
LAYOUT_SIBLING = "sibling"  # application 과 같은 레벨의 pods (레거시)
LAYOUTS = (LAYOUT_NESTED, LAYOUT_SIBLING)

# PyYAML이 그대로 읽을 수 있는 출력 가능 문자 외에는 모두 이스케이프
# (U+2028, U+2029는 줄바꿈으로 읽히므로 제외)
_NEEDS_ESCAPE = re.compile(
    r"[^\x20-\x7e\xa0-\u2027\u202a-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]|[\"\\]"
)
_SIMPLE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\u2028": "\\L",
    "\u2029": "\\P",
}

_BARE_KEY = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
# YAML 1.1에서 bool/null로 해석되는 단어
_YAML_KEYWORDS = {"y", "n", "yes", "no", "true", "false", "on", "off", "null"}


def quote(value: str) -> str:
    """YAML 큰따옴표 스칼라로 변환"""

    def _escape(match):
        ch = match.group(0)
        if ch in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[ch]
        code = ord(ch)
        if code <= 0xFF:
            return f"\\x{code:02X}"
        if code <= 0xFFFF:
            return f"\\u{code:04X}"
        return f"\\U{code:08X}"

    return '"' + _NEEDS_ESCAPE.sub(_escape, value) + '"'


def format_key(key: str) -> str:
    """환경변수 이름처럼 단순한 키는 그대로, 나머지는 따옴표"""
    if _BARE_KEY.fullmatch(key) and key.lower() not in _YAML_KEYWORDS:
        return key
    return quote(key)


def format_scalar(value: Union[str, int]) -> str:
    """문자열은 따옴표, 정수는 그대로"""
    if isinstance(value, bool):
        raise TypeError("bool values are not part of the manifest format")
    if isinstance(value, int):
        return str(value)
    return quote(value)


class ManifestWriter:
    """
    들여쓰기를 관리하는 YAML 라인 작성기

    Example:
        writer = ManifestWriter()
        writer.key("pods")
        with writer.indented():
            with writer.sequence_item():
                writer.field("name", "web")
        writer.getvalue()  # 'pods:\\n  - name: "web"\\n'
    """

    def __init__(self, indent_width: int = 2):
        self.indent_width = indent_width
        self._lines: List[str] = []
        self._level = 0
        self._pending_dash = False

    def _write(self, text: str) -> None:
        if self._pending_dash:
            prefix = " " * (self.indent_width * (self._level - 1)) + "- "
            self._pending_dash = False
        else:
            prefix = " " * (self.indent_width * self._level)
        self._lines.append(prefix + text)

    @contextmanager
    def indented(self) -> Iterator[None]:
        self._level += 1
        try:
            yield
        finally:
            self._level -= 1

    @contextmanager
    def sequence_item(self) -> Iterator[None]:
        """시퀀스 항목 하나 (첫 줄에 '- ' 접두사)"""
        self._pending_dash = True
        self._level += 1
        try:
            yield
        finally:
            self._level -= 1
            self._pending_dash = False

    def key(self, key: str) -> None:
        """하위 블록을 여는 키"""
        self._write(f"{format_key(key)}:")

    def field(self, key: str, value: Union[str, int]) -> None:
        self._write(f"{format_key(key)}: {format_scalar(value)}")

    def item(self, value: Union[str, int]) -> None:
        self._write(f"- {format_scalar(value)}")

    def empty_sequence(self, key: str) -> None:
        self._write(f"{format_key(key)}: []")

    def getvalue(self) -> str:
        return "\n".join(self._lines) + "\n"


def render(application: Application, layout: str = LAYOUT_NESTED) -> str:
    """
    Application을 nexlayer.yaml 텍스트로 변환

    Args:
        application: 변환할 애플리케이션
        layout: "nested" (application.pods) 또는 "sibling" (최상위 pods)

    Returns:
        str: YAML 텍스트. 같은 입력이면 항상 같은 바이트열
    """
    if layout not in LAYOUTS:
        raise ValueError(f"Unknown layout: {layout}. Valid values: {list(LAYOUTS)}")

    writer = ManifestWriter()
    writer.key("application")
    with writer.indented():
        writer.field("name", application.name)
        if layout == LAYOUT_NESTED:
            _write_pods(writer, application.pods)

    if layout == LAYOUT_SIBLING:
        _write_pods(writer, application.pods)

    return writer.getvalue()


def _write_pods(writer: ManifestWriter, pods: Sequence[Pod]) -> None:
    if not pods:
        writer.empty_sequence("pods")
        return

    writer.key("pods")
    with writer.indented():
        for pod in pods:
            with writer.sequence_item():
                _write_pod(writer, pod)


def _write_pod(writer: ManifestWriter, pod: Pod) -> None:
    writer.field("name", pod.name)
    writer.field("image", pod.image)

    if pod.service_ports:
        writer.key("servicePorts")
        with writer.indented():
            for port in pod.service_ports:
                writer.item(port)

    if pod.vars:
        writer.key("vars")
        with writer.indented():
            for var in pod.vars:
                writer.field(var.name, var.value)

    if pod.secrets:
        writer.key("secrets")
        with writer.indented():
            for secret in pod.secrets:
                with writer.sequence_item():
                    writer.field("name", secret.name)
                    writer.field("data", secret.data)
                    writer.field("mountPath", secret.mount_path)
                    writer.field("fileName", secret.file_name)
