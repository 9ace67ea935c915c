"""
nexlayer.yaml 파서

YAML 텍스트를 Application 모델로 변환합니다.

application.pods (기본) 와 최상위 pods (레거시) 두 형식을 모두 읽습니다.
빈 이름, 중복, 포트 범위 같은 규칙은 여기서 검사하지 않고
ManifestValidator가 한 번에 보고합니다.
"""

import logging
from typing import List

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from ..errors import ParseError
from .schema import Application, EnvVar, Pod, Secret, unique_ports

logger = logging.getLogger(__name__)

INT_TAG = "tag:yaml.org,2002:int"
STR_TAG = "tag:yaml.org,2002:str"
NULL_TAG = "tag:yaml.org,2002:null"

# 정수 스칼라 변환 (0x, 0o, 밑줄 표기 포함)
_constructor = yaml.constructor.SafeConstructor()

_KIND_NAMES = {
    MappingNode: "a mapping",
    SequenceNode: "a list",
    ScalarNode: "a scalar",
}


def parse(text: str) -> Application:
    """
    YAML 텍스트를 Application으로 변환

    Raises:
        ParseError: YAML 문법 오류, 필수 키 누락, 값 타입 오류
    """
    try:
        root = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.MarkedYAMLError as e:
        mark = e.problem_mark or e.context_mark
        raise _error(f"YAML parse error: {e.problem or e}", mark) from e
    except yaml.YAMLError as e:
        raise ParseError(f"YAML parse error: {e}") from e

    if root is None:
        raise ParseError("Manifest is empty")
    _expect(root, MappingNode, "manifest")

    top = _mapping(root, "")
    app_node = _require(top, "application", root, "")
    _expect(app_node, MappingNode, "application")
    app_fields = _mapping(app_node, "application")

    name = _string(_require(app_fields, "name", app_node, "application"), "application.name")

    nested = app_fields.get("pods")
    sibling = top.get("pods")
    if nested is not None and sibling is not None:
        raise _error(
            "pods must appear either under application or at the top level, not both",
            sibling.start_mark,
        )
    pods_node = nested if nested is not None else sibling
    if pods_node is None:
        raise _error("Missing required key: application.pods", app_node.start_mark)
    if sibling is not None:
        logger.debug("Parsed manifest with top-level pods layout")

    pods = tuple(_parse_pod(node, f"pods[{i}]") for i, node in enumerate(_items(pods_node, "pods")))
    return Application(name=name, pods=pods)


def parse_file(path: str) -> Application:
    """파일에서 읽어 변환"""
    with open(path, "r", encoding="utf-8") as f:
        return parse(f.read())


def _parse_pod(node: Node, path: str) -> Pod:
    _expect(node, MappingNode, path)
    fields = _mapping(node, path)

    name = _string(_require(fields, "name", node, path), f"{path}.name")
    image = _string(_require(fields, "image", node, path), f"{path}.image")

    ports: List[int] = []
    ports_node = fields.get("servicePorts")
    if ports_node is not None and not _is_null(ports_node):
        for i, item in enumerate(_items(ports_node, f"{path}.servicePorts")):
            if not isinstance(item, ScalarNode) or item.tag != INT_TAG:
                raise _error(f"{path}.servicePorts[{i}] must be an integer", item.start_mark)
            ports.append(_constructor.construct_yaml_int(item))

    env: List[EnvVar] = []
    vars_node = fields.get("vars")
    if vars_node is not None and not _is_null(vars_node):
        _expect(vars_node, MappingNode, f"{path}.vars")
        # 중복 키도 그대로 보존 (검증기에서 보고)
        for key_node, value_node in vars_node.value:
            key = _string(key_node, f"{path}.vars", raw=True)
            env.append(EnvVar(name=key, value=_string(value_node, f"{path}.vars.{key}", raw=True)))

    secrets: List[Secret] = []
    secrets_node = fields.get("secrets")
    if secrets_node is not None and not _is_null(secrets_node):
        for i, item in enumerate(_items(secrets_node, f"{path}.secrets")):
            secrets.append(_parse_secret(item, f"{path}.secrets[{i}]"))

    return Pod(
        name=name,
        image=image,
        service_ports=unique_ports(ports),
        vars=tuple(env),
        secrets=tuple(secrets),
    )


def _parse_secret(node: Node, path: str) -> Secret:
    _expect(node, MappingNode, path)
    fields = _mapping(node, path)
    return Secret(
        name=_string(_require(fields, "name", node, path), f"{path}.name"),
        data=_string(_require(fields, "data", node, path), f"{path}.data"),
        mount_path=_string(_require(fields, "mountPath", node, path), f"{path}.mountPath"),
        file_name=_string(_require(fields, "fileName", node, path), f"{path}.fileName"),
    )


# =============================================================================
# 노드 헬퍼
# =============================================================================

def _error(message: str, mark) -> ParseError:
    if mark is None:
        return ParseError(message)
    return ParseError(message, line=mark.line + 1, column=mark.column + 1)


def _is_null(node: Node) -> bool:
    return isinstance(node, ScalarNode) and node.tag == NULL_TAG


def _expect(node: Node, kind: type, path: str) -> None:
    if not isinstance(node, kind):
        actual = "null" if _is_null(node) else _KIND_NAMES.get(type(node), "a value")
        raise _error(f"{path} must be {_KIND_NAMES[kind]}, got {actual}", node.start_mark)


def _mapping(node: MappingNode, path: str) -> dict:
    """키 → 값 노드 (중복 키는 ParseError)"""
    fields = {}
    for key_node, value_node in node.value:
        if not isinstance(key_node, ScalarNode):
            continue
        if key_node.value in fields:
            full_key = f"{path}.{key_node.value}" if path else key_node.value
            raise _error(f"Duplicate key: {full_key}", key_node.start_mark)
        fields[key_node.value] = value_node
    return fields


def _require(fields: dict, key: str, parent: Node, path: str) -> Node:
    if key not in fields:
        full_key = f"{path}.{key}" if path else key
        raise _error(f"Missing required key: {full_key}", parent.start_mark)
    return fields[key]


def _items(node: Node, path: str) -> List[Node]:
    _expect(node, SequenceNode, path)
    return list(node.value)


def _string(node: Node, path: str, raw: bool = False) -> str:
    """
    스칼라 값을 문자열로 (null은 빈 문자열)

    raw=True 이면 정수/불리언 등도 원문 그대로 받습니다 (vars 값).
    """
    if not isinstance(node, ScalarNode):
        raise _error(f"{path} must be a string, got {_KIND_NAMES.get(type(node), 'a value')}", node.start_mark)
    if node.tag == NULL_TAG:
        return ""
    if not raw and node.tag != STR_TAG:
        kind = node.tag.rsplit(":", 1)[-1]
        raise _error(f"{path} must be a string, got {kind} ({node.value})", node.start_mark)
    return node.value

