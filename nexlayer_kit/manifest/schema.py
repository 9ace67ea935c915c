"""
nexlayer.yaml 스키마 정의

애플리케이션 → 파드 → 포트/환경변수/시크릿 구조를 정의하고,
호출자가 넘긴 원시 파라미터에서 모델을 생성합니다.
"""

import posixpath
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Tuple, Mapping, Sequence, Union

from ..errors import InvalidSpec

MIN_PORT = 1
MAX_PORT = 65535

POD_FIELDS = ("name", "image", "servicePorts", "vars", "secrets")
SECRET_FIELDS = ("name", "data", "mountPath", "fileName")


@dataclass(frozen=True)
class EnvVar:
    """파드 환경변수"""
    name: str
    value: str


@dataclass(frozen=True)
class Secret:
    """파드에 파일로 마운트되는 시크릿"""
    name: str
    data: str
    mount_path: str
    file_name: str

    @property
    def target_path(self) -> str:
        """컨테이너 안에서 시크릿 파일이 놓이는 위치"""
        return posixpath.join(self.mount_path, self.file_name)

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "data": self.data,
            "mountPath": self.mount_path,
            "fileName": self.file_name,
        }


@dataclass(frozen=True)
class Pod:
    """배포 단위 (컨테이너 이미지 + 포트 + 환경변수 + 시크릿)"""
    name: str
    image: str
    service_ports: Tuple[int, ...] = ()
    vars: Tuple[EnvVar, ...] = ()
    secrets: Tuple[Secret, ...] = ()

    @property
    def env(self) -> Dict[str, str]:
        """환경변수를 순서가 유지되는 dict로 반환"""
        return {var.name: var.value for var in self.vars}

    def to_dict(self) -> Dict[str, Any]:
        """manifest 키 이름을 쓰는 딕셔너리로 변환 (빈 컬렉션은 생략)"""
        data: Dict[str, Any] = {"name": self.name, "image": self.image}
        if self.service_ports:
            data["servicePorts"] = list(self.service_ports)
        if self.vars:
            data["vars"] = self.env
        if self.secrets:
            data["secrets"] = [secret.to_dict() for secret in self.secrets]
        return data


@dataclass(frozen=True)
class Application:
    """nexlayer 애플리케이션"""
    name: str
    pods: Tuple[Pod, ...] = field(default_factory=tuple)

    def get_pod(self, name: str) -> Optional[Pod]:
        """이름으로 파드 조회"""
        for pod in self.pods:
            if pod.name == name:
                return pod
        return None

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            "application": {
                "name": self.name,
                "pods": [pod.to_dict() for pod in self.pods],
            }
        }


PodSpec = Union[Pod, Mapping[str, Any]]


def build(application_name: str, pod_specs: Sequence[PodSpec]) -> Application:
    """
    원시 파라미터에서 Application 생성

    Args:
        application_name: 애플리케이션 이름
        pod_specs: 파드 정의 목록. manifest 키 이름(name, image, servicePorts,
            vars, secrets)을 쓰는 dict 또는 Pod 인스턴스

    Returns:
        Application: 생성된 애플리케이션

    Raises:
        InvalidSpec: 첫 번째로 발견한 규칙 위반

    Example:
        app = build("blog", [
            {"name": "web", "image": "nginx:1.25", "servicePorts": [80]},
        ])
    """
    if not isinstance(application_name, str):
        raise InvalidSpec("application name must be a string", "application.name")
    if is_blank(application_name):
        raise InvalidSpec("application name is required", "application.name")

    if isinstance(pod_specs, (str, bytes, Mapping)) or not isinstance(pod_specs, Sequence):
        raise InvalidSpec("pods must be a list", "application.pods")
    if not pod_specs:
        raise InvalidSpec("at least one pod is required", "application.pods")

    pods: List[Pod] = []
    seen_names = set()
    for i, spec in enumerate(pod_specs):
        pod = _build_pod(spec, f"pods[{i}]")
        if pod.name in seen_names:
            raise InvalidSpec(f"duplicate pod name: {pod.name}", f"pods[{i}].name")
        seen_names.add(pod.name)
        pods.append(pod)

    return Application(name=application_name, pods=tuple(pods))


def is_blank(value: Optional[str]) -> bool:
    """None, 빈 문자열, 공백만 있는 문자열"""
    return value is None or not value.strip()


def unique_ports(ports: Sequence[int]) -> Tuple[int, ...]:
    """중복 포트 제거 (처음 나온 순서 유지)"""
    return tuple(dict.fromkeys(ports))


def is_valid_port(port: Any) -> bool:
    return isinstance(port, int) and not isinstance(port, bool) and MIN_PORT <= port <= MAX_PORT


def _build_pod(spec: PodSpec, path: str) -> Pod:
    if isinstance(spec, Pod):
        spec = {
            "name": spec.name,
            "image": spec.image,
            "servicePorts": list(spec.service_ports),
            "vars": list(spec.vars),
            "secrets": list(spec.secrets),
        }
    if not isinstance(spec, Mapping):
        raise InvalidSpec("pod must be a mapping", path)

    for key in spec:
        if key not in POD_FIELDS:
            raise InvalidSpec(f"unknown field: {key}", path)

    name = _required_string(spec, "name", path)
    image = _required_string(spec, "image", path)
    ports = _build_ports(spec.get("servicePorts"), f"{path}.servicePorts")
    env = _build_vars(spec.get("vars"), f"{path}.vars")
    secrets = _build_secrets(spec.get("secrets"), f"{path}.secrets")

    return Pod(name=name, image=image, service_ports=ports, vars=env, secrets=secrets)


def _required_string(spec: Mapping[str, Any], key: str, path: str) -> str:
    value = spec.get(key)
    if value is not None and not isinstance(value, str):
        raise InvalidSpec(f"{key} must be a string", f"{path}.{key}")
    if is_blank(value):
        raise InvalidSpec(f"{key} is required", f"{path}.{key}")
    return value


def _as_list(value: Any, path: str) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise InvalidSpec("must be a list", path)
    return list(value)


def _build_ports(value: Any, path: str) -> Tuple[int, ...]:
    ports = _as_list(value, path)
    for i, port in enumerate(ports):
        if not isinstance(port, int) or isinstance(port, bool):
            raise InvalidSpec(f"port must be an integer, got {port!r}", f"{path}[{i}]")
        if not MIN_PORT <= port <= MAX_PORT:
            raise InvalidSpec(
                f"port {port} is outside {MIN_PORT}-{MAX_PORT}", f"{path}[{i}]"
            )
    return unique_ports(ports)


def _build_vars(value: Any, path: str) -> Tuple[EnvVar, ...]:
    if value is None:
        return ()
    if isinstance(value, Mapping):
        pairs = list(value.items())
    else:
        pairs = []
        for i, item in enumerate(_as_list(value, path)):
            if isinstance(item, EnvVar):
                pairs.append((item.name, item.value))
            elif isinstance(item, Mapping):
                pairs.append((item.get("name"), item.get("value")))
            elif isinstance(item, (list, tuple)) and len(item) == 2:
                pairs.append((item[0], item[1]))
            else:
                raise InvalidSpec("var must be a name/value pair", f"{path}[{i}]")

    env: List[EnvVar] = []
    seen = set()
    for name, val in pairs:
        if name is not None and not isinstance(name, str):
            raise InvalidSpec(f"var name must be a string, got {name!r}", path)
        if is_blank(name):
            raise InvalidSpec("var name is required", path)
        if name in seen:
            raise InvalidSpec(f"duplicate var name: {name}", f"{path}.{name}")
        if not isinstance(val, str):
            raise InvalidSpec(f"value must be a string, got {val!r}", f"{path}.{name}")
        seen.add(name)
        env.append(EnvVar(name=name, value=val))
    return tuple(env)


def _build_secrets(value: Any, path: str) -> Tuple[Secret, ...]:
    secrets: List[Secret] = []
    for i, item in enumerate(_as_list(value, path)):
        item_path = f"{path}[{i}]"
        if isinstance(item, Secret):
            item = item.to_dict()
        if not isinstance(item, Mapping):
            raise InvalidSpec("secret must be a mapping", item_path)
        for key in item:
            if key not in SECRET_FIELDS:
                raise InvalidSpec(f"unknown field: {key}", item_path)

        if "data" not in item:
            raise InvalidSpec("data is required", f"{item_path}.data")
        data = item["data"]
        if not isinstance(data, str):
            raise InvalidSpec("data must be a string", f"{item_path}.data")

        secrets.append(Secret(
            name=_required_string(item, "name", item_path),
            data=data,
            mount_path=_required_string(item, "mountPath", item_path),
            file_name=_required_string(item, "fileName", item_path),
        ))
    return tuple(secrets)
