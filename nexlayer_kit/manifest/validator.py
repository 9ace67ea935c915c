"""
nexlayer.yaml 검증기

Application 모델(또는 YAML 텍스트/파일)이 플랫폼에 제출 가능한지 검증합니다.
네트워크 호출 없이 로컬에서 모든 문제를 한 번에 보고합니다.
플랫폼 측 최종 검증은 NexlayerClient.validate_yaml()을 사용하세요.
"""

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Dict

from ..errors import ParseError
from .parser import parse
from .schema import Application, Pod, is_blank, is_valid_port, MIN_PORT, MAX_PORT


@dataclass
class ValidationResult:
    """검증 결과"""
    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    manifest: Optional[Application] = None

    def add_error(self, path: str, message: str):
        self.errors.append(f"{path}: {message}")
        self.valid = False

    def add_warning(self, path: str, message: str):
        self.warnings.append(f"{path}: {message}")

    def to_dict(self) -> Dict[str, object]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


def image_has_tag(image: str) -> bool:
    """
    이미지 참조에 태그 또는 다이제스트가 있는지

    registry:port/repo 형식의 포트는 태그로 보지 않습니다.
    """
    if "@" in image:
        return True
    last_component = image.rsplit("/", 1)[-1]
    return ":" in last_component


class ManifestValidator:
    """
    nexlayer.yaml 검증기

    Example:
        validator = ManifestValidator()
        result = validator.validate_file("nexlayer.yaml")
        if result.valid:
            app = result.manifest
            print(f"Application: {app.name}")
        else:
            for error in result.errors:
                print(f"Error: {error}")
    """

    def validate_file(self, file_path: str) -> ValidationResult:
        """파일 검증"""
        result = ValidationResult()

        path = Path(file_path)
        if not path.exists():
            result.add_error("file", f"File not found: {file_path}")
            return result

        return self.validate_string(path.read_text(encoding="utf-8"))

    def validate_string(self, yaml_string: str) -> ValidationResult:
        """YAML 문자열 검증"""
        result = ValidationResult()

        try:
            application = parse(yaml_string)
        except ParseError as e:
            result.add_error("yaml", str(e))
            return result

        return self.validate(application, result)

    def validate(
        self,
        application: Application,
        result: Optional[ValidationResult] = None,
    ) -> ValidationResult:
        """Application 검증"""
        if result is None:
            result = ValidationResult()
        result.manifest = application

        if is_blank(application.name):
            result.add_error("application.name", "application name is required")

        if not application.pods:
            result.add_error("application.pods", "at least one pod is required")

        pod_names = set()
        for i, pod in enumerate(application.pods):
            path = f"pods[{i}]"
            if is_blank(pod.name):
                result.add_error(f"{path}.name", "pod name is required")
            elif pod.name in pod_names:
                result.add_error(f"{path}.name", f"Duplicate pod name: {pod.name}")
            else:
                pod_names.add(pod.name)

            self._validate_image(pod, path, result)
            self._validate_ports(pod, path, result)
            self._validate_vars(pod, path, result)
            self._validate_secrets(pod, path, result)

        self._validate_port_collisions(application, result)
        return result

    def _validate_image(self, pod: Pod, path: str, result: ValidationResult):
        """image 검증"""
        if is_blank(pod.image):
            result.add_error(f"{path}.image", "image is required")
        elif not image_has_tag(pod.image):
            result.add_warning(
                f"{path}.image",
                f"Image {pod.image} has no tag and resolves to 'latest'; deploys may not be reproducible",
            )

    def _validate_ports(self, pod: Pod, path: str, result: ValidationResult):
        """servicePorts 검증"""
        for i, port in enumerate(pod.service_ports):
            if not is_valid_port(port):
                result.add_error(
                    f"{path}.servicePorts[{i}]",
                    f"Port {port} is outside {MIN_PORT}-{MAX_PORT}",
                )

    def _validate_vars(self, pod: Pod, path: str, result: ValidationResult):
        """vars 검증"""
        seen = set()
        for var in pod.vars:
            if is_blank(var.name):
                result.add_error(f"{path}.vars", "var name is required")
            elif var.name in seen:
                result.add_error(f"{path}.vars.{var.name}", f"Duplicate var name: {var.name}")
            else:
                seen.add(var.name)

    def _validate_secrets(self, pod: Pod, path: str, result: ValidationResult):
        """secrets 검증"""
        targets = Counter()
        for i, secret in enumerate(pod.secrets):
            secret_path = f"{path}.secrets[{i}]"
            if is_blank(secret.name):
                result.add_error(f"{secret_path}.name", "secret name is required")
            if is_blank(secret.mount_path):
                result.add_error(f"{secret_path}.mountPath", "mountPath is required")
            if is_blank(secret.file_name):
                result.add_error(f"{secret_path}.fileName", "fileName is required")
            if not is_blank(secret.mount_path) and not is_blank(secret.file_name):
                targets[(secret.mount_path, secret.file_name)] += 1

        for (mount_path, file_name), count in targets.items():
            if count > 1:
                result.add_warning(
                    f"{path}.secrets",
                    f"{count} secrets mount to the same file {mount_path}/{file_name}",
                )

    def _validate_port_collisions(self, application: Application, result: ValidationResult):
        """여러 파드가 같은 포트를 쓰는지 (플랫폼 허용 여부 미확인이라 경고)"""
        claims = defaultdict(list)
        for pod in application.pods:
            for port in pod.service_ports:
                claims[port].append(pod.name)

        for port, pods in claims.items():
            if len(pods) > 1:
                result.add_warning(
                    "application.pods",
                    f"Port {port} is used by multiple pods: {', '.join(pods)}",
                )


def validate(application: Application) -> ValidationResult:
    """Application 검증 (ManifestValidator().validate 단축)"""
    return ManifestValidator().validate(application)
