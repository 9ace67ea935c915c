"""
nexlayer.yaml 검증기 테스트
"""

import pytest

from nexlayer_kit.manifest import (
    Application,
    Pod,
    EnvVar,
    Secret,
    ManifestValidator,
    ValidationResult,
    image_has_tag,
    validate,
)


@pytest.fixture
def validator():
    return ManifestValidator()


class TestValidationResult:
    """ValidationResult 테스트"""

    def test_defaults(self):
        result = ValidationResult()
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_add_error(self):
        result = ValidationResult()
        result.add_error("pods[0].image", "image is required")
        assert result.valid is False
        assert result.errors == ["pods[0].image: image is required"]

    def test_add_warning_keeps_valid(self):
        result = ValidationResult()
        result.add_warning("pods[0].image", "no tag")
        assert result.valid is True
        assert result.warnings == ["pods[0].image: no tag"]


class TestValidate:
    """Application 검증 테스트"""

    def test_valid_app(self, validator, full_app):
        result = validator.validate(full_app)
        assert result.valid
        assert result.errors == []
        assert result.warnings == []
        assert result.manifest is full_app

    def test_accumulates_errors(self, validator):
        """독립적인 문제를 모두 보고"""
        app = Application(name="x", pods=(
            Pod(
                name="a",
                image="img:1",
                vars=(EnvVar("A", "1"), EnvVar("A", "2")),
                secrets=(Secret(name="s", data="d", mount_path="", file_name="f"),),
            ),
        ))
        result = validator.validate(app)

        assert not result.valid
        assert len(result.errors) == 2
        assert "pods[0].vars.A: Duplicate var name: A" in result.errors
        assert "pods[0].secrets[0].mountPath: mountPath is required" in result.errors

    def test_accumulates_from_yaml(self, validator):
        """YAML에서 읽은 중복 키와 빈 mountPath"""
        result = validator.validate_string(
            "application:\n"
            "  name: x\n"
            "  pods:\n"
            "    - name: a\n"
            "      image: img:1\n"
            "      vars:\n"
            "        A: one\n"
            "        A: two\n"
            "      secrets:\n"
            "        - name: s\n"
            "          data: d\n"
            '          mountPath: ""\n'
            "          fileName: f\n"
        )
        assert not result.valid
        assert len(result.errors) == 2

    def test_empty_app(self, validator):
        result = validator.validate(Application(name="", pods=()))
        assert result.errors == [
            "application.name: application name is required",
            "application.pods: at least one pod is required",
        ]

    def test_duplicate_pod_names(self, validator):
        app = Application(name="x", pods=(
            Pod(name="a", image="img:1"),
            Pod(name="a", image="img:2"),
        ))
        result = validator.validate(app)
        assert result.errors == ["pods[1].name: Duplicate pod name: a"]

    def test_blank_fields(self, validator):
        app = Application(name="x", pods=(
            Pod(name=" ", image="", vars=(EnvVar("", "v"),),
                secrets=(Secret(name="", data="", mount_path="/m", file_name=""),)),
        ))
        result = validator.validate(app)
        assert result.errors == [
            "pods[0].name: pod name is required",
            "pods[0].image: image is required",
            "pods[0].vars: var name is required",
            "pods[0].secrets[0].name: secret name is required",
            "pods[0].secrets[0].fileName: fileName is required",
        ]

    @pytest.mark.parametrize("port", [0, 65536, 99999])
    def test_port_out_of_range(self, validator, port):
        app = Application(name="x", pods=(Pod(name="a", image="img:1", service_ports=(port,)),))
        result = validator.validate(app)
        assert result.errors == [f"pods[0].servicePorts[0]: Port {port} is outside 1-65535"]

    def test_module_validate(self, full_app):
        assert validate(full_app).valid


class TestWarnings:
    """경고 테스트 (valid 유지)"""

    def test_untagged_image(self, validator):
        app = Application(name="x", pods=(Pod(name="a", image="nginx"),))
        result = validator.validate(app)
        assert result.valid
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith("pods[0].image:")

    def test_duplicate_secret_target(self, validator):
        """같은 파일로 마운트되는 시크릿"""
        secret = Secret(name="s1", data="a", mount_path="/etc/s", file_name="key")
        other = Secret(name="s2", data="b", mount_path="/etc/s", file_name="key")
        app = Application(name="x", pods=(Pod(name="a", image="img:1", secrets=(secret, other)),))
        result = validator.validate(app)
        assert result.valid
        assert result.warnings == ["pods[0].secrets: 2 secrets mount to the same file /etc/s/key"]

    def test_port_collision_across_pods(self, validator):
        """여러 파드가 같은 포트 사용"""
        app = Application(name="x", pods=(
            Pod(name="a", image="img:1", service_ports=(80,)),
            Pod(name="b", image="img:1", service_ports=(80, 81)),
        ))
        result = validator.validate(app)
        assert result.valid
        assert result.warnings == ["application.pods: Port 80 is used by multiple pods: a, b"]


class TestImageTag:
    """이미지 태그 판별 테스트"""

    @pytest.mark.parametrize("image", [
        "nginx:1.25",
        "ghcr.io/acme/app:1.0",
        "registry.local:5000/app:2",
        "app@sha256:abcd",
        "ttl.sh/my-app:1h",
    ])
    def test_tagged(self, image):
        assert image_has_tag(image)

    @pytest.mark.parametrize("image", ["nginx", "ghcr.io/acme/app", "registry.local:5000/app"])
    def test_untagged(self, image):
        assert not image_has_tag(image)


class TestValidateFile:
    """파일/문자열 검증 테스트"""

    def test_validate_file(self, validator, blog_yaml_file):
        result = validator.validate_file(str(blog_yaml_file))
        assert result.valid
        assert result.manifest.name == "blog"

    def test_file_not_found(self, validator, tmp_path):
        result = validator.validate_file(str(tmp_path / "nexlayer.yaml"))
        assert not result.valid
        assert result.errors[0].startswith("file: File not found")

    def test_parse_error_reported(self, validator):
        """파싱 실패는 yaml 경로의 오류로"""
        result = validator.validate_string("application:\n  pods: []\n")
        assert not result.valid
        assert result.errors[0].startswith("yaml: Missing required key: application.name")
        assert result.manifest is None

    def test_to_dict(self, validator, blog_yaml):
        assert validator.validate_string(blog_yaml).to_dict() == {
            "valid": True,
            "errors": [],
            "warnings": [],
        }
