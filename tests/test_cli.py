"""
CLI 테스트

종료 코드와 출력 확인 (플랫폼 호출은 patch.object로 대체)
"""

import json

import pytest
from unittest.mock import AsyncMock, patch

from nexlayer_kit.cli import main
from nexlayer_kit.errors import CollaboratorError
from nexlayer_kit.manifest import parse
from nexlayer_kit.platform import NexlayerClient, DeploymentResult, RemoteValidationResult, Reservation


@pytest.fixture
def definition_file(tmp_path, blog_pods):
    path = tmp_path / "app.json"
    path.write_text(json.dumps({"application": {"name": "blog", "pods": blog_pods}}), encoding="utf-8")
    return path


class TestRenderCommand:
    """render 명령어 테스트"""

    def test_render_stdout(self, definition_file, blog_yaml, capsys):
        assert main(["render", str(definition_file)]) == 0
        assert capsys.readouterr().out == blog_yaml

    def test_render_to_file(self, definition_file, tmp_path, blog_app):
        output = tmp_path / "nexlayer.yaml"
        assert main(["render", str(definition_file), "-o", str(output)]) == 0
        assert parse(output.read_text(encoding="utf-8")) == blog_app

    def test_render_flat_definition(self, tmp_path, blog_pods, blog_yaml, capsys):
        """application 키 없이 name/pods만 있는 정의"""
        path = tmp_path / "app.json"
        path.write_text(json.dumps({"name": "blog", "pods": blog_pods}), encoding="utf-8")
        assert main(["render", str(path)]) == 0
        assert capsys.readouterr().out == blog_yaml

    def test_render_invalid(self, tmp_path, capsys):
        path = tmp_path / "app.json"
        path.write_text(json.dumps({"name": "x", "pods": [
            {"name": "a", "image": "img", "servicePorts": [99999]},
        ]}), encoding="utf-8")
        assert main(["render", str(path)]) == 1
        assert "[FAIL]" in capsys.readouterr().out

    def test_render_missing_file(self, tmp_path):
        assert main(["render", str(tmp_path / "missing.json")]) == 1


class TestValidateCommand:
    """validate 명령어 테스트"""

    def test_valid(self, blog_yaml_file, capsys):
        assert main(["validate", str(blog_yaml_file)]) == 0
        assert "OK" in capsys.readouterr().out

    def test_invalid(self, tmp_path, capsys):
        path = tmp_path / "nexlayer.yaml"
        path.write_text("application:\n  name: x\n  pods: []\n", encoding="utf-8")
        assert main(["validate", str(path)]) == 1
        assert "at least one pod is required" in capsys.readouterr().out

    def test_json_output(self, blog_yaml_file, capsys):
        assert main(["validate", str(blog_yaml_file), "--json"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["local"] == {"valid": True, "errors": [], "warnings": []}

    def test_remote(self, blog_yaml_file):
        with patch.object(
            NexlayerClient,
            "validate_yaml",
            new_callable=AsyncMock,
            return_value=RemoteValidationResult(valid=False, errors=["bad image"]),
        ) as mock_validate:
            assert main(["validate", str(blog_yaml_file), "--remote"]) == 1
        mock_validate.assert_awaited_once()


class TestPlatformCommands:
    """배포/예약 명령어 테스트"""

    def test_deploy(self, blog_yaml_file, blog_yaml, deployment_data, capsys):
        with patch.object(
            NexlayerClient,
            "start_user_deployment",
            new_callable=AsyncMock,
            return_value=DeploymentResult(**deployment_data),
        ) as mock_deploy:
            assert main(["--session-token", "sess_abc123", "deploy", str(blog_yaml_file)]) == 0

        mock_deploy.assert_awaited_once_with(blog_yaml)
        assert "https://blog.alpha.nexlayer.ai" in capsys.readouterr().out

    def test_deploy_invalid_file(self, tmp_path):
        """검증 실패 시 배포하지 않음"""
        path = tmp_path / "nexlayer.yaml"
        path.write_text("application:\n  name: x\n", encoding="utf-8")
        with patch.object(NexlayerClient, "start_user_deployment", new_callable=AsyncMock) as mock_deploy:
            assert main(["deploy", str(path)]) == 1
        mock_deploy.assert_not_called()

    def test_extend_failure(self, capsys):
        with patch.object(
            NexlayerClient,
            "extend_deployment",
            new_callable=AsyncMock,
            side_effect=CollaboratorError("extend deployment", "Application not found", status_code=404),
        ):
            assert main(["extend", "missing"]) == 1
        assert "Failed to extend deployment" in capsys.readouterr().out

    def test_extend_without_token(self, capsys):
        """토큰 없이 연장하면 실패"""
        assert main(["extend", "blog"]) == 1
        assert "session token is required" in capsys.readouterr().out

    def test_claim_json(self, deployment_data, capsys):
        with patch.object(
            NexlayerClient,
            "claim_deployment",
            new_callable=AsyncMock,
            return_value=DeploymentResult(**deployment_data),
        ):
            assert main(["claim", "blog", "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["applicationName"] == "blog"

    def test_reservation_add(self):
        with patch.object(NexlayerClient, "add_deployment_reservation", new_callable=AsyncMock) as mock_add:
            assert main(["reservation", "add", "blog"]) == 0
        mock_add.assert_awaited_once_with("blog")

    def test_reservation_remove_all(self):
        with patch.object(NexlayerClient, "remove_all_reservations", new_callable=AsyncMock) as mock_remove:
            assert main(["reservation", "remove"]) == 0
        mock_remove.assert_awaited_once()

    def test_reservation_add_requires_name(self):
        with pytest.raises(SystemExit):
            main(["reservation", "add"])

    def test_reservations(self, capsys):
        with patch.object(
            NexlayerClient,
            "get_reservations",
            new_callable=AsyncMock,
            return_value=[Reservation(applicationName="blog", createdAt="2024-01-01", expiresAt="2024-01-02")],
        ):
            assert main(["reservations"]) == 0
        assert "blog" in capsys.readouterr().out


class TestScaffoldCommands:
    """스캐폴딩 명령어 테스트"""

    def test_dockerfile(self, capsys):
        assert main(["dockerfile", "python", "--port", "8000"]) == 0
        assert "EXPOSE 8000" in capsys.readouterr().out

    def test_scaffold(self, tmp_path):
        assert main(["scaffold", "python", "hello", "--output-dir", str(tmp_path)]) == 0
        assert (tmp_path / "hello" / "app.py").is_file()

    def test_analyze(self, tmp_path, capsys):
        (tmp_path / "app.py").write_text("", encoding="utf-8")
        assert main(["analyze", str(tmp_path), "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["type"] == "python"

    def test_analyze_missing(self, tmp_path):
        assert main(["analyze", str(tmp_path / "missing")]) == 1

    def test_no_command(self, capsys):
        assert main([]) == 0
