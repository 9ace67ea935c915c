"""
도구 핸들러

도구 호출을 매니페스트/스캐폴딩/플랫폼 클라이언트 호출로 변환하고,
결과를 사용자에게 보여줄 텍스트로 정리합니다.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, Type, List

from pydantic import BaseModel

from ..config import NexlayerConfig, get_config
from ..errors import InvalidSpec, ParseError, CollaboratorError
from ..manifest import ManifestValidator, build, render
from ..platform import NexlayerClient, DeploymentResult
from ..scaffold import (
    analyze_project,
    generate_dockerfile,
    generate_full_stack,
    generate_project,
    write_files,
)
from .models import (
    ToolResult,
    GenerateManifestRequest,
    ValidateManifestRequest,
    GenerateDockerfileRequest,
    GenerateFullStackRequest,
    GenerateFilesRequest,
    AnalyzeProjectRequest,
    DeployApplicationRequest,
    DeployLocalYamlRequest,
    DeploymentRequest,
    ReservationRequest,
    SessionRequest,
    EmptyRequest,
    FeedbackRequest,
)

logger = logging.getLogger(__name__)

# 사용자에게 그대로 보여주는 예외 (그 외는 전파)
HANDLED_ERRORS = (InvalidSpec, ParseError, CollaboratorError, ValueError, OSError)


@dataclass(frozen=True)
class ToolSpec:
    """도구 정의"""
    name: str
    description: str
    request_model: Type[BaseModel]
    method: str
    action: str  # 실패 메시지용 ("Failed to <action>: ...")


TOOLS: List[ToolSpec] = [
    # Manifest
    ToolSpec("generate-nexlayer-yaml", "Generate a nexlayer.yaml manifest from application and pod definitions.",
             GenerateManifestRequest, "generate_manifest", "generate nexlayer.yaml"),
    ToolSpec("validate-nexlayer-yaml", "Validate nexlayer.yaml content locally, optionally also against the platform.",
             ValidateManifestRequest, "validate_manifest", "validate nexlayer.yaml"),
    # Scaffold
    ToolSpec("generate-dockerfile", "Generate a Dockerfile for a framework or language.",
             GenerateDockerfileRequest, "generate_dockerfile", "generate Dockerfile"),
    ToolSpec("generate-full-stack-project", "Generate frontend, backend, database files and a nexlayer.yaml.",
             GenerateFullStackRequest, "generate_full_stack_project", "generate full-stack project"),
    ToolSpec("generate-files-locally", "Write a starter project with Dockerfile and nexlayer.yaml to a directory.",
             GenerateFilesRequest, "generate_files_locally", "generate files locally"),
    ToolSpec("analyze-project", "Detect the project type, framework and port of a local directory.",
             AnalyzeProjectRequest, "analyze_project", "analyze project"),
    # Platform
    ToolSpec("deploy-application", "Deploy a single-pod application to Nexlayer.",
             DeployApplicationRequest, "deploy_application", "deploy application"),
    ToolSpec("deploy-local-yaml", "Validate and deploy a local nexlayer.yaml file.",
             DeployLocalYamlRequest, "deploy_local_yaml", "deploy from local YAML"),
    ToolSpec("extend-deployment", "Extend the lifetime of a deployment.",
             DeploymentRequest, "extend_deployment", "extend deployment"),
    ToolSpec("claim-deployment", "Claim a temporary deployment.",
             DeploymentRequest, "claim_deployment", "claim deployment"),
    ToolSpec("manage-reservation", "Add or remove a deployment reservation.",
             ReservationRequest, "manage_reservation", "manage reservation"),
    ToolSpec("get-reservations", "List the reservations of a session.",
             SessionRequest, "get_reservations", "get reservations"),
    ToolSpec("get-schema", "Fetch the current nexlayer.yaml schema from the platform.",
             EmptyRequest, "get_schema", "get schema"),
    ToolSpec("send-feedback", "Send feedback to the Nexlayer team.",
             FeedbackRequest, "send_feedback", "send feedback"),
]

TOOLS_BY_NAME: Dict[str, ToolSpec] = {tool.name: tool for tool in TOOLS}


class UnknownToolError(KeyError):
    """등록되지 않은 도구"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolHandler:
    """
    도구 핸들러

    Example:
        client = NexlayerClient(session_token="sess_abc123")
        handler = ToolHandler(client)

        result = await handler.call("generate-nexlayer-yaml", {
            "applicationName": "blog",
            "pods": [{"name": "web", "image": "nginx:1.25", "servicePorts": [80]}],
        })
        print(result.text)
    """

    def __init__(
        self,
        client: Optional[NexlayerClient] = None,
        config: Optional[NexlayerConfig] = None,
        validator: Optional[ManifestValidator] = None,
    ):
        self.client = client
        self.config = config or get_config()
        self.validator = validator or ManifestValidator()

    def _require_client(self) -> NexlayerClient:
        if self.client is None:
            raise ValueError("Nexlayer client is not configured")
        return self.client

    async def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """
        이름으로 도구 실행

        Raises:
            UnknownToolError: 등록되지 않은 도구
            pydantic.ValidationError: 입력 형식 오류
        """
        tool = TOOLS_BY_NAME.get(name)
        if tool is None:
            raise UnknownToolError(name)

        request = tool.request_model.model_validate(arguments or {})
        return await self.invoke(tool, request)

    async def invoke(self, tool: ToolSpec, request: BaseModel) -> ToolResult:
        """검증된 입력으로 도구 실행 (처리 가능한 오류는 실패 결과로 변환)"""
        method = getattr(self, tool.method)
        try:
            return await method(request)
        except HANDLED_ERRORS as e:
            logger.warning(f"Tool {tool.name} failed: {e}")
            # CollaboratorError 메시지는 이미 "Failed to ..." 형식
            text = str(e) if isinstance(e, CollaboratorError) else f"Failed to {tool.action}: {e}"
            return ToolResult(success=False, text=text)

    # =========================================================================
    # Manifest
    # =========================================================================

    async def generate_manifest(self, request: GenerateManifestRequest) -> ToolResult:
        app = build(request.application_name, [pod.to_spec() for pod in request.pods])
        yaml_content = render(app, layout=request.layout)
        validation = self.validator.validate(app)

        text = (
            f"Generated nexlayer.yaml for {app.name}:\n\n```yaml\n{yaml_content}```\n\n"
        )
        if request.output_path:
            path = Path(request.output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(yaml_content, encoding="utf-8")
            text += f"Saved to `{path}`."
        else:
            text += "Save this as `nexlayer.yaml` in your project directory."
        text += _format_findings(validation.warnings, "Warnings")

        return ToolResult(
            success=True,
            text=text,
            data={"yaml": yaml_content, "warnings": validation.warnings},
        )

    async def validate_manifest(self, request: ValidateManifestRequest) -> ToolResult:
        local = self.validator.validate_string(request.yaml_content)
        data: Dict[str, Any] = {"local": local.to_dict()}

        if not local.valid:
            text = "nexlayer.yaml is invalid." + _format_findings(local.errors, "Errors")
            text += _format_findings(local.warnings, "Warnings")
            return ToolResult(success=False, text=text, data=data)

        text = f"nexlayer.yaml for {local.manifest.name} passed local validation."
        text += _format_findings(local.warnings, "Warnings")

        if request.remote:
            remote = await self._require_client().validate_yaml(request.yaml_content)
            data["remote"] = remote.model_dump()
            if not remote.valid:
                text += "\n\nPlatform validation failed." + _format_findings(remote.errors, "Errors")
                text += _format_findings(remote.warnings, "Warnings")
                return ToolResult(success=False, text=text, data=data)
            text += "\n\nPlatform validation passed." + _format_findings(remote.warnings, "Warnings")

        return ToolResult(success=True, text=text, data=data)

    # =========================================================================
    # Scaffold
    # =========================================================================

    async def generate_dockerfile(self, request: GenerateDockerfileRequest) -> ToolResult:
        dockerfile = generate_dockerfile(
            name=request.name,
            app_type=request.type,
            port=request.port,
            base_image=request.base_image,
            build_command=request.build_command,
            start_command=request.start_command,
            dependencies=request.dependencies,
            custom_dockerfile=request.custom_dockerfile,
        )
        return ToolResult(
            success=True,
            text=(
                f"Generated Dockerfile for {request.name} ({request.type}):\n\n"
                f"```dockerfile\n{dockerfile}```\n\n"
                "Save this as `Dockerfile` in your project directory."
            ),
            data={"dockerfile": dockerfile},
        )

    async def generate_full_stack_project(self, request: GenerateFullStackRequest) -> ToolResult:
        result = generate_full_stack(
            app_name=request.app_name,
            frontend_type=request.frontend.type if request.frontend else None,
            frontend_port=request.frontend.port if request.frontend else 3000,
            backend_type=request.backend.type if request.backend else None,
            backend_port=request.backend.port if request.backend else 8000,
            database_type=request.database.type if request.database else None,
            openai_enabled=bool(request.openai and request.openai.enabled),
            openai_api_key=request.openai.api_key if request.openai else None,
            registry=self.config.registry,
            tag=self.config.image_tag,
        )
        files = "\n\n".join(f"**{f.name}** ({f.path}):\n```\n{f.content}```" for f in result.files)
        return ToolResult(
            success=True,
            text=f'Generated full-stack project "{request.app_name}":\n\n{files}\n\n' + "\n".join(result.instructions),
            data={"files": {f.path: f.content for f in result.files}, "yaml": result.manifest},
        )

    async def generate_files_locally(self, request: GenerateFilesRequest) -> ToolResult:
        result = generate_project(
            request.project_type,
            request.project_name,
            registry=self.config.registry,
            tag=self.config.image_tag,
        )
        target_dir = Path(request.output_dir).resolve() / request.project_name
        write_files(str(target_dir), result.files)

        listing = "\n".join(f"  - {path}" for path in result.paths)
        steps = "\n".join(f"{i}. {step}" for i, step in enumerate(result.instructions, 1))
        return ToolResult(
            success=True,
            text=(
                f'Generated {request.project_type} project "{request.project_name}"\n\n'
                f"Files created in: {target_dir}\n\nGenerated files:\n{listing}\n\nNext steps:\n{steps}"
            ),
            data={"directory": str(target_dir), "files": result.paths},
        )

    async def analyze_project(self, request: AnalyzeProjectRequest) -> ToolResult:
        path = Path(request.path)
        if not path.is_dir():
            raise ValueError(f"Not a directory: {request.path}")
        analysis = analyze_project(str(path))
        return ToolResult(
            success=True,
            text=(
                f"Project analysis for {path.resolve()}:\n"
                f"  - Type: {analysis.type}\n  - Port: {analysis.port}\n  - Framework: {analysis.framework}"
            ),
            data={"type": analysis.type, "port": analysis.port, "framework": analysis.framework},
        )

    # =========================================================================
    # Platform
    # =========================================================================

    async def deploy_application(self, request: DeployApplicationRequest) -> ToolResult:
        app = build(request.name, [{
            "name": request.name,
            "image": request.image,
            "servicePorts": list(request.service_ports),
            "vars": dict(request.vars),
        }])
        result = await self._require_client().start_user_deployment(
            render(app), session_token=request.session_token
        )
        return _deployment_result(f'Successfully deployed application "{request.name}"!', result)

    async def deploy_local_yaml(self, request: DeployLocalYamlRequest) -> ToolResult:
        path = Path(request.yaml_file_path)
        validation = self.validator.validate_file(str(path))
        if not validation.valid:
            return ToolResult(
                success=False,
                text=f"{path} was not deployed because it is invalid." + _format_findings(validation.errors, "Errors"),
                data={"local": validation.to_dict()},
            )

        yaml_content = path.read_text(encoding="utf-8")
        result = await self._require_client().start_user_deployment(
            yaml_content, session_token=request.session_token
        )
        return _deployment_result(f'Successfully deployed from local YAML file "{path}"!', result)

    async def extend_deployment(self, request: DeploymentRequest) -> ToolResult:
        result = await self._require_client().extend_deployment(
            request.application_name, session_token=request.session_token
        )
        return _deployment_result(f"Extended deployment {request.application_name}.", result)

    async def claim_deployment(self, request: DeploymentRequest) -> ToolResult:
        result = await self._require_client().claim_deployment(
            request.application_name, session_token=request.session_token
        )
        return _deployment_result(f"Claimed deployment {request.application_name}.", result)

    async def manage_reservation(self, request: ReservationRequest) -> ToolResult:
        client = self._require_client()
        if request.action == "add":
            await client.add_deployment_reservation(request.application_name, request.session_token)
            text = f"Added reservation for {request.application_name}."
        else:
            await client.remove_deployment_reservation(request.application_name, request.session_token)
            text = f"Removed reservation for {request.application_name}."
        return ToolResult(success=True, text=text)

    async def get_reservations(self, request: SessionRequest) -> ToolResult:
        reservations = await self._require_client().get_reservations(request.session_token)
        if not reservations:
            text = "No reservations found."
        else:
            lines = [
                f"  - {r.application_name} (created {r.created_at}, expires {r.expires_at})"
                for r in reservations
            ]
            text = f"Reservations ({len(reservations)}):\n" + "\n".join(lines)
        return ToolResult(
            success=True,
            text=text,
            data={"reservations": [r.model_dump(by_alias=True) for r in reservations]},
        )

    async def get_schema(self, request: EmptyRequest) -> ToolResult:
        schema = await self._require_client().get_schema()
        return ToolResult(
            success=True,
            text=f"nexlayer.yaml schema version {schema.version}",
            data=schema.model_dump(by_alias=True),
        )

    async def send_feedback(self, request: FeedbackRequest) -> ToolResult:
        await self._require_client().send_feedback(request.feedback)
        return ToolResult(success=True, text="Feedback sent. Thank you!")


def _format_findings(findings: List[str], title: str) -> str:
    if not findings:
        return ""
    return f"\n\n{title}:\n" + "\n".join(f"  - {item}" for item in findings)


def _deployment_result(headline: str, result: DeploymentResult) -> ToolResult:
    return ToolResult(
        success=True,
        text=(
            f"{headline}\n\n"
            f"Application Name: {result.application_name}\n"
            f"Status: {result.status.value}\n"
            f"URL: {result.url or 'Will be available shortly'}\n"
            f"Session Token: {result.session_token}"
        ),
        data=result.model_dump(by_alias=True, mode="json"),
    )
