"""
도구 입력/출력 모델

도구 호출 파라미터는 여기서 먼저 검증한 뒤 매니페스트/클라이언트 코드로 넘어갑니다.
"""

from typing import List, Optional, Dict, Any, Literal
from pydantic import BaseModel, Field


class ToolInput(BaseModel):
    """도구 입력 공통 설정 (camelCase/snake_case 모두 허용, 모르는 필드 거부)"""

    class Config:
        populate_by_name = True
        extra = "forbid"


# =============================================================================
# Manifest
# =============================================================================

class SecretInput(ToolInput):
    """시크릿 정의"""
    name: str = Field(..., description="시크릿 이름")
    data: str = Field(..., description="시크릿 내용 (인코딩하지 않고 그대로 전달)")
    mount_path: str = Field(..., alias="mountPath", description="마운트 디렉토리")
    file_name: str = Field(..., alias="fileName", description="파일 이름")


class PodInput(ToolInput):
    """파드 정의"""
    name: str = Field(..., description="파드 이름")
    image: str = Field(..., description="컨테이너 이미지 (repository[:tag])")
    service_ports: List[int] = Field(default_factory=list, alias="servicePorts")
    vars: Dict[str, str] = Field(default_factory=dict, description="환경변수")
    secrets: List[SecretInput] = Field(default_factory=list)

    def to_spec(self) -> Dict[str, Any]:
        """manifest.build()에 넘길 파드 정의"""
        return {
            "name": self.name,
            "image": self.image,
            "servicePorts": list(self.service_ports),
            "vars": dict(self.vars),
            "secrets": [
                {
                    "name": s.name,
                    "data": s.data,
                    "mountPath": s.mount_path,
                    "fileName": s.file_name,
                }
                for s in self.secrets
            ],
        }


class GenerateManifestRequest(ToolInput):
    """nexlayer.yaml 생성 요청"""
    application_name: str = Field(..., alias="applicationName")
    pods: List[PodInput]
    layout: Literal["nested", "sibling"] = "nested"
    output_path: Optional[str] = Field(None, alias="outputPath", description="지정하면 파일로 저장")

    class Config:
        json_schema_extra = {
            "example": {
                "applicationName": "blog",
                "pods": [
                    {
                        "name": "web",
                        "image": "nginx:1.25",
                        "servicePorts": [80],
                        "vars": {"MODE": "prod"},
                    }
                ],
            }
        }


class ValidateManifestRequest(ToolInput):
    """nexlayer.yaml 검증 요청"""
    yaml_content: str = Field(..., alias="yamlContent")
    remote: bool = Field(False, description="로컬 검증 통과 시 플랫폼 검증도 수행")


# =============================================================================
# Scaffold
# =============================================================================

DockerfileType = Literal[
    "node", "python", "go", "rust", "nextjs", "react", "vue",
    "angular", "next", "php", "java", "dotnet",
]


class GenerateDockerfileRequest(ToolInput):
    """Dockerfile 생성 요청"""
    name: str
    type: DockerfileType
    base_image: Optional[str] = Field(None, alias="baseImage")
    port: int = 3000
    build_command: Optional[str] = Field(None, alias="buildCommand")
    start_command: Optional[str] = Field(None, alias="startCommand")
    dependencies: Optional[List[str]] = None
    custom_dockerfile: Optional[str] = Field(None, alias="customDockerfile")


class FrontendInput(ToolInput):
    type: Literal["nextjs", "next", "react", "vue"]
    port: int = 3000


class BackendInput(ToolInput):
    type: Literal["node", "python", "go", "rust"]
    port: int = 8000


class DatabaseInput(ToolInput):
    type: Literal["postgres", "mysql", "mongodb"]


class OpenAIInput(ToolInput):
    enabled: bool
    api_key: Optional[str] = Field(None, alias="apiKey")


class GenerateFullStackRequest(ToolInput):
    """풀스택 프로젝트 생성 요청"""
    app_name: str = Field(..., alias="appName")
    frontend: Optional[FrontendInput] = None
    backend: Optional[BackendInput] = None
    database: Optional[DatabaseInput] = None
    openai: Optional[OpenAIInput] = None


class GenerateFilesRequest(ToolInput):
    """로컬 디렉토리에 프로젝트 파일 생성 요청"""
    project_type: Literal["react", "next", "vue", "node", "python", "fullstack"] = Field(
        ..., alias="projectType"
    )
    project_name: str = Field(..., alias="projectName")
    output_dir: str = Field(".", alias="outputDir")


class AnalyzeProjectRequest(ToolInput):
    """로컬 프로젝트 분석 요청"""
    path: str = "."


# =============================================================================
# Platform
# =============================================================================

class DeployApplicationRequest(ToolInput):
    """단일 파드 애플리케이션 배포 요청"""
    name: str
    image: str
    service_ports: List[int] = Field(default_factory=lambda: [3000], alias="servicePorts")
    vars: Dict[str, str] = Field(default_factory=dict)
    session_token: Optional[str] = Field(None, alias="sessionToken")


class DeployLocalYamlRequest(ToolInput):
    """로컬 nexlayer.yaml 배포 요청"""
    yaml_file_path: str = Field(..., alias="yamlFilePath")
    session_token: Optional[str] = Field(None, alias="sessionToken")


class DeploymentRequest(ToolInput):
    """기존 배포 대상 요청 (연장/클레임)"""
    application_name: str = Field(..., alias="applicationName")
    session_token: Optional[str] = Field(None, alias="sessionToken")


class ReservationRequest(DeploymentRequest):
    """예약 추가/제거 요청"""
    action: Literal["add", "remove"]


class SessionRequest(ToolInput):
    """세션 단위 요청"""
    session_token: Optional[str] = Field(None, alias="sessionToken")


class EmptyRequest(ToolInput):
    """파라미터 없음"""


class FeedbackRequest(ToolInput):
    feedback: str


# =============================================================================
# Output
# =============================================================================

class ToolResult(BaseModel):
    """도구 실행 결과"""
    success: bool = Field(..., description="성공 여부")
    text: str = Field(..., description="사용자에게 그대로 보여줄 메시지")
    data: Optional[Dict[str, Any]] = Field(None, description="구조화된 결과")


class ToolInfo(BaseModel):
    """도구 목록 항목"""
    name: str
    description: str
    input_schema: Dict[str, Any] = Field(..., alias="inputSchema")

    class Config:
        populate_by_name = True
