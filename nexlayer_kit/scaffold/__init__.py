"""
프로젝트 스캐폴딩 모듈

Dockerfile, 프레임워크별 초기 파일, nexlayer.yaml을 생성합니다.
"""

from .dockerfile import generate_dockerfile, generate_nginx_config, DOCKERFILE_TYPES
from .project import (
    GeneratedFile,
    FileGenerationResult,
    ProjectAnalysis,
    generate_full_stack,
    generate_project,
    analyze_project,
    write_files,
    FRONTEND_TYPES,
    BACKEND_TYPES,
    PROJECT_TYPES,
)

__all__ = [
    "generate_dockerfile",
    "generate_nginx_config",
    "DOCKERFILE_TYPES",
    "GeneratedFile",
    "FileGenerationResult",
    "ProjectAnalysis",
    "generate_full_stack",
    "generate_project",
    "analyze_project",
    "write_files",
    "FRONTEND_TYPES",
    "BACKEND_TYPES",
    "PROJECT_TYPES",
]
