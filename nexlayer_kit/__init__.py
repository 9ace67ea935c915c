"""
nexlayer-kit
============

Nexlayer 배포용 nexlayer.yaml 모델/생성/파싱/검증 라이브러리와
플랫폼 API 클라이언트, 스캐폴딩 도구

사용법:
    from nexlayer_kit import build, render, validate
    from nexlayer_kit.platform import NexlayerClient

Example:
    app = build("blog", [
        {"name": "db", "image": "postgres:16", "servicePorts": [5432]},
        {"name": "web", "image": "ghcr.io/acme/blog:1.4.2", "servicePorts": [3000],
         "vars": {"DATABASE_URL": "postgres://db.pod:5432/blog"}},
    ])

    async with NexlayerClient(session_token="sess_abc123") as client:
        result = await client.start_user_deployment(render(app))
"""

__version__ = "0.1.0"

from .errors import InvalidSpec, ParseError, CollaboratorError
from .config import NexlayerConfig, get_config, set_config
from .manifest import (
    Application,
    Pod,
    EnvVar,
    Secret,
    build,
    render,
    parse,
    parse_file,
    ManifestValidator,
    ValidationResult,
    validate,
)

__all__ = [
    # Errors
    "InvalidSpec",
    "ParseError",
    "CollaboratorError",
    # Config
    "NexlayerConfig",
    "get_config",
    "set_config",
    # Manifest
    "Application",
    "Pod",
    "EnvVar",
    "Secret",
    "build",
    "render",
    "parse",
    "parse_file",
    "ManifestValidator",
    "ValidationResult",
    "validate",
]
