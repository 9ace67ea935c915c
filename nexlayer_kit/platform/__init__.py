"""
Nexlayer 플랫폼 클라이언트 모듈

배포 API를 호출하는 클라이언트와 응답 모델
"""

from .client import NexlayerClient
from .models import (
    ApiResponse,
    DeploymentStatus,
    DeploymentResult,
    Reservation,
    RemoteValidationResult,
    SchemaResult,
)

__all__ = [
    "NexlayerClient",
    "ApiResponse",
    "DeploymentStatus",
    "DeploymentResult",
    "Reservation",
    "RemoteValidationResult",
    "SchemaResult",
]
