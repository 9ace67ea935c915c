"""
Nexlayer API 데이터 모델
"""

from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """공통 응답 봉투 ({success, data, error, message})"""
    success: bool = True
    data: Optional[Any] = None
    error: Optional[str] = None
    message: Optional[str] = None


class DeploymentStatus(str, Enum):
    """배포 상태"""
    DEPLOYING = "deploying"
    RUNNING = "running"
    ERROR = "error"


class DeploymentResult(BaseModel):
    """배포 시작/연장/클레임 결과"""
    session_token: str = Field(..., alias="sessionToken")
    application_name: str = Field(..., alias="applicationName")
    status: DeploymentStatus
    url: Optional[str] = None
    message: Optional[str] = None

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "sessionToken": "sess_abc123",
                "applicationName": "blog",
                "status": "deploying",
                "url": "https://blog.alpha.nexlayer.ai",
            }
        }


class Reservation(BaseModel):
    """배포 예약"""
    application_name: str = Field(..., alias="applicationName")
    created_at: str = Field(..., alias="createdAt")
    expires_at: str = Field(..., alias="expiresAt")
    session_token: Optional[str] = Field(None, alias="sessionToken")

    class Config:
        populate_by_name = True


class RemoteValidationResult(BaseModel):
    """플랫폼 측 YAML 검증 결과"""
    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class SchemaResult(BaseModel):
    """nexlayer.yaml 스키마"""
    schema_definition: Dict[str, Any] = Field(..., alias="schema")
    version: str

    class Config:
        populate_by_name = True
