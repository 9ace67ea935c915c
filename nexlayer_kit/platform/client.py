"""
Nexlayer 플랫폼 클라이언트

배포 시작/연장/클레임, 예약 관리, 스키마 조회, 원격 검증 API를 호출합니다.
클라이언트는 전역으로 캐시하지 않고 호출자가 생성해서 넘깁니다.
"""

import logging
from typing import Optional, Any, List, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..config import DEFAULT_BASE_URL, NexlayerConfig
from ..errors import CollaboratorError
from .models import (
    ApiResponse,
    DeploymentResult,
    Reservation,
    RemoteValidationResult,
    SchemaResult,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class NexlayerClient:
    """
    Nexlayer API 클라이언트

    Example:
        async with NexlayerClient(session_token="sess_abc123") as client:
            result = await client.start_user_deployment(render(app))
            print(result.status, result.url)

            await client.add_deployment_reservation(result.application_name)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session_token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session_token = session_token
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(cls, config: NexlayerConfig, **kwargs) -> "NexlayerClient":
        """설정에서 클라이언트 생성"""
        return cls(
            base_url=config.base_url,
            session_token=config.session_token,
            timeout=config.timeout,
            **kwargs,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 반환"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """클라이언트 종료"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "NexlayerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _token(self, session_token: Optional[str], operation: str) -> str:
        """호출별 토큰, 없으면 클라이언트 토큰"""
        token = session_token or self.session_token
        if not token:
            raise ValueError(f"A session token is required to {operation}")
        return token

    async def _request(self, operation: str, method: str, path: str, **kwargs) -> Any:
        """요청 전송 후 응답 봉투의 data 반환"""
        client = await self._get_client()

        try:
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error = _error_message(e.response)
            logger.error(f"{operation} failed: HTTP {e.response.status_code} {error}")
            raise CollaboratorError(operation, error, status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            logger.error(f"{operation} failed: {e!r}")
            raise CollaboratorError(operation, str(e) or type(e).__name__, transport=True) from e

        if not response.content:
            return None

        try:
            body = response.json()
        except ValueError as e:
            raise CollaboratorError(
                operation, "Response is not valid JSON", status_code=response.status_code
            ) from e

        if isinstance(body, dict) and "success" in body:
            envelope = ApiResponse(**body)
            if not envelope.success:
                error = envelope.error or envelope.message or "Unknown error"
                logger.error(f"{operation} failed: {error}")
                raise CollaboratorError(operation, error, status_code=response.status_code)
            return envelope.data
        return body

    async def _deployment(self, operation: str, path: str, **kwargs) -> DeploymentResult:
        data = await self._request(operation, "POST", path, **kwargs)
        if not isinstance(data, dict):
            raise CollaboratorError(operation, "Response contained no deployment data")
        result = _load(operation, DeploymentResult, data)
        logger.info(f"{operation}: {result.application_name} is {result.status.value}")
        return result

    # =========================================================================
    # 배포 API
    # =========================================================================

    async def start_user_deployment(
        self,
        yaml_content: str,
        session_token: Optional[str] = None,
    ) -> DeploymentResult:
        """nexlayer.yaml로 배포 시작 (토큰이 없으면 새 세션 발급)"""
        token = session_token or self.session_token
        params = {"sessionToken": token} if token else None

        return await self._deployment(
            "start deployment",
            "/startUserDeployment",
            content=yaml_content.encode("utf-8"),
            headers={"Content-Type": "text/x-yaml"},
            params=params,
        )

    async def extend_deployment(
        self,
        application_name: str,
        session_token: Optional[str] = None,
    ) -> DeploymentResult:
        """배포 만료 연장"""
        operation = "extend deployment"
        payload = {
            "sessionToken": self._token(session_token, operation),
            "applicationName": application_name,
        }
        return await self._deployment(operation, "/extendDeployment", json=payload)

    async def claim_deployment(
        self,
        application_name: str,
        session_token: Optional[str] = None,
    ) -> DeploymentResult:
        """임시 배포를 계정으로 클레임"""
        operation = "claim deployment"
        payload = {
            "sessionToken": self._token(session_token, operation),
            "applicationName": application_name,
        }
        return await self._deployment(operation, "/claimDeployment", json=payload)

    # =========================================================================
    # 예약 API
    # =========================================================================

    async def add_deployment_reservation(
        self,
        application_name: str,
        session_token: Optional[str] = None,
    ) -> None:
        """배포 예약 추가"""
        operation = "add deployment reservation"
        await self._request(operation, "POST", "/addDeploymentReservation", json={
            "sessionToken": self._token(session_token, operation),
            "applicationName": application_name,
        })
        logger.info(f"Reservation added: {application_name}")

    async def remove_deployment_reservation(
        self,
        application_name: str,
        session_token: Optional[str] = None,
    ) -> None:
        """배포 예약 제거"""
        operation = "remove deployment reservation"
        await self._request(operation, "POST", "/removeDeploymentReservation", json={
            "sessionToken": self._token(session_token, operation),
            "applicationName": application_name,
        })
        logger.info(f"Reservation removed: {application_name}")

    async def remove_all_reservations(self, session_token: Optional[str] = None) -> None:
        """세션의 모든 예약 제거"""
        operation = "remove all reservations"
        await self._request(operation, "POST", "/removeReservations", json={
            "sessionToken": self._token(session_token, operation),
        })
        logger.info("All reservations removed")

    async def get_reservations(self, session_token: Optional[str] = None) -> List[Reservation]:
        """세션의 예약 목록"""
        operation = "get reservations"
        data = await self._request(operation, "GET", "/getReservations", params={
            "sessionToken": self._token(session_token, operation),
        })
        return [_load(operation, Reservation, item) for item in data or []]

    # =========================================================================
    # 스키마/검증/피드백
    # =========================================================================

    async def get_schema(self) -> SchemaResult:
        """nexlayer.yaml 스키마 조회"""
        operation = "get schema"
        data = await self._request(operation, "GET", "/schema")
        if not isinstance(data, dict):
            raise CollaboratorError(operation, "Response contained no schema")
        return _load(operation, SchemaResult, data)

    async def validate_yaml(self, yaml_content: str) -> RemoteValidationResult:
        """플랫폼 측 YAML 검증 (로컬 검증보다 우선)"""
        operation = "validate YAML"
        data = await self._request(operation, "POST", "/validate", json={
            "yamlContent": yaml_content,
        })
        if not isinstance(data, dict):
            raise CollaboratorError(operation, "Response contained no validation result")
        return _load(operation, RemoteValidationResult, data)

    async def send_feedback(self, feedback: str) -> None:
        """피드백 전송"""
        await self._request("send feedback", "POST", "/feedback", json={"feedback": feedback})


def _error_message(response: httpx.Response) -> str:
    """오류 응답에서 메시지 추출"""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("error") or body.get("message") or body)
    return str(body)


def _load(operation: str, model: Type[ModelT], data: Any) -> ModelT:
    """응답 데이터를 모델로 변환 (형식이 다르면 CollaboratorError)"""
    if not isinstance(data, dict):
        raise CollaboratorError(operation, f"Unexpected response: {data!r}")
    try:
        return model(**data)
    except ValidationError as e:
        raise CollaboratorError(operation, f"Unexpected response: {e}") from e
