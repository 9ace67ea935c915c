"""
nexlayer-kit - Pytest Configuration

테스트에서 사용할 공통 fixture들을 정의합니다.
"""

import json
import sys
from pathlib import Path

import httpx
import pytest

# 프로젝트 루트를 Python 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from nexlayer_kit.config import NexlayerConfig, set_config
from nexlayer_kit.manifest import build
from nexlayer_kit.platform import NexlayerClient


BLOG_YAML = """\
application:
  name: "blog"
  pods:
    - name: "web"
      image: "nginx:1.25"
      servicePorts:
        - 80
      vars:
        MODE: "prod"
"""


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """환경변수 영향 없이 기본 설정으로 고정"""
    for key in (
        "NEXLAYER_BASE_URL",
        "NEXLAYER_SESSION_TOKEN",
        "NEXLAYER_TIMEOUT",
        "NEXLAYER_REGISTRY",
        "NEXLAYER_IMAGE_TAG",
        "NEXLAYER_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    set_config(NexlayerConfig())
    yield
    set_config(None)


@pytest.fixture
def blog_pods():
    """블로그 예제 파드 정의"""
    return [
        {"name": "web", "image": "nginx:1.25", "servicePorts": [80], "vars": {"MODE": "prod"}},
    ]


@pytest.fixture
def blog_app(blog_pods):
    return build("blog", blog_pods)


@pytest.fixture
def full_app():
    """모든 필드를 쓰는 두 파드 애플리케이션"""
    return build("shop", [
        {
            "name": "db",
            "image": "postgres:16-alpine",
            "servicePorts": [5432],
            "vars": {"POSTGRES_DB": "shop", "POSTGRES_PASSWORD": "p@ss: \"quoted\""},
        },
        {
            "name": "api",
            "image": "ghcr.io/acme/shop-api:2.1.0",
            "servicePorts": [8000, 8001],
            "vars": [("DATABASE_URL", "postgres://db.pod:5432/shop"), ("EMPTY", "")],
            "secrets": [
                {
                    "name": "tls",
                    "data": "-----BEGIN CERT-----\nabc\n-----END CERT-----",
                    "mountPath": "/etc/tls",
                    "fileName": "cert.pem",
                },
            ],
        },
    ])


@pytest.fixture
def blog_yaml():
    return BLOG_YAML


@pytest.fixture
def blog_yaml_file(tmp_path):
    path = tmp_path / "nexlayer.yaml"
    path.write_text(BLOG_YAML, encoding="utf-8")
    return path


class RecordingTransport:
    """
    요청을 기록하고 미리 정한 응답을 돌려주는 httpx 전송 계층

    Example:
        transport = RecordingTransport(json={"success": True, "data": {...}})
        client = NexlayerClient(transport=transport.mock)
    """

    def __init__(self, status_code: int = 200, json=None, content: bytes = None, exc: Exception = None):
        self.status_code = status_code
        self.json = json
        self.content = content
        self.exc = exc
        self.requests = []
        self.mock = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.json is not None:
            return httpx.Response(self.status_code, json=self.json)
        return httpx.Response(self.status_code, content=self.content or b"")

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def make_client():
    """RecordingTransport를 쓰는 클라이언트 생성기"""

    def _make(session_token="sess_abc123", **response):
        transport = RecordingTransport(**response)
        client = NexlayerClient(
            base_url="https://nexlayer.test",
            session_token=session_token,
            transport=transport.mock,
        )
        return client, transport

    return _make


DEPLOYMENT_DATA = {
    "sessionToken": "sess_abc123",
    "applicationName": "blog",
    "status": "deploying",
    "url": "https://blog.alpha.nexlayer.ai",
}


@pytest.fixture
def deployment_data():
    return dict(DEPLOYMENT_DATA)
