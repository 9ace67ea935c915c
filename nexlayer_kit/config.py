"""
nexlayer-kit 설정

플랫폼 API 주소, 세션 토큰, 이미지 레지스트리 등 설정 관리
"""

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_BASE_URL = "https://app.nexlayer.io"


@dataclass
class NexlayerConfig:
    """nexlayer-kit 전체 설정"""

    # 플랫폼 API
    base_url: str = DEFAULT_BASE_URL
    session_token: Optional[str] = None
    timeout: float = 30.0

    # 이미지 레지스트리 (임시 이미지는 ttl.sh 사용)
    registry: str = "ttl.sh"
    image_tag: str = "1h"

    # 로깅
    log_level: str = "INFO"

    def image_for(self, name: str) -> str:
        """레지스트리/태그가 붙은 이미지 이름"""
        return f"{self.registry}/{name}:{self.image_tag}"

    @classmethod
    def from_env(cls) -> "NexlayerConfig":
        """환경변수에서 설정 로드"""
        return cls(
            base_url=os.getenv("NEXLAYER_BASE_URL", DEFAULT_BASE_URL),
            session_token=os.getenv("NEXLAYER_SESSION_TOKEN") or None,
            timeout=float(os.getenv("NEXLAYER_TIMEOUT", "30")),
            registry=os.getenv("NEXLAYER_REGISTRY", "ttl.sh"),
            image_tag=os.getenv("NEXLAYER_IMAGE_TAG", "1h"),
            log_level=os.getenv("NEXLAYER_LOG_LEVEL", "INFO").upper(),
        )


# 전역 설정 인스턴스
_config: Optional[NexlayerConfig] = None


def get_config() -> NexlayerConfig:
    """전역 설정 반환"""
    global _config
    if _config is None:
        _config = NexlayerConfig.from_env()
    return _config


def set_config(config: Optional[NexlayerConfig]) -> None:
    """전역 설정 지정 (None이면 다음 호출 때 환경변수에서 다시 로드)"""
    global _config
    _config = config
