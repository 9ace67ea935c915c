"""
nexlayer-kit HTTP 서버

도구 라우터를 FastAPI 앱으로 묶어서 제공합니다.

실행:
    uvicorn nexlayer_kit.server:create_app --factory --port 8000
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI

from . import __version__
from .config import NexlayerConfig, get_config
from .platform import NexlayerClient
from .tools import ToolHandler, create_tool_router

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[NexlayerConfig] = None,
    client: Optional[NexlayerClient] = None,
) -> FastAPI:
    """
    FastAPI 앱 생성

    Args:
        config: 설정 (None이면 환경변수에서 로드)
        client: 플랫폼 클라이언트 (None이면 설정으로 생성)
    """
    cfg = config or get_config()
    client = client or NexlayerClient.from_config(cfg)
    handler = ToolHandler(client=client, config=cfg)

    app = FastAPI(
        title="nexlayer-kit",
        description="nexlayer.yaml 생성/검증 및 Nexlayer 배포 도구",
        version=__version__,
    )
    app.include_router(create_tool_router(handler))
    app.state.tool_handler = handler

    @app.get("/health", tags=["Health"])
    async def health():
        return {
            "status": "healthy",
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        }

    @app.on_event("shutdown")
    async def shutdown():
        await client.close()
        logger.info("Nexlayer client closed")

    logger.info(f"nexlayer-kit app created (platform: {cfg.base_url})")
    return app
