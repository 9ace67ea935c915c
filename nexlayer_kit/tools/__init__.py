"""
도구 모듈

매니페스트 생성/검증, 스캐폴딩, 배포 기능을 이름으로 호출할 수 있는 도구로 제공합니다.

사용 예시:
    from fastapi import FastAPI
    from nexlayer_kit.tools import ToolHandler, create_tool_router

    app = FastAPI()
    app.include_router(create_tool_router(ToolHandler(client)))
"""

from .handler import ToolHandler, ToolSpec, TOOLS, UnknownToolError
from .models import ToolResult, ToolInfo
from .router import create_tool_router

__all__ = [
    "ToolHandler",
    "ToolSpec",
    "TOOLS",
    "UnknownToolError",
    "ToolResult",
    "ToolInfo",
    "create_tool_router",
]
