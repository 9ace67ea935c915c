"""
도구 API 라우터 생성기

ToolHandler의 도구들을 HTTP로 노출하는 FastAPI 라우터를 생성합니다.
"""

import json
from typing import Optional, List, Dict, Any

from fastapi import APIRouter, Body, HTTPException
from pydantic import ValidationError

from .handler import ToolHandler, TOOLS, TOOLS_BY_NAME
from .models import ToolInfo, ToolResult


def create_tool_router(handler: ToolHandler, prefix: str = "/tools") -> APIRouter:
    """
    도구 라우터 생성

    Args:
        handler: 도구 핸들러 인스턴스
        prefix: API 경로 prefix (기본: /tools)

    Returns:
        APIRouter: FastAPI 라우터

    Example:
        handler = ToolHandler(NexlayerClient.from_config(get_config()))
        app.include_router(create_tool_router(handler))
    """

    router = APIRouter(prefix=prefix, tags=["Nexlayer Tools"])

    # =========================================================================
    # 도구 목록
    # =========================================================================

    @router.get(
        "",
        response_model=List[ToolInfo],
        summary="도구 목록",
        description="사용 가능한 도구와 입력 스키마"
    )
    async def list_tools() -> List[ToolInfo]:
        return [
            ToolInfo(
                name=tool.name,
                description=tool.description,
                input_schema=tool.request_model.model_json_schema(),
            )
            for tool in TOOLS
        ]

    # =========================================================================
    # 도구 실행
    # =========================================================================

    @router.post(
        "/{tool_name}",
        response_model=ToolResult,
        responses={
            404: {"description": "Unknown tool"},
            422: {"description": "Invalid tool arguments"},
        },
        summary="도구 실행",
        description="도구를 실행하고 결과 텍스트를 반환합니다."
    )
    async def call_tool(
        tool_name: str,
        arguments: Optional[Dict[str, Any]] = Body(None),
    ) -> ToolResult:
        tool = TOOLS_BY_NAME.get(tool_name)
        if tool is None:
            raise HTTPException(status_code=404, detail=f"Unknown tool: {tool_name}")

        try:
            request = tool.request_model.model_validate(arguments or {})
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=json.loads(e.json()))

        return await handler.invoke(tool, request)

    return router
