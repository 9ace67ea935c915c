"""
nexlayer-kit 예외 정의

매니페스트 생성/파싱 오류와 플랫폼 API 오류를 정의합니다.
"""

from typing import Optional


class InvalidSpec(ValueError):
    """매니페스트 구성 파라미터가 구조 규칙을 위반할 때 발생"""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        self.reason = message
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class ParseError(ValueError):
    """매니페스트 텍스트가 올바른 구조가 아닐 때 발생"""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.reason = message
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class CollaboratorError(Exception):
    """
    Nexlayer API 호출 실패

    재시도하지 않습니다. 재시도 여부는 `retryable`을 보고 호출자가 결정합니다.
    """

    def __init__(
        self,
        operation: str,
        error: str,
        status_code: Optional[int] = None,
        transport: bool = False,
    ):
        self.operation = operation
        self.error = error
        self.status_code = status_code
        self.transport = transport
        super().__init__(f"Failed to {operation}: {error}")

    @property
    def retryable(self) -> bool:
        """네트워크 오류, 429, 5xx는 재시도 가능"""
        if self.transport:
            return True
        if self.status_code is None:
            return False
        return self.status_code == 429 or self.status_code >= 500
