"""
错误处理模块 - 定义自定义异常类和错误处理逻辑
清晰的错误分类和有意义的错误消息
"""
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import status


class ErrorCode(str, Enum):
    """错误代码枚举"""
    # 客户端错误
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_THRESHOLD = "INVALID_THRESHOLD"
    NOT_ENOUGH_DOCUMENTS = "NOT_ENOUGH_DOCUMENTS"
    TOO_MANY_DOCUMENTS = "TOO_MANY_DOCUMENTS"
    EMPTY_DOCUMENT = "EMPTY_DOCUMENT"
    UNSUPPORTED_FILE_TYPE = "UNSUPPORTED_FILE_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    TOTAL_SIZE_TOO_LARGE = "TOTAL_SIZE_TOO_LARGE"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"

    # 服务端错误
    INTERNAL_ERROR = "INTERNAL_ERROR"


class BaseApplicationError(Exception):
    """应用基础异常类"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            "code": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


# 分析核心错误 - 在并行计算开始前抛出，不可重试
class EmptyDocumentError(BaseApplicationError):
    """文档没有产生任何句子"""
    def __init__(self, label: str, index: Optional[int] = None):
        details: Dict[str, Any] = {"document": label}
        if index is not None:
            details["index"] = index
        super().__init__(
            message=f"Document '{label}' contains no text or sentences",
            error_code=ErrorCode.EMPTY_DOCUMENT,
            details=details,
            status_code=status.HTTP_400_BAD_REQUEST
        )
        self.label = label
        self.index = index


class InsufficientDocumentsError(BaseApplicationError):
    """文档数量不足，无法进行跨文档比较"""
    def __init__(self, count: int, minimum: int = 2):
        super().__init__(
            message=f"Not enough documents: minimum {minimum} required for comparison, got {count}",
            error_code=ErrorCode.NOT_ENOUGH_DOCUMENTS,
            details={"count": count, "minimum": minimum},
            status_code=status.HTTP_400_BAD_REQUEST
        )
        self.count = count
        self.minimum = minimum


# 传输层 / 上传错误
class InvalidRequestError(BaseApplicationError):
    """无效请求错误"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_REQUEST,
            details=details,
            status_code=status.HTTP_400_BAD_REQUEST
        )


class TooManyDocumentsError(BaseApplicationError):
    """文档数量超过上限"""
    def __init__(self, count: int, maximum: int):
        super().__init__(
            message=f"Too many files: {count}, maximum allowed is {maximum}",
            error_code=ErrorCode.TOO_MANY_DOCUMENTS,
            details={"count": count, "maximum": maximum},
            status_code=status.HTTP_400_BAD_REQUEST
        )


class InvalidThresholdError(BaseApplicationError):
    """阈值无法解析或超出 [0, 1]"""
    def __init__(self, value: Any):
        super().__init__(
            message=f"Invalid threshold value: '{value}'. Must be a number between 0.0 and 1.0",
            error_code=ErrorCode.INVALID_THRESHOLD,
            details={"value": str(value)},
            status_code=status.HTTP_400_BAD_REQUEST
        )


class UnsupportedFileTypeError(BaseApplicationError):
    """不支持的文件格式"""
    def __init__(self, filename: str, allowed: Optional[list[str]] = None):
        allowed = allowed or []
        super().__init__(
            message=f"Unsupported file type: {filename}. Allowed: {', '.join(allowed) or 'none'}",
            error_code=ErrorCode.UNSUPPORTED_FILE_TYPE,
            details={"filename": filename, "allowed": allowed},
            status_code=status.HTTP_400_BAD_REQUEST
        )


class FileTooLargeError(BaseApplicationError):
    """单个文件超过大小限制"""
    def __init__(self, filename: str, limit: int):
        super().__init__(
            message=f"File '{filename}' exceeds maximum size of {limit} bytes",
            error_code=ErrorCode.FILE_TOO_LARGE,
            details={"filename": filename, "limit": limit},
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        )


class TotalSizeTooLargeError(BaseApplicationError):
    """上传总大小超过限制"""
    def __init__(self, limit: int):
        super().__init__(
            message=f"Total upload size exceeds maximum of {limit} bytes",
            error_code=ErrorCode.TOTAL_SIZE_TOO_LARGE,
            details={"limit": limit},
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        )


class TextExtractionError(BaseApplicationError):
    """文本提取失败"""
    def __init__(self, filename: str, reason: Optional[str] = None):
        message = f"Failed to extract text from '{filename}'"
        details: Dict[str, Any] = {"filename": filename}
        if reason:
            message = f"{message}: {reason}"
            details["reason"] = reason
        super().__init__(
            message=message,
            error_code=ErrorCode.EXTRACTION_FAILED,
            details=details,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
        )


class InternalServerError(BaseApplicationError):
    """内部服务器错误"""
    def __init__(self, message: str = "An internal error occurred", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INTERNAL_ERROR,
            details=details,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
