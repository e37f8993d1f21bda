"""
文档解析器工具包

支持的文档格式：
- PDF (.pdf)
- Word文档 (.docx)
- 纯文本 (.txt)
"""

from .readers_service import ReadersService, get_readers_service

__all__ = [
    'ReadersService',
    'get_readers_service',
]
