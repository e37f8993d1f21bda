"""
统一文档读取服务

把上传的 (文件名, 字节) 变成纯文本；格式不支持或提取失败时抛出应用异常
"""
from typing import List, Optional

from docsim.core.errors import TextExtractionError, UnsupportedFileTypeError
from docsim.core.logging import LogEvent, get_logger

from .readers_base import ParserFactory
from .utils.parser_map import get_parser_for_file, get_supported_extensions

logger = get_logger(__name__)


class ReadersService:
    """统一文档读取服务"""

    def extract_text(self, filename: str, data: bytes) -> str:
        """
        提取上传文件的文本

        Raises:
            UnsupportedFileTypeError: 扩展名不在支持列表中
            TextExtractionError: 解析器无法读取文件内容
        """
        parser = ParserFactory.get_parser(filename)
        if parser is None:
            raise UnsupportedFileTypeError(filename, get_supported_extensions())

        text = parser.parse(data)
        if text is None:
            logger.warning(LogEvent.EXTRACTION_FAILED, filename=filename, size=len(data))
            raise TextExtractionError(filename, "file could not be parsed")

        text = self.clean_text(text)
        logger.debug(LogEvent.EXTRACTION_COMPLETED, filename=filename, chars=len(text))
        return text

    @staticmethod
    def clean_text(text: str) -> str:
        """统一换行符并去除首尾空白"""
        return text.replace("\r\n", "\n").replace("\r", "\n").strip()

    def get_supported_formats(self) -> List[str]:
        return get_supported_extensions()

    def is_format_supported(self, filename: str) -> bool:
        return get_parser_for_file(filename) is not None


_readers_service: Optional[ReadersService] = None


def get_readers_service() -> ReadersService:
    """获取全局读取服务实例 (无状态, 可安全共享)"""
    global _readers_service
    if _readers_service is None:
        _readers_service = ReadersService()
    return _readers_service
