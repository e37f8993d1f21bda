"""
文档解析器基类

单一职责：只定义解析接口
格式支持由 utils/parser_map.py 统一管理
"""
import importlib
from abc import ABC, abstractmethod
from typing import Dict, Optional, Type

from .utils.parser_map import get_parser_for_file


class BaseParser(ABC):
    """极简的文档解析器基类 - 只有一个必需的方法"""

    @abstractmethod
    def parse(self, data: bytes) -> Optional[str]:
        """
        从文件内容中提取纯文本。

        Args:
            data: 上传文件的原始字节

        Returns:
            提取的纯文本内容，解析失败时返回None
        """


class ParserFactory:
    """
    极简的解析器工厂

    配置驱动 - 从 parser_map 读取映射，按需导入并缓存解析器类
    """

    _cache: Dict[str, Type[BaseParser]] = {}

    @classmethod
    def get_parser(cls, filename: str) -> Optional[BaseParser]:
        """根据文件名获取合适的解析器，不支持的格式返回 None"""
        parser_info = get_parser_for_file(filename)
        if not parser_info:
            return None

        module_path, class_name = parser_info
        cache_key = f"{module_path}.{class_name}"
        if cache_key not in cls._cache:
            module = importlib.import_module(module_path)
            cls._cache[cache_key] = getattr(module, class_name)
        return cls._cache[cache_key]()

    @classmethod
    def clear_cache(cls):
        """清空缓存 - 用于测试或重新加载"""
        cls._cache.clear()
