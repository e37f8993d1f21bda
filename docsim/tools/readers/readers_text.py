"""
纯文本解析器 - 自动尝试多种编码
"""
from typing import Optional

from .readers_base import BaseParser

# UTF-8 优先 (utf-8-sig 同时处理 BOM), 西文编码先于 GB 编码
ENCODINGS = ('utf-8-sig', 'cp1252', 'gb18030')


class TextParser(BaseParser):
    """Plain text parser with encoding fallback."""

    def parse(self, data: bytes) -> Optional[str]:
        for encoding in ENCODINGS:
            try:
                return data.decode(encoding)
            except UnicodeDecodeError:
                continue
        # 所有编码都失败时按 UTF-8 解码并替换非法字节
        return data.decode('utf-8', errors='replace')
