"""
PDF 解析器 - 使用 PyMuPDF 进行基本文本提取
"""
import re
from typing import Optional

import pymupdf

from docsim.core.logging import get_logger

from .readers_base import BaseParser

logger = get_logger(__name__)


class PDFParser(BaseParser):
    """PDF 解析器 - 基本文本提取版本"""

    def parse(self, data: bytes) -> Optional[str]:
        try:
            with pymupdf.open(stream=data, filetype="pdf") as doc:
                all_text = [page.get_text() for page in doc]
        except Exception as e:
            logger.error("pdf_parse_failed", error=str(e))
            return None

        all_text = [text for text in all_text if text.strip()]
        if not all_text:
            return ""

        raw_text = '\n\n'.join(all_text)
        # 基本清理：合并多个空行与多余的空格/制表符
        raw_text = re.sub(r'\n\s*\n\s*\n', '\n\n', raw_text)
        raw_text = re.sub(r'[ \t]+', ' ', raw_text)
        return raw_text.strip()
