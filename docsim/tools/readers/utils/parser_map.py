"""
解析器映射配置

单一职责：定义文件扩展名到解析器的映射关系
"""
from pathlib import Path
from typing import Dict, List, Optional, Tuple

PARSER_MAP: Dict[str, Tuple[str, str]] = {
    '.pdf': ('docsim.tools.readers.readers_pdf', 'PDFParser'),
    '.docx': ('docsim.tools.readers.readers_docx', 'DOCXParser'),
    '.txt': ('docsim.tools.readers.readers_text', 'TextParser'),
}


def get_supported_extensions() -> List[str]:
    return list(PARSER_MAP.keys())


def get_parser_for_file(filename: str) -> Optional[Tuple[str, str]]:
    """
    根据文件名后缀查找解析器 (大小写不敏感)

    Returns:
        (module_path, class_name)，不支持的格式返回 None
    """
    ext = Path(filename or "").suffix.lower()
    return PARSER_MAP.get(ext)
