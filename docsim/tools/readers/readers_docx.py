"""
使用直接XML解析的DOCX解析器。

通过 lxml + zipfile 直接读取 word/document.xml，绕过 python-docx 的高级API开销。
"""
import io
import zipfile
from typing import Optional

from lxml import etree

from docsim.core.logging import get_logger

from .readers_base import BaseParser

logger = get_logger(__name__)

WORD_NAMESPACE = {'w': 'http://schemas.openxmlformats.org/wordprocessingml/2006/main'}


class DOCXParser(BaseParser):
    """
    使用直接XML解析的高性能DOCX解析器。

    每个非空段落占一行，段落内的文本节点直接拼接。
    """

    def parse(self, data: bytes) -> Optional[str]:
        try:
            with zipfile.ZipFile(io.BytesIO(data), 'r') as zip_file:
                try:
                    xml_content = zip_file.read('word/document.xml')
                except KeyError:
                    logger.info("docx_missing_document_xml")
                    return None

            root = etree.fromstring(xml_content)
            paragraph_texts = []
            for paragraph in root.xpath('//w:p', namespaces=WORD_NAMESPACE):
                text_nodes = paragraph.xpath('.//w:t/text()', namespaces=WORD_NAMESPACE)
                paragraph_text = ''.join(text_nodes).strip()
                if paragraph_text:
                    paragraph_texts.append(paragraph_text)

            return '\n'.join(paragraph_texts)

        except (zipfile.BadZipFile, etree.XMLSyntaxError) as e:
            logger.error("docx_parse_failed", error=str(e))
            return None
