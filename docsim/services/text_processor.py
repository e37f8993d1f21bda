"""
文本处理服务 - 句子分割、规范化与分词
All functions here are pure; the TextProcessor class only adds logging and
the empty-document check on top of them.
"""
import re
import string
from typing import List, Optional

from docsim.core.config import Settings
from docsim.core.errors import EmptyDocumentError
from docsim.models.analysis import Document
from docsim.services.base_service import BaseService

# 句末标点后跟空白或文本结尾
SENTENCE_BOUNDARY = re.compile(r"[.!?](?:\s+|$)")

# ASCII 大写转小写, ASCII 标点替换为空格 (不删除, 避免两个词被粘在一起)
_NORMALIZE_TABLE = str.maketrans(
    {
        **{upper: lower for upper, lower in zip(string.ascii_uppercase, string.ascii_lowercase)},
        **{mark: " " for mark in string.punctuation},
    }
)


def split_sentences(text: str) -> List[str]:
    """
    按句末标点 (. ! ?) 分割文本

    标点保留在句子末尾, 其后的空白被丢弃; 每个片段去除首尾空白, 空片段丢弃;
    末尾没有标点的剩余文本只要非空也作为一个句子保留。

    >>> split_sentences("Hello world. How are you? I am fine!")
    ['Hello world.', 'How are you?', 'I am fine!']
    """
    if not text or not text.strip():
        return []

    sentences: List[str] = []
    last_end = 0
    for match in SENTENCE_BOUNDARY.finditer(text):
        # +1 keeps the terminal mark
        sentence = text[last_end:match.start() + 1].strip()
        if sentence:
            sentences.append(sentence)
        last_end = match.end()

    remainder = text[last_end:].strip()
    if remainder:
        sentences.append(remainder)
    return sentences


def normalize_text(text: str) -> str:
    """小写化, 标点替换为空格, 合并连续空白并去除首尾空白 (幂等)"""
    return " ".join(text.translate(_NORMALIZE_TABLE).split())


def tokenize(text: str) -> List[str]:
    """按空白分词, 丢弃空词, 保持顺序"""
    return text.split()


class TextProcessor(BaseService):
    """文本处理服务 - 把原始文本变成带编号句子的 Document"""

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__(settings)

    def build_document(self, index: int, label: str, text: str) -> Document:
        """
        分割文档并编号句子

        Raises:
            EmptyDocumentError: 文档没有产生任何句子
        """
        sentences = split_sentences(text)
        if not sentences:
            self.logger.warning("empty_document", document=label, index=index)
            raise EmptyDocumentError(label, index)
        return Document.build(index, label, sentences)

    @staticmethod
    def prepare_tokens(sentence: str) -> List[str]:
        """规范化后分词"""
        return tokenize(normalize_text(sentence))

