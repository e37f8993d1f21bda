"""
服务工厂 - 统一的服务创建和管理
"""
from typing import TYPE_CHECKING, Optional

# 避免循环导入，使用TYPE_CHECKING
if TYPE_CHECKING:
    from docsim.core.config import Settings
    from docsim.services.similarity_pipeline import SimilarityPipeline
    from docsim.tools.readers import ReadersService


class ServiceFactory:
    """
    服务工厂 - 提供统一的服务访问接口

    流水线每次调用都创建新实例：语料统计(IDF)只属于一次请求
    """

    @staticmethod
    def get_similarity_pipeline(settings: Optional['Settings'] = None) -> 'SimilarityPipeline':
        """获取句子相似度分析流水线"""
        from docsim.services.similarity_pipeline import SimilarityPipeline
        return SimilarityPipeline(settings)

    @staticmethod
    def get_readers_service() -> 'ReadersService':
        """获取文档读取服务"""
        from docsim.tools.readers import get_readers_service
        return get_readers_service()
