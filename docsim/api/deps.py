from fastapi import Depends

from docsim.core.config import Settings, get_settings
from docsim.services import ServiceFactory
from docsim.services.similarity_pipeline import SimilarityPipeline
from docsim.tools.readers import ReadersService


def get_app_settings() -> Settings:
    """获取配置单例"""
    return get_settings()


def get_similarity_pipeline(settings: Settings = Depends(get_app_settings)) -> SimilarityPipeline:
    """每个请求一个流水线实例"""
    return ServiceFactory.get_similarity_pipeline(settings)


def get_readers_service() -> ReadersService:
    """获取文档读取服务"""
    return ServiceFactory.get_readers_service()
