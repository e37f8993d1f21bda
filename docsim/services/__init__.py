"""
服务模块 - 提供统一的服务访问接口
"""

from docsim.services.base_service import BaseService
from docsim.services.service_factory import ServiceFactory

__all__ = [
    'BaseService',
    'ServiceFactory',
]
