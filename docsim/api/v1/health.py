from typing import Dict

from fastapi import APIRouter, Depends

from docsim.api.deps import get_app_settings
from docsim.core.config import Settings

router = APIRouter()


@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)) -> Dict[str, str]:
    """
    健康检查

    分析服务没有外部依赖，进程存活即可用
    """
    return {"status": "ok", "version": settings.version}
