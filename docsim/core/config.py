"""
配置管理 - 使用Pydantic Settings实现环境变量管理
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置类 - 所有配置项通过环境变量管理"""

    # API配置
    api_prefix: str = Field(default="/api", description="API路由前缀")
    project_name: str = Field(default="Document Similarity Analyzer", description="项目名称")
    version: str = Field(default="1.0.0", description="版本号")
    environment: str = Field(default="development", description="运行环境")

    # 检测配置
    default_threshold: float = Field(default=0.70, ge=0.0, le=1.0, description="句子相似度阈值")
    min_documents: int = Field(default=2, ge=2, description="最少文档数")
    max_documents: int = Field(default=5, ge=2, description="最多文档数")

    # 上传限制
    max_file_size: int = Field(default=10 * 1024 * 1024, description="单个文件最大字节数")
    max_total_size: int = Field(default=50 * 1024 * 1024, description="上传总字节数上限")

    # 性能配置
    max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="并行阶段的工作线程数 (None 表示由 executor 决定, 1 表示串行)",
    )

    # 日志配置
    log_level: str = Field(default="INFO", description="日志级别")
    json_logs: bool = Field(default=False, description="是否输出JSON格式日志")

    # CORS 配置
    # 以逗号分隔的允许来源列表，例如："http://localhost:5173,https://your.app"
    cors_allow_origins: str = Field(default="*", description="允许的跨域来源，逗号分隔")
    cors_allow_credentials: bool = Field(default=False, description="是否允许携带凭据")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DOCSIM_",
        case_sensitive=False,
        extra="ignore"  # 忽略未定义的环境变量
    )

    @property
    def is_development(self) -> bool:
        """是否为开发模式"""
        return self.environment.lower() == "development"

    def get_cors_origins(self) -> list[str]:
        """返回允许的 CORS 来源列表"""
        raw = (self.cors_allow_origins or "").strip()
        if not raw:
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    获取配置单例
    使用lru_cache确保全局只有一个Settings实例
    """
    return Settings()
