"""
应用程序配置
"""
# 标准库导包
import os
from typing import List

# 第三方库导包
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """应用程序设置类"""

    # 应用基本信息
    APP_NAME: str = "SYMPTOM LOG"
    APP_VERSION: str = "1.0.0"
    POD_ENV: str = Field(default="test", env="POD_ENV")
    DEBUG: bool = Field(default_factory=lambda: Settings._get_debug())
    RELOAD: bool = False

    # 服务器配置
    HOST: str = Field(default="0.0.0.0", env="HOST")
    PORT: int = Field(default=8000, env="PORT")
    WORKERS: int = 1

    # 数据库驱动：sqlite（设备本地）/ mysql
    DB_DRIVER: str = Field(default="sqlite", env="DB_DRIVER")
    SQLITE_PATH: str = Field(default="./data/symptom_log.db", env="SQLITE_PATH")

    # MySQL配置（DB_DRIVER=mysql 时生效）
    DEV_DB_HOST: str = "localhost:3306"
    DEV_DB_USER: str = "root"
    DEV_DB_PASSWORD: str = ""
    ONLINE_DB_HOST: str = "localhost:3306"
    ONLINE_DB_USER: str = "root"
    ONLINE_DB_PASSWORD: str = ""
    DB_NAME: str = "symptom_log"

    # 数据库连接池配置（仅MySQL使用）
    DB_POOL_SIZE: int = Field(default=10, env="DB_POOL_SIZE")
    DB_MAX_CONNECTIONS: int = Field(default=20, env="DB_MAX_CONNECTIONS")
    DB_POOL_TIMEOUT: int = Field(default=30, env="DB_POOL_TIMEOUT")
    DB_POOL_RECYCLE: int = Field(default=3600, env="DB_POOL_RECYCLE")

    # 导出配置
    EXPORT_DIR: str = Field(default="./data/exports", env="EXPORT_DIR")
    SHARE_DIR: str = Field(default="./data/shared", env="SHARE_DIR")
    EXPORT_FILE_PREFIX: str = "crohns-tracker-export"
    EXPORT_PREVIEW_DEFAULT_LIMIT: int = 10

    # 日期标签配置
    DAY_TAG_MAX_PER_DAY: int = Field(default=10, env="DAY_TAG_MAX_PER_DAY")
    DAY_TAG_NAME_MAX_LENGTH: int = 50

    # CORS配置 - 允许所有跨域请求
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: List[str] = ["*"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]

    # 日志配置
    LOG_LEVEL: str = Field(default="info", env="LOG_LEVEL")

    @staticmethod
    def _get_debug() -> bool:
        """获取DEBUG模式，基于POD_ENV环境变量"""
        return os.getenv("POD_ENV", "test").lower() != "online"

    # 根据环境变量设置当前数据库配置
    @property
    def DB_HOST(self) -> str:
        if self.POD_ENV == "online":
            return self.ONLINE_DB_HOST
        else:  # 默认使用开发环境
            return self.DEV_DB_HOST

    @property
    def DB_USER(self) -> str:
        if self.POD_ENV == "online":
            return self.ONLINE_DB_USER
        else:
            return self.DEV_DB_USER

    @property
    def DB_PASSWORD(self) -> str:
        if self.POD_ENV == "online":
            return self.ONLINE_DB_PASSWORD
        else:
            return self.DEV_DB_PASSWORD

    # API文档配置
    @property
    def DOCS_URL(self) -> str:
        return "/docs" if self.DEBUG else None

    @property
    def REDOC_URL(self) -> str:
        return "/redoc" if self.DEBUG else None

    @property
    def OPENAPI_URL(self) -> str:
        return "/openapi.json" if self.DEBUG else None

    class Config:
        """Pydantic配置"""
        env_file = ".env"  # 支持从.env文件读取配置
        env_file_encoding = "utf-8"
        case_sensitive = True


# 创建设置实例
settings = Settings()
