"""Database configuration module."""
# 标准库导包
import logging
from pathlib import Path
from typing import AsyncGenerator

# 第三方库导包
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

# 项目内部导包
from config import settings

# 配置日志
logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def get_database_url() -> str:
    """构建数据库URL"""
    if settings.DB_DRIVER == "mysql":
        # 从HOST中分离主机和端口
        host_port = settings.DB_HOST
        if ':' in host_port:
            host, port = host_port.split(':')
        else:
            host = host_port
            port = "3306"
        return f"mysql+aiomysql://{settings.DB_USER}:{settings.DB_PASSWORD}@{host}:{port}/{settings.DB_NAME}"

    # 设备本地SQLite
    return f"sqlite+aiosqlite:///{settings.SQLITE_PATH}"


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """
    为SQLite连接开启外键约束

    SQLite默认不执行外键，day_tag_associations 的级联删除依赖此设置。

    Args:
        async_engine: 异步引擎
    """
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    创建异步引擎

    Args:
        database_url: 数据库URL
        echo: 是否输出SQL语句

    Returns:
        AsyncEngine实例
    """
    engine_kwargs = {"echo": echo}
    if not database_url.startswith("sqlite"):
        engine_kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_CONNECTIONS - settings.DB_POOL_SIZE,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            echo_pool=echo,
        )

    async_engine = create_async_engine(database_url, **engine_kwargs)
    enable_sqlite_foreign_keys(async_engine)
    return async_engine


def build_session_factory(async_engine: AsyncEngine) -> async_sessionmaker:
    """创建会话工厂"""
    return async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False
    )


# 获取数据库URL
DATABASE_URL = get_database_url()
if settings.DB_PASSWORD:
    logger.info(f"数据库连接URL: {DATABASE_URL.replace(settings.DB_PASSWORD, '***')}")
else:
    logger.info(f"数据库连接URL: {DATABASE_URL}")

# 创建异步引擎
engine = build_engine(DATABASE_URL, echo=settings.DEBUG)

# 创建会话工厂
async_session_factory = build_session_factory(engine)


async def init_db():
    """初始化数据库，创建所有表"""
    # 导入模型以注册到 Base.metadata
    import storage.models  # noqa: F401

    if settings.DB_DRIVER != "mysql":
        Path(settings.SQLITE_PATH).parent.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("数据库表初始化完成")


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """获取数据库会话的异步生成器

    这是一个依赖注入函数，可以用于FastAPI的Depends。

    Yields:
        AsyncSession: 数据库会话对象
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"数据库会话发生错误: {str(e)}")
            await session.rollback()
            raise
        finally:
            await session.close()


async def cleanup_db():
    """清理数据库连接"""
    await engine.dispose()
    logger.info("数据库连接已关闭")
