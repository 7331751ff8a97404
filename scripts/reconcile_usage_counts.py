"""
按关联表重算日期标签 usage_count 的管理脚本
"""
# 标准库导包
import asyncio
import sys
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# 项目内部导包
from exceptions import SymptomLogError
from routers.services.day_tag_service import DayTagService
from storage import async_session_factory, init_db, cleanup_db


async def main():
    """主函数"""
    print("开始校对日期标签使用次数...")

    try:
        await init_db()
        async with async_session_factory() as session:
            corrected = await DayTagService(session).reconcile_usage_counts()

        if not corrected:
            print("✓ 所有标签计数一致，无需修正")
        else:
            print(f"✓ 已修正 {len(corrected)} 个标签：")
            for tag_id, (old_count, new_count) in corrected.items():
                print(f"  tag_id={tag_id}: {old_count} -> {new_count}")

    except SymptomLogError as e:
        print(f"✗ 校对失败: {e.to_error_string()}")
        return 1

    finally:
        await cleanup_db()

    return 0


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
