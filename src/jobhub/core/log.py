"""
loguru 日志初始化：移除默认 handler，按 JOBHUB_LOG_LEVEL 输出到 stderr。

各模块直接 `from loguru import logger` 使用；服务启动时调用一次 setup_logging()。
"""
import sys

from loguru import logger

from jobhub.core.config import log_level

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | {name}:{line} | <level>{message}</level>"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """配置 stderr 输出；重复调用只生效一次（传入 level 时强制重配）。"""
    global _configured
    if _configured and level is None:
        return
    logger.remove()
    logger.add(sys.stderr, format=_FORMAT, level=(level or log_level()), colorize=True)
    _configured = True
