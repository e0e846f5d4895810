"""
运行时身份信息 - 主机名、命名空间、框架版本
"""
import socket
import logging
import platform
from pathlib import Path

import fastapi

from .config import Config

logger = logging.getLogger(__name__)


def read_namespace(path: str) -> str:
    """读取 service account 挂载的 namespace 文件"""
    return Path(path).read_text(encoding='utf-8').strip()


def resolve_namespace(config: Config) -> str:
    """配置值优先，其次 namespace 文件，最后使用默认值"""
    if config.identity.namespace:
        return config.identity.namespace

    try:
        namespace = read_namespace(config.identity.namespace_file)
    except OSError as e:
        logger.warning(f"读取 namespace 失败: {e}")
        return config.identity.default_namespace

    return namespace or config.identity.default_namespace


def get_hostname() -> str:
    return socket.gethostname()


def framework_tag() -> str:
    return f"FastAPI {fastapi.__version__} / Python {platform.python_version()}"
