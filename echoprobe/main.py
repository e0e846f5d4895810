"""
echoprobe - 主入口
启动凭据刷新任务和 HTTP 服务
"""
import sys
import signal
import logging
import argparse
from pathlib import Path

import uvicorn

from . import __version__
from .config import init_config
from .api import create_app
from .credentials import fetch_credential
from .identity import resolve_namespace
from .refresher import CredentialRefresher

BANNER = r"""
  ,_,
 {O,o}
 /)__)
=="="=="""


def setup_logging(log_level: str = "INFO", log_file: str = None):
    """配置日志"""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def build_refresher(config) -> CredentialRefresher:
    """按配置组装凭据刷新任务"""
    return CredentialRefresher(
        fetcher=fetch_credential,
        namespace_resolver=lambda: resolve_namespace(config),
        secret_name=config.credentials.secret_name,
        interval_seconds=config.credentials.refresh_interval_seconds,
    )


def main():
    """主入口函数"""
    parser = argparse.ArgumentParser(description='echoprobe - 诊断用 HTTP 回显服务')
    parser.add_argument('--config-dir', type=str, help='配置文件目录')
    parser.add_argument('--host', type=str, help='监听地址')
    parser.add_argument('--port', type=int, help='监听端口')
    parser.add_argument('--log-level', type=str, help='日志级别')
    parser.add_argument('--no-refresher', action='store_true', help='不启动凭据刷新')

    args = parser.parse_args()

    config = init_config(args.config_dir)
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port
    log_level = args.log_level or config.system.log_level

    setup_logging(log_level=log_level, log_file=config.system.log_file or None)

    logger = logging.getLogger(__name__)
    logger.info(f"服务启动于 {config.server.host}:{config.server.port}")
    logger.info(f"v{__version__}")
    logger.info(BANNER)

    refresher = None
    if config.credentials.enabled and not args.no_refresher:
        refresher = build_refresher(config)

    def signal_handler(signum, frame):
        logger.info("收到退出信号，正在关闭...")
        if refresher:
            refresher.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if refresher:
        refresher.start()

    # uvicorn 运行期间接管 SIGINT/SIGTERM，退出后再停止刷新
    try:
        uvicorn.run(
            create_app(),
            host=config.server.host,
            port=config.server.port,
            log_level=log_level.lower()
        )
    finally:
        if refresher:
            refresher.stop()


if __name__ == "__main__":
    main()
