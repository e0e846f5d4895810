"""
凭据刷新模块 - 定时读取 Secret 并写入日志
"""
import logging
from threading import Thread, Event
from typing import Callable, Dict, Optional

from .credentials import describe_credential

logger = logging.getLogger(__name__)


class CredentialRefresher:
    """定时刷新凭据，仅用于观察，不影响请求处理"""

    def __init__(
        self,
        fetcher: Callable[[str, str], Dict[str, str]],
        namespace_resolver: Callable[[], str],
        secret_name: str,
        interval_seconds: float = 300,
    ):
        self.fetcher = fetcher
        self.namespace_resolver = namespace_resolver
        self.secret_name = secret_name
        self.interval_seconds = interval_seconds
        self.stop_event = Event()
        self.thread: Optional[Thread] = None

    def start(self):
        """启动时先读取一次，再进入定时循环"""
        logger.info(f"启动凭据刷新，间隔 {self.interval_seconds}s")
        self.refresh_once()

        self.thread = Thread(target=self._refresh_loop, daemon=True)
        self.thread.start()

    def stop(self):
        """停止刷新"""
        self.stop_event.set()
        if self.thread is not None:
            self.thread.join(timeout=5)
        logger.info("凭据刷新已停止")

    def _refresh_loop(self):
        # wait 返回 True 表示收到停止信号
        while not self.stop_event.wait(self.interval_seconds):
            self.refresh_once()

    def refresh_once(self) -> Optional[Dict[str, str]]:
        """读取一次 Secret；失败只记录日志，等待下一个周期"""
        try:
            namespace = self.namespace_resolver()
            data = self.fetcher(namespace, self.secret_name)
        except Exception as e:
            logger.error(f"读取 Secret {self.secret_name} 失败: {e}")
            return None

        logger.info(f"解码后的数据: {data}")
        for line in describe_credential(data):
            logger.info(line)
        return data
