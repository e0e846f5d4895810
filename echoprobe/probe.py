"""
探针模块 - 通过回环地址调用 /testme 判断服务是否存活
"""
import logging
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)


@dataclass
class ProbeResult:
    healthy: bool
    status_code: Optional[int] = None
    message: str = ""


def check_echo(base_url: str, path: str = "/testme", timeout: float = 5) -> ProbeResult:
    """GET base_url + path，仅 HTTP 200 视为健康"""
    url = f"{base_url.rstrip('/')}{path}"

    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        return ProbeResult(healthy=False, message=f"连接失败: {e}")

    if response.status_code == 200:
        return ProbeResult(healthy=True, status_code=200, message="HTTP 200")

    return ProbeResult(
        healthy=False,
        status_code=response.status_code,
        message=f"HTTP {response.status_code}, 期望 200"
    )
