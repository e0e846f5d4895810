"""
FastAPI 接口模块 - /testme 回显、/timeout 超时模拟、/healthz 与 /readyz 探针
"""
import re
import time
import logging
from typing import Optional

from fastapi import FastAPI, Request, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from . import __version__
from .config import Config, get_config
from .identity import resolve_namespace, get_hostname, framework_tag
from .probe import check_echo

app = FastAPI(
    title="echoprobe",
    description="诊断用回显服务 - 验证路由、负载均衡与探针行为",
    version=__version__
)

logger = logging.getLogger(__name__)

# 与 64 位有符号整数一致，超出范围视为解析失败
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

# time.sleep 的上限，超过的 delay 按此值等待
MAX_SLEEP_SECONDS = 7 * 24 * 3600


class EchoResponse(BaseModel):
    """/testme 响应"""
    model_config = ConfigDict(populate_by_name=True)

    message: str = "Hello World"
    rc: int = Field(alias="RC")
    header: str = Field(alias="HEADER")
    who_am_i: str = Field(alias="WHO_AM_I")
    node_name: str = Field(alias="NODE_NAME")
    namespace: str = Field(alias="K8s NS")
    hostname: str = Field(alias="HOSTNAME")
    framework: str = Field(alias="FRAMEWORK")
    endpoint: str = Field(default="testme", alias="ENDPOINT")


class ParamError(ValueError):
    """查询参数不是整数"""

    def __init__(self, name: str):
        super().__init__(f"参数 {name} 解析失败")
        self.name = name


def parse_int_param(name: str, value: Optional[str]) -> int:
    """缺省或空字符串视为 0；只接受 ASCII 十进制数字和可选符号"""
    if value is None or value == "":
        return 0
    if not _INT_PATTERN.fullmatch(value):
        raise ParamError(name)

    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise ParamError(name)
    return number


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """记录每个请求的方法、路径、来源与耗时"""
    start = time.perf_counter()
    try:
        return await call_next(request)
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        remote = f"{request.client.host}:{request.client.port}" if request.client else "-"
        logger.info(f"[{request.method}] {request.url.path} {remote} - {elapsed_ms:.3f}ms")


@app.get("/testme")
def testme(
    request: Request,
    delay: Optional[str] = None,
    forceHttpCode: Optional[str] = None,
    config: Config = Depends(get_config),
):
    """可配置回显：delay 毫秒延迟，forceHttpCode=500/502 强制返回错误"""
    try:
        delay_ms = parse_int_param("delay", delay)
        force_code = parse_int_param("forceHttpCode", forceHttpCode)
    except ParamError as e:
        return PlainTextResponse(str(e), status_code=400)

    # 强制错误立即返回，不应用延迟
    if force_code == 500:
        return PlainTextResponse("500 Internal Server Error", status_code=500)
    if force_code == 502:
        return PlainTextResponse("502 Bad Gateway", status_code=502)

    if delay_ms > 0:
        time.sleep(min(delay_ms / 1000, MAX_SLEEP_SECONDS))

    body = EchoResponse(
        rc=force_code,
        header=request.headers.get("x-routed-by", ""),
        who_am_i=config.identity.who_am_i,
        node_name=config.identity.node_name,
        namespace=resolve_namespace(config),
        hostname=get_hostname(),
        framework=framework_tag(),
    )
    return JSONResponse(content=body.model_dump(by_alias=True), status_code=200)


@app.get("/timeout")
def timeout(config: Config = Depends(get_config)):
    """固定等待后返回 504，用于验证上游超时处理"""
    time.sleep(config.timeout.stall_seconds)
    return PlainTextResponse("504 Gateway Timeout", status_code=504)


def probe_base_url(config: Config) -> str:
    """监听通配地址时走回环，否则使用实际监听地址"""
    host = config.server.host
    if host in ("", "0.0.0.0"):
        host = "127.0.0.1"
    elif host == "::":
        host = "::1"

    if ":" in host:
        host = f"[{host}]"
    return f"http://{host}:{config.server.port}"


def _probe(probe_type: str, config: Config) -> PlainTextResponse:
    base_url = probe_base_url(config)
    result = check_echo(base_url, config.probe.path, config.probe.timeout_seconds)

    if not result.healthy:
        logger.error(f"{probe_type} 检查失败: {result.message}")
        return PlainTextResponse("Service Unavailable", status_code=503)

    return PlainTextResponse("OK", status_code=200)


@app.get("/healthz")
def healthz(config: Config = Depends(get_config)):
    """存活探针"""
    return _probe("healthz", config)


@app.get("/readyz")
def readyz(config: Config = Depends(get_config)):
    """就绪探针"""
    return _probe("readiness", config)


def create_app():
    """创建并返回 FastAPI 应用"""
    return app
