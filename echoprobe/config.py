"""
配置加载模块
"""
import os
import yaml
import logging
from pathlib import Path
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8080


@dataclass
class IdentityConfig:
    """身份字段来源 - 环境变量（${VAR}），x-routed-by 取自请求头"""
    who_am_i: str = ""
    node_name: str = ""
    namespace: str = ""  # 为空时读取 namespace_file
    namespace_file: str = "/var/run/secrets/kubernetes.io/serviceaccount/namespace"
    default_namespace: str = "unknown"


@dataclass
class TimeoutConfig:
    stall_seconds: int = 30


@dataclass
class ProbeConfig:
    path: str = "/testme"
    timeout_seconds: int = 5


@dataclass
class CredentialsConfig:
    enabled: bool = True
    secret_name: str = "my-secrets"
    refresh_interval_seconds: int = 300


@dataclass
class SystemConfig:
    log_level: str = "INFO"
    log_file: str = ""


class Config:
    """全局配置类"""

    def __init__(self, config_dir: str = None):
        if config_dir is None:
            # 默认配置目录
            config_dir = Path(__file__).parent.parent / "config"

        self.config_dir = Path(config_dir)
        self.server = ServerConfig()
        self.identity = IdentityConfig()
        self.timeout = TimeoutConfig()
        self.probe = ProbeConfig()
        self.credentials = CredentialsConfig()
        self.system = SystemConfig()

        self._load_config()

    def _load_config(self):
        """加载主配置文件"""
        config_file = self.config_dir / "config.yml"
        if not config_file.exists():
            logger.warning(f"配置文件不存在 {config_file}，使用默认配置")
            return

        with open(config_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        # 服务配置
        server_cfg = data.get('server', {})
        self.server.host = server_cfg.get('host', '0.0.0.0')
        self.server.port = int(server_cfg.get('port', 8080))

        # 身份配置
        id_cfg = data.get('identity', {})
        self.identity.who_am_i = self._resolve_env(id_cfg.get('who_am_i', ''))
        self.identity.node_name = self._resolve_env(id_cfg.get('node_name', ''))
        self.identity.namespace = self._resolve_env(id_cfg.get('namespace', ''))
        self.identity.namespace_file = id_cfg.get(
            'namespace_file', '/var/run/secrets/kubernetes.io/serviceaccount/namespace'
        )
        self.identity.default_namespace = id_cfg.get('default_namespace', 'unknown')

        # 超时端点
        timeout_cfg = data.get('timeout', {})
        self.timeout.stall_seconds = timeout_cfg.get('stall_seconds', 30)

        # 探针
        probe_cfg = data.get('probe', {})
        self.probe.path = probe_cfg.get('path', '/testme')
        self.probe.timeout_seconds = probe_cfg.get('timeout_seconds', 5)

        # 凭据刷新
        cred_cfg = data.get('credentials', {})
        self.credentials.enabled = cred_cfg.get('enabled', True)
        self.credentials.secret_name = cred_cfg.get('secret_name', 'my-secrets')
        self.credentials.refresh_interval_seconds = cred_cfg.get('refresh_interval_seconds', 300)

        sys_cfg = data.get('system', {})
        self.system.log_level = sys_cfg.get('log_level', 'INFO')
        self.system.log_file = sys_cfg.get('log_file', '') or ''

    def _resolve_env(self, value: str) -> str:
        """解析环境变量 ${VAR_NAME}"""
        if not value or not isinstance(value, str):
            return value

        if value.startswith('${') and value.endswith('}'):
            env_name = value[2:-1]
            return os.environ.get(env_name, '')

        return value


# 全局配置实例
_config: Config = None


def get_config() -> Config:
    """获取全局配置"""
    global _config
    if _config is None:
        _config = Config()
    return _config


def init_config(config_dir: str = None):
    """初始化配置"""
    global _config
    _config = Config(config_dir)
    return _config
