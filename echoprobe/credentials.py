"""
凭据模块 - 从 Kubernetes Secret 读取并解码凭据
"""
import base64
import binascii
import logging
from typing import Dict, List, Optional

from kubernetes import client, config as k8s_config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

logger = logging.getLogger(__name__)


class CredentialError(Exception):
    """读取或解码 Secret 失败"""


def decode_secret_data(data: Optional[Dict[str, str]]) -> Dict[str, str]:
    """Secret.data 的值为 base64 编码，逐个解码"""
    decoded = {}
    for key, value in (data or {}).items():
        try:
            decoded[key] = base64.b64decode(value, validate=True).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            raise CredentialError(f"解码 {key} 失败: {e}") from e
    return decoded


def fetch_credential(namespace: str, name: str) -> Dict[str, str]:
    """读取当前命名空间下的 Secret，返回解码后的键值"""
    try:
        k8s_config.load_incluster_config()
        v1 = client.CoreV1Api()
        secret = v1.read_namespaced_secret(name=name, namespace=namespace)
    except ConfigException as e:
        raise CredentialError(f"加载集群配置失败: {e}") from e
    except ApiException as e:
        raise CredentialError(f"读取 Secret {namespace}/{name} 失败: {e.status} {e.reason}") from e

    return decode_secret_data(secret.data)


def describe_credential(data: Dict[str, str]) -> List[str]:
    """生成 username/password 日志行"""
    if "username" in data and "password" in data:
        return [f"Username: {data['username']}", f"Password: {data['password']}"]
    return ["Secret 中缺少 username/password"]
