#!/usr/bin/env python3
"""
pytest 配置文件

提供共享的 fixtures 和配置
"""
import sys
import pytest
from pathlib import Path

# 添加项目路径
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


@pytest.fixture(autouse=True)
def reset_config():
    """每个测试前重置配置"""
    import echoprobe.config as config_module
    config_module._config = None
    yield
    config_module._config = None


@pytest.fixture
def config_dir(tmp_path):
    """写入测试用配置文件，namespace 文件指向临时目录"""
    namespace_file = tmp_path / "namespace"
    namespace_file.write_text("test-ns\n", encoding='utf-8')

    (tmp_path / "config.yml").write_text(
        "server:\n"
        "  port: 18080\n"
        "identity:\n"
        "  who_am_i: ${TEST_WHO_AM_I}\n"
        "  node_name: node-a\n"
        "  namespace: ''\n"
        f"  namespace_file: {namespace_file}\n"
        "timeout:\n"
        "  stall_seconds: 30\n"
        "credentials:\n"
        "  secret_name: test-secret\n"
        "  refresh_interval_seconds: 30\n",
        encoding='utf-8'
    )
    return tmp_path


@pytest.fixture
def config(config_dir, monkeypatch):
    """已初始化的全局配置"""
    from echoprobe.config import init_config
    monkeypatch.setenv("TEST_WHO_AM_I", "pod-1")
    return init_config(str(config_dir))


@pytest.fixture
def client(config):
    """FastAPI 测试客户端"""
    from fastapi.testclient import TestClient
    from echoprobe.api import create_app
    return TestClient(create_app())
