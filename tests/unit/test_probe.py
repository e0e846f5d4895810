#!/usr/bin/env python3
"""
单元3: 回环探针测试 (check_echo)
"""
import sys
import pytest
import requests
from pathlib import Path
from unittest.mock import patch, MagicMock

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from echoprobe.probe import check_echo


class TestCheckEcho:
    """check_echo 测试"""

    @patch('echoprobe.probe.requests.get')
    def test_200_is_healthy(self, mock_get):
        mock_get.return_value = MagicMock(status_code=200)
        result = check_echo("http://127.0.0.1:8080")

        assert result.healthy == True
        assert result.status_code == 200
        mock_get.assert_called_once_with("http://127.0.0.1:8080/testme", timeout=5)

    @patch('echoprobe.probe.requests.get')
    def test_non_200_is_unhealthy(self, mock_get):
        mock_get.return_value = MagicMock(status_code=500)
        result = check_echo("http://127.0.0.1:8080")

        assert result.healthy == False
        assert result.status_code == 500

    @patch('echoprobe.probe.requests.get')
    def test_connection_error_is_unhealthy(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")
        result = check_echo("http://127.0.0.1:8080")

        assert result.healthy == False
        assert result.status_code is None
        assert "refused" in result.message

    @patch('echoprobe.probe.requests.get')
    def test_timeout_is_unhealthy(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")
        assert check_echo("http://127.0.0.1:8080", timeout=1).healthy == False

    @patch('echoprobe.probe.requests.get')
    def test_custom_path(self, mock_get):
        mock_get.return_value = MagicMock(status_code=200)
        check_echo("http://localhost:9000/", "/testme", timeout=2)
        mock_get.assert_called_once_with("http://localhost:9000/testme", timeout=2)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
