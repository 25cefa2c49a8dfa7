"""ESClientFactory 单元测试.

覆盖客户端创建（节点地址、超时、认证方式、SSL）、
生命周期管理（上下文管理器、close）和连通性检查。
"""

from unittest.mock import patch

import pytest

from elasticsink.connection.models import ServerAddress, SinkConfig
from elasticsink.connection.tool import ESClientFactory


# ============================================================
# 辅助 fixtures
# ============================================================


@pytest.fixture
def config() -> SinkConfig:
    """创建两个节点的 Sink 配置."""
    return SinkConfig(
        index_name="docs",
        servers=[ServerAddress("node1", 9200), ServerAddress("node2", "9201")],
    )


ES_PATCH_PATH = "elasticsink.connection.tool.Elasticsearch"


# ============================================================
# 客户端创建测试
# ============================================================


class TestCreateClient:
    """get_client 方法测试."""

    @patch(ES_PATCH_PATH)
    def test_hosts_from_servers(self, mock_es, config) -> None:
        """测试根据节点地址生成 hosts."""
        ESClientFactory(config).get_client()
        call_kwargs = mock_es.call_args[1]
        assert call_kwargs["hosts"] == ["http://node1:9200", "http://node2:9201"]
        assert call_kwargs["verify_certs"] is True
        assert "request_timeout" not in call_kwargs
        assert "basic_auth" not in call_kwargs

    @patch(ES_PATCH_PATH)
    def test_connect_timeout_converted_to_seconds(self, mock_es, config) -> None:
        """测试连接超时由毫秒转换为秒."""
        config.connect_timeout_ms = 250
        ESClientFactory(config).get_client()
        assert mock_es.call_args[1]["request_timeout"] == 0.25

    @patch(ES_PATCH_PATH)
    def test_basic_auth(self, mock_es, config) -> None:
        """测试 Basic Auth 认证."""
        config.username = "elastic"
        config.password = "changeme"
        ESClientFactory(config).get_client()
        assert mock_es.call_args[1]["basic_auth"] == ("elastic", "changeme")

    @patch(ES_PATCH_PATH)
    def test_api_key_and_tls(self, mock_es, config) -> None:
        """测试 API Key 认证与 SSL 配置."""
        config.api_key = ("id", "key")
        config.ca_certs = "/etc/ca.pem"
        config.verify_certs = False
        ESClientFactory(config).get_client()
        call_kwargs = mock_es.call_args[1]
        assert call_kwargs["api_key"] == ("id", "key")
        assert call_kwargs["ca_certs"] == "/etc/ca.pem"
        assert call_kwargs["verify_certs"] is False

    @patch(ES_PATCH_PATH)
    def test_client_is_cached(self, mock_es, config) -> None:
        """测试客户端惰性创建并缓存."""
        factory = ESClientFactory(config)
        assert factory.get_client() is factory.get_client()
        mock_es.assert_called_once()


# ============================================================
# 生命周期与连通性测试
# ============================================================


class TestLifecycle:
    """close 与上下文管理器测试."""

    @patch(ES_PATCH_PATH)
    def test_context_manager_closes_client(self, mock_es, config) -> None:
        """测试上下文管理器退出时关闭客户端."""
        with ESClientFactory(config) as factory:
            factory.get_client()
        mock_es.return_value.close.assert_called_once()

    @patch(ES_PATCH_PATH)
    def test_close_without_client(self, mock_es, config) -> None:
        """测试未创建客户端时关闭不报错."""
        ESClientFactory(config).close()
        mock_es.assert_not_called()

    @patch(ES_PATCH_PATH)
    def test_close_error_is_logged(self, mock_es, config, caplog) -> None:
        """测试关闭失败时记录警告并清空缓存."""
        mock_es.return_value.close.side_effect = RuntimeError("boom")
        factory = ESClientFactory(config)
        factory.get_client()
        factory.close()
        assert "boom" in caplog.text
        factory.get_client()
        assert mock_es.call_count == 2

    @patch(ES_PATCH_PATH)
    def test_ping(self, mock_es, config) -> None:
        """测试连通性检查."""
        mock_es.return_value.ping.return_value = True
        assert ESClientFactory(config).ping() is True

    @patch(ES_PATCH_PATH)
    def test_ping_unreachable(self, mock_es, config) -> None:
        """测试集群不可达时返回 False."""
        mock_es.return_value.ping.side_effect = ConnectionRefusedError("refused")
        assert ESClientFactory(config).ping() is False
