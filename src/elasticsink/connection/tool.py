"""ES 客户端工厂工具模块.

提供 ESClientFactory 类，根据 SinkConfig 创建并管理 Sink 使用的
Elasticsearch 客户端。

使用示例:
    from elasticsink.connection import ESClientFactory, ServerAddress, SinkConfig

    config = SinkConfig(index_name="docs", servers=[ServerAddress("localhost", 9200)])
    with ESClientFactory(config) as factory:
        client = factory.get_client()
"""

from __future__ import annotations

import logging

from elasticsearch import Elasticsearch

from .models import SinkConfig

logger = logging.getLogger(__name__)


class ESClientFactory:
    """Elasticsearch 客户端工厂.

    惰性创建并缓存单个客户端，支持 Basic Auth / API Key 认证、
    SSL 配置、连接超时和上下文管理器。

    Args:
        config: Sink 配置
    """

    def __init__(self, config: SinkConfig) -> None:
        self._config = config
        self._client: Elasticsearch | None = None

    @property
    def config(self) -> SinkConfig:
        return self._config

    def _create_client(self) -> Elasticsearch:
        """根据 Sink 配置创建 Elasticsearch 客户端实例."""
        config = self._config
        kwargs: dict = {
            "hosts": config.hosts,
            "verify_certs": config.verify_certs,
        }

        # 连接超时配置，客户端以秒为单位
        if config.connect_timeout_ms is not None:
            kwargs["request_timeout"] = config.connect_timeout_ms / 1000

        # Basic Auth 认证
        if config.username and config.password:
            kwargs["basic_auth"] = (config.username, config.password)

        # API Key 认证
        if config.api_key:
            kwargs["api_key"] = config.api_key

        if config.ca_certs:
            kwargs["ca_certs"] = config.ca_certs

        logger.info(f"创建 Elasticsearch 客户端: hosts={config.hosts}")
        return Elasticsearch(**kwargs)

    def get_client(self) -> Elasticsearch:
        """获取客户端，首次调用时创建.

        Returns:
            Elasticsearch 客户端实例
        """
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def ping(self) -> bool:
        """检查集群是否可达."""
        try:
            return bool(self.get_client().ping())
        except Exception as e:
            logger.error(f"无法连接 Elasticsearch: {e}")
            return False

    def __enter__(self) -> ESClientFactory:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """上下文管理器退出，自动关闭客户端."""
        self.close()

    def close(self) -> None:
        """关闭已创建的客户端连接.

        关闭后可重新调用 get_client() 创建新的客户端。
        """
        if self._client is None:
            return
        try:
            self._client.close()
        except Exception as e:
            logger.warning(f"关闭 Elasticsearch 客户端时出错: {e}")
        self._client = None
