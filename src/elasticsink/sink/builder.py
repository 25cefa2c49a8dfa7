"""ElasticSender 构建器模块."""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import Elasticsearch

from ..connection.exceptions import ConnectionConfigError
from ..connection.models import ServerAddress, SinkConfig, sink_config_problems
from ..connection.tool import ESClientFactory
from .tool import ElasticSender

logger = logging.getLogger(__name__)


class ElasticSenderBuilder:
    """ElasticSender 的链式构建器.

    Examples:
        >>> sender = (
        ...     ElasticSenderBuilder()
        ...     .named("docs-sink")
        ...     .for_index("docs")
        ...     .with_server("localhost", 9200)
        ...     .with_connect_timeout(500)
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        self._name: str | None = None
        self._index_name: str | None = None
        self._object_type = "_doc"
        self._servers: list[tuple[str, Any, str]] = []
        self._connect_timeout_ms: int | None = None
        self._max_workers = 10
        self._username: str | None = None
        self._password: str | None = None
        self._api_key: str | tuple[str, str] | None = None
        self._ca_certs: str | None = None
        self._verify_certs = True
        self._client: Elasticsearch | None = None

    def named(self, name: str) -> ElasticSenderBuilder:
        self._name = name
        return self

    def for_index(self, index_name: str) -> ElasticSenderBuilder:
        self._index_name = index_name
        return self

    def for_object_type(self, object_type: str) -> ElasticSenderBuilder:
        self._object_type = object_type
        return self

    def with_server(self, host: str, port: Any, scheme: str = "http") -> ElasticSenderBuilder:
        self._servers.append((host, port, scheme))
        return self

    def with_connect_timeout(self, ms_timeout: int) -> ElasticSenderBuilder:
        self._connect_timeout_ms = ms_timeout
        return self

    def with_basic_auth(self, username: str, password: str) -> ElasticSenderBuilder:
        self._username = username
        self._password = password
        return self

    def with_api_key(self, api_key: str | tuple[str, str]) -> ElasticSenderBuilder:
        self._api_key = api_key
        return self

    def with_tls(self, ca_certs: str | None = None, verify_certs: bool = True) -> ElasticSenderBuilder:
        self._ca_certs = ca_certs
        self._verify_certs = verify_certs
        return self

    def with_max_workers(self, max_workers: int) -> ElasticSenderBuilder:
        self._max_workers = max_workers
        return self

    def with_client(self, client: Elasticsearch) -> ElasticSenderBuilder:
        """使用已创建的客户端，而不是根据配置新建."""
        self._client = client
        return self

    def _build_config(self) -> tuple[SinkConfig | None, list[str]]:
        """构建配置并收集所有校验问题."""
        problems: list[str] = []
        servers: list[ServerAddress] = []
        for host, port, scheme in self._servers:
            try:
                servers.append(ServerAddress(host, port, scheme))
            except ConnectionConfigError as e:
                problems.append(str(e))
        problems.extend(
            sink_config_problems(
                index_name=self._index_name,
                object_type=self._object_type,
                servers=self._servers,
                connect_timeout_ms=self._connect_timeout_ms,
                max_workers=self._max_workers,
                name=self._name,
            )
        )
        if problems:
            return None, problems

        try:
            config = SinkConfig(
                index_name=self._index_name or "",
                servers=servers,
                object_type=self._object_type,
                name=self._name,
                connect_timeout_ms=self._connect_timeout_ms,
                max_workers=self._max_workers,
                username=self._username,
                password=self._password,
                api_key=self._api_key,
                ca_certs=self._ca_certs,
                verify_certs=self._verify_certs,
            )
        except ConnectionConfigError as e:
            return None, [str(e)]
        return config, []

    def is_valid(self) -> bool:
        """校验当前配置，记录所有问题并返回是否合法."""
        _, problems = self._build_config()
        for problem in problems:
            logger.error(f"Sink {self._name} 配置不合法: {problem}")
        return not problems

    def build(self) -> ElasticSender:
        """构建 ElasticSender.

        Returns:
            ElasticSender 实例

        Raises:
            ConnectionConfigError: 当配置不合法时抛出
        """
        config, problems = self._build_config()
        if config is None:
            raise ConnectionConfigError("; ".join(problems))

        on_close = None
        client = self._client
        if client is None:
            factory = ESClientFactory(config)
            client = factory.get_client()
            on_close = factory.close

        return ElasticSender(
            client,
            index_name=config.index_name,
            object_type=config.object_type,
            name=config.name,
            max_workers=config.max_workers,
            on_close=on_close,
        )
