"""Sink 连接配置模块 - 管理 Sink 的目标索引、节点地址和 Elasticsearch 客户端.

主要组件:
    - ESClientFactory: 根据配置创建并管理客户端
    - SinkConfig: Sink 配置模型
    - ServerAddress: 节点地址模型

使用示例:
    from elasticsink.connection import ESClientFactory, ServerAddress, SinkConfig

    config = SinkConfig(index_name="docs", servers=[ServerAddress("localhost", 9200)])
    client = ESClientFactory(config).get_client()
"""

from .exceptions import ConnectionConfigError
from .models import ServerAddress, SinkConfig
from .tool import ESClientFactory

__all__ = [
    # 工厂
    "ESClientFactory",
    # 模型
    "SinkConfig",
    "ServerAddress",
    # 异常
    "ConnectionConfigError",
]
