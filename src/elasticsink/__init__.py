"""Elastic Sink - Elasticsearch Batch Ingestion Sink.

这是一个将文档批量写入 Elasticsearch 的 Python 库，批量写入失败时逐条回退重试，
并为每个文档给出可观察的最终结果。

主要功能:
    - ElasticSender: 按批次或流式写入文档
    - ElasticSenderBuilder: 链式构建并校验 Sink 配置
    - ESClientFactory: 根据配置创建 Elasticsearch 客户端

使用示例:
    from elasticsink import Document, ElasticSenderBuilder, Operation

    sender = ElasticSenderBuilder().for_index("docs").with_server("localhost", 9200).build()
    result = sender.send([Document("1", {"title": "hello"}, Operation.CREATE)])
"""

__version__ = "0.1.0"

# 导出连接配置
from elasticsink.connection import (
    ConnectionConfigError,
    ESClientFactory,
    ServerAddress,
    SinkConfig,
)

# 导出异常
from elasticsink.exceptions import ElasticSinkError

# 导出 Sink 核心组件
from elasticsink.sink import (
    AckResult,
    BulkCommitFailedError,
    CommitResult,
    Document,
    DocumentOutcome,
    DuplicateDocumentError,
    ElasticSender,
    ElasticSenderBuilder,
    IllegalStateError,
    Operation,
    Outcome,
    TranslationError,
    UnsupportedOperationError,
)

__all__ = [
    # 版本
    "__version__",
    # Sink
    "ElasticSender",
    "ElasticSenderBuilder",
    "Document",
    "Operation",
    "Outcome",
    "DocumentOutcome",
    "CommitResult",
    "AckResult",
    # 连接配置
    "ESClientFactory",
    "SinkConfig",
    "ServerAddress",
    # 异常
    "ElasticSinkError",
    "ConnectionConfigError",
    "TranslationError",
    "UnsupportedOperationError",
    "DuplicateDocumentError",
    "BulkCommitFailedError",
    "IllegalStateError",
]
