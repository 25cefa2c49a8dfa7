"""批量写入 Sink 模块.

该模块将文档批量写入 Elasticsearch，并在批量写入失败时逐条回退重试：
- 文档转换为 index / update / delete 写入动作
- 组装为不可变批次，支持文档与动作的双向查找
- 以一次 bulk 请求提交整个批次
- bulk 请求异常或报告失败项时，并发地逐条重新提交
- 根据分片级确认结果判定每个文档的最终结果

示例用法:
    >>> from elasticsink.sink import Document, ElasticSender, Operation
    >>> sender = ElasticSender(es_client, "users")
    >>> result = sender.send([Document("1", {"name": "Alice"}, Operation.CREATE)])
    >>> print(f"成功: {result.sent}, 失败: {result.failed}")
"""

from .models import (
    AckResult,
    Action,
    ActionKind,
    Batch,
    BatchEntry,
    CommitResult,
    Document,
    DocumentOutcome,
    Operation,
    Outcome,
)
from .translator import DocumentTranslator
from .assembler import BatchAssembler
from .classifier import ResponseClassifier
from .fallback import FallbackRetryDriver
from .tool import BulkCommitOrchestrator, ElasticSender
from .builder import ElasticSenderBuilder
from .exceptions import (
    BulkCommitFailedError,
    DuplicateDocumentError,
    IllegalStateError,
    SinkError,
    TranslationError,
    UnsupportedOperationError,
)

__all__ = [
    "AckResult",
    "Action",
    "ActionKind",
    "Batch",
    "BatchEntry",
    "CommitResult",
    "Document",
    "DocumentOutcome",
    "Operation",
    "Outcome",
    "DocumentTranslator",
    "BatchAssembler",
    "ResponseClassifier",
    "FallbackRetryDriver",
    "BulkCommitOrchestrator",
    "ElasticSender",
    "ElasticSenderBuilder",
    "BulkCommitFailedError",
    "DuplicateDocumentError",
    "IllegalStateError",
    "SinkError",
    "TranslationError",
    "UnsupportedOperationError",
]
