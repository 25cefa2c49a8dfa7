"""批量写入 Sink 数据模型定义模块."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from types import MappingProxyType
from typing import Any

from .exceptions import DuplicateDocumentError, IllegalStateError


class Operation(Enum):
    """文档操作类型枚举."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ActionKind(Enum):
    """写入动作类型枚举.

    写入动作的封闭标签，提交与回退路径都必须穷举处理这三种类型。
    """

    INDEX = "index"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def response_kind(self) -> str:
        """该类型写入动作对应的确认响应名称，用于诊断日志."""
        return f"{self.value.capitalize()}Response"


@dataclass
class Document:
    """待写入的文档.

    Attributes:
        id: 稳定的文档ID
        fields: 字段名到字段值的映射
        operation: 文档的操作类型
    """

    id: str
    fields: dict[str, Any] = field(default_factory=dict)
    operation: Operation = Operation.CREATE


@dataclass(frozen=True)
class Action:
    """由单个文档转换得到的写入动作，创建后不可变.

    Attributes:
        kind: 动作类型
        index_name: 目标索引名称
        doc_id: 文档ID
        object_type: 目标文档类型，仅用于诊断
        body: 写入内容（INDEX 为完整文档，UPDATE 为局部文档，DELETE 为 None）
    """

    kind: ActionKind
    index_name: str
    doc_id: str
    object_type: str = "_doc"
    body: Mapping[str, Any] | None = field(default=None, hash=False)


@dataclass(frozen=True)
class BatchEntry:
    """批次中的一个 (文档, 写入动作) 配对."""

    document: Document
    action: Action


class Batch:
    """由 (文档, 写入动作) 配对组成的不可变批次.

    构造时同时建立文档到动作、动作到文档两个方向的只读索引，
    之后不再修改，回退阶段可被多个线程并发读取。

    Args:
        pairs: (文档, 写入动作) 配对序列

    Raises:
        DuplicateDocumentError: 当批次中出现重复的文档ID时抛出
        IllegalStateError: 当写入动作与文档不是一一对应时抛出
    """

    def __init__(self, pairs: Iterable[tuple[Document, Action]]) -> None:
        entries = tuple(BatchEntry(document, action) for document, action in pairs)
        by_document: dict[str, int] = {}
        by_action: dict[Action, int] = {}
        for position, entry in enumerate(entries):
            if entry.document.id in by_document:
                raise DuplicateDocumentError(
                    f"批次中存在重复的文档ID: {entry.document.id}"
                )
            if entry.action.doc_id != entry.document.id:
                raise IllegalStateError(
                    f"写入动作的文档ID {entry.action.doc_id} 与文档 {entry.document.id} 不一致"
                )
            if entry.action in by_action:
                raise IllegalStateError(
                    f"写入动作被多个文档共用: {entry.action.doc_id}"
                )
            by_document[entry.document.id] = position
            by_action[entry.action] = position

        self._entries = entries
        self._by_document = MappingProxyType(by_document)
        self._by_action = MappingProxyType(by_action)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[BatchEntry]:
        return iter(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    @property
    def documents(self) -> tuple[Document, ...]:
        return tuple(entry.document for entry in self._entries)

    @property
    def actions(self) -> tuple[Action, ...]:
        return tuple(entry.action for entry in self._entries)

    def action_for(self, document: Document) -> Action:
        """根据文档查找其写入动作."""
        return self._entries[self._by_document[document.id]].action

    def document_for(self, action: Action) -> Document:
        """根据写入动作反查其来源文档."""
        return self._entries[self._by_action[action]].document


def _status_code(status: Any) -> int:
    """将分片失败中的状态转换为数字状态码.

    Elasticsearch 以状态名称（例如 "CONFLICT"）输出分片失败的状态，
    无法识别的状态按 500 处理。
    """
    if isinstance(status, int) and not isinstance(status, bool):
        return status
    if isinstance(status, str):
        if status.isdecimal():
            return int(status)
        try:
            return HTTPStatus[status.upper()].value
        except KeyError:
            pass
    return 500


@dataclass(frozen=True)
class AckResult:
    """单次写入的确认结果（分片级别）.

    Attributes:
        kind: 确认响应名称，例如 IndexResponse
        status: 分片级状态码，存在分片失败时取失败中最高的状态码，否则为 200
        successful: 写入成功的分片数
        failed: 写入失败的分片数
        total: 应写入的分片总数
    """

    kind: str
    status: int
    successful: int
    failed: int
    total: int = 0

    @classmethod
    def from_body(cls, kind: str, body: Mapping[str, Any]) -> AckResult:
        """从 Elasticsearch 单条写入的响应体构造确认结果.

        Args:
            kind: 确认响应名称
            body: 响应体，需包含 _shards 信息

        Returns:
            确认结果
        """
        shards = body.get("_shards") or {}
        failures = shards.get("failures") or []
        status = max((_status_code(failure.get("status")) for failure in failures), default=200)
        return cls(
            kind=kind,
            status=status,
            successful=shards.get("successful", 0),
            failed=shards.get("failed", 0),
            total=shards.get("total", 0),
        )


class Outcome(Enum):
    """文档的最终写入结果."""

    SENT = "sent"
    PARTIAL_SHARD_FAILURE = "partial_shard_failure"
    FAILED = "failed"


@dataclass(frozen=True)
class DocumentOutcome:
    """单个文档的最终结果.

    Attributes:
        doc_id: 文档ID
        outcome: 最终结果
        message: 面向运维的诊断信息，SENT 时为 None
    """

    doc_id: str
    outcome: Outcome
    message: str | None = None


@dataclass
class CommitResult:
    """批次提交结果数据类.

    Attributes:
        outcomes: 每个文档的最终结果
        fallback: 是否触发了逐条回退
        batch_error: 触发回退的批次级错误描述
        document_issue: 批次级错误是否被判定为文档相关
        took: 总耗时（秒）
        batch_count: 批次数
    """

    outcomes: list[DocumentOutcome] = field(default_factory=list)
    fallback: bool = False
    batch_error: str | None = None
    document_issue: bool = False
    took: float = 0.0
    batch_count: int = 0

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def sent(self) -> int:
        return self._count(Outcome.SENT)

    @property
    def partial(self) -> int:
        return self._count(Outcome.PARTIAL_SHARD_FAILURE)

    @property
    def failed(self) -> int:
        return self._count(Outcome.FAILED)

    def _count(self, outcome: Outcome) -> int:
        return sum(1 for item in self.outcomes if item.outcome is outcome)

    def is_success(self) -> bool:
        """判断是否所有文档都已完整送达."""
        return self.sent == self.total

    def outcome_for(self, doc_id: str) -> DocumentOutcome | None:
        """获取指定文档的结果."""
        for item in self.outcomes:
            if item.doc_id == doc_id:
                return item
        return None

    def merge(self, other: CommitResult) -> None:
        """合并另一个批次的提交结果."""
        self.outcomes.extend(other.outcomes)
        self.fallback = self.fallback or other.fallback
        # 保留第一个批次级错误
        if self.batch_error is None and other.batch_error is not None:
            self.batch_error = other.batch_error
            self.document_issue = other.document_issue
        self.took += other.took
        self.batch_count += other.batch_count

    def get_error_summary(self) -> str:
        """获取错误摘要."""
        problems = [item for item in self.outcomes if item.outcome is not Outcome.SENT]
        if not problems:
            return "No errors"
        summary = f"Total errors: {len(problems)}\n"
        for i, item in enumerate(problems[:10], 1):  # 只显示前10个错误
            summary += f"{i}. [{item.outcome.value}] DocID: {item.doc_id}, Reason: {item.message}\n"
        if len(problems) > 10:
            summary += f"... and {len(problems) - 10} more errors\n"
        return summary
