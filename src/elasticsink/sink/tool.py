"""批量提交核心工具类."""

from __future__ import annotations

import time
import logging
from typing import Any
from collections.abc import Callable, Iterable
from elasticsearch import Elasticsearch

from .assembler import BatchAssembler
from .exceptions import BulkCommitFailedError, IllegalStateError
from .fallback import FallbackRetryDriver
from .models import ActionKind, Batch, CommitResult, Document, DocumentOutcome, Outcome
from .translator import DocumentTranslator

logger = logging.getLogger(__name__)


class BulkCommitOrchestrator:
    """批量提交编排器.

    将整个批次作为一次 bulk 请求提交：
    - 请求本身抛出异常（网络、超时、服务不可用）时，整个批次转为逐条回退
    - 响应报告存在失败项时，抛出 BulkCommitFailedError 并同样转为逐条回退，
      不逐项解析响应，避免把未确认的文档误判为成功或失败
    - 响应没有失败项时，批次内所有文档标记为 SENT

    Args:
        es_client: Elasticsearch 客户端实例
        fallback_driver: 逐条回退重试驱动，默认使用同一客户端新建
    """

    def __init__(
        self,
        es_client: Elasticsearch,
        fallback_driver: FallbackRetryDriver | None = None,
    ):
        self.es_client = es_client
        self.fallback_driver = fallback_driver or FallbackRetryDriver(es_client)

    def _prepare_bulk_operations(self, batch: Batch) -> list[dict[str, Any]]:
        """将批次中的写入动作转换为 bulk 请求的操作列表.

        Raises:
            IllegalStateError: 当动作类型未知时抛出
        """
        operations: list[dict[str, Any]] = []
        for action in batch.actions:
            header = {"_index": action.index_name, "_id": action.doc_id}
            if action.kind is ActionKind.INDEX:
                operations.append({"index": header})
                operations.append(dict(action.body or {}))
            elif action.kind is ActionKind.UPDATE:
                operations.append({"update": header})
                # UPDATE 操作使用 doc 字段作为局部文档
                operations.append({"doc": dict(action.body or {})})
            elif action.kind is ActionKind.DELETE:
                operations.append({"delete": header})
            else:
                raise IllegalStateError(
                    f"只应生成 index、update、delete 三种写入动作，但发现了: {action.kind!r}"
                )
        return operations

    def _bulk_write(self, operations: list[dict[str, Any]]) -> None:
        """执行 bulk 请求.

        Raises:
            BulkCommitFailedError: 当响应报告存在失败项时抛出
        """
        response = self.es_client.bulk(operations=operations)
        body = getattr(response, "body", response)
        if body.get("errors"):
            raise BulkCommitFailedError("bulk 响应报告存在失败项")

    @staticmethod
    def exception_indicates_document_issue(error: BaseException) -> bool:
        """判断批次级错误是否与文档本身相关.

        目前只有 BulkCommitFailedError 被视为文档相关，其余异常（网络不可达、
        超时等）均视为与文档无关。两种情况都会触发完整的逐条回退。
        """
        return isinstance(error, BulkCommitFailedError)

    def commit(self, batch: Batch) -> CommitResult:
        """提交批次.

        Args:
            batch: 组装完成的批次

        Returns:
            批次提交结果，批次内每个文档恰好对应一个最终结果

        Raises:
            IllegalStateError: 当批次中存在未知类型的动作时抛出
        """
        result = CommitResult(batch_count=1)
        if not batch:
            return result

        start_time = time.time()
        operations = self._prepare_bulk_operations(batch)

        try:
            self._bulk_write(operations)
        except Exception as e:
            result.fallback = True
            result.batch_error = str(e) or type(e).__name__
            result.document_issue = self.exception_indicates_document_issue(e)
            if result.document_issue:
                logger.warning(f"bulk 响应报告存在失败项，{len(batch)} 个文档转为逐条重试")
            else:
                logger.error(
                    f"与 Elasticsearch 通信失败，{len(batch)} 个文档转为逐条重试: {e!r}"
                )
            result.outcomes.extend(self.fallback_driver.retry_individually(batch, e))
        else:
            for document in batch.documents:
                logger.info(f"{document.id} 已成功发送到 Elasticsearch")
                result.outcomes.append(
                    DocumentOutcome(doc_id=document.id, outcome=Outcome.SENT)
                )

        result.took = time.time() - start_time
        return result


class ElasticSender:
    """Elasticsearch 批量写入 Sink.

    组合文档转换、批次组装、批量提交与逐条回退，对外提供按批次写入
    和流式写入两种方式。至少一次送达，每个文档都有可观察的最终结果。

    Args:
        es_client: Elasticsearch 客户端实例
        index_name: 目标索引名称
        object_type: 目标文档类型，默认为 "_doc"
        name: Sink 名称，用于日志
        max_workers: 逐条回退时的最大并发数，默认为 10
        on_close: 关闭 Sink 时的回调，用于释放由构建器创建的客户端
    """

    def __init__(
        self,
        es_client: Elasticsearch,
        index_name: str,
        object_type: str = "_doc",
        name: str | None = None,
        max_workers: int = 10,
        on_close: Callable[[], None] | None = None,
    ):
        self.es_client = es_client
        self.index_name = index_name
        self.object_type = object_type
        self.name = name or f"elastic-sender-{index_name}"
        self.translator = DocumentTranslator(index_name, object_type)
        self.assembler = BatchAssembler(self.translator)
        self.orchestrator = BulkCommitOrchestrator(
            es_client, FallbackRetryDriver(es_client, max_workers=max_workers)
        )
        self._on_close = on_close
        logger.info(
            f"初始化批量写入 Sink: name={self.name}, index={index_name}, "
            f"object_type={object_type}, max_workers={max_workers}"
        )

    @property
    def has_external_side_effects(self) -> bool:
        """写入会修改外部系统状态."""
        return True

    def send(self, documents: Iterable[Document]) -> CommitResult:
        """将一组文档作为一个批次写入.

        Args:
            documents: 文档序列

        Returns:
            批次提交结果

        Raises:
            UnsupportedOperationError: 当任意文档的操作类型不受支持时抛出
            DuplicateDocumentError: 当批次中出现重复的文档ID时抛出

        Example:
            >>> sender = ElasticSender(es_client, "users")
            >>> result = sender.send(
            ...     [
            ...         Document("1", {"name": "Alice"}, Operation.CREATE),
            ...         Document("2", {"name": "Bob"}, Operation.UPDATE),
            ...     ]
            ... )
            >>> print(f"成功: {result.sent}, 失败: {result.failed}")
        """
        batch = self.assembler.assemble(documents)
        return self.orchestrator.commit(batch)

    def send_stream(
        self,
        documents: Iterable[Document],
        batch_size: int = 500,
        progress_callback: Callable[[int, int, CommitResult], None] | None = None,
    ) -> CommitResult:
        """流式写入文档.

        按 batch_size 将文档切分为批次依次提交，不需要将所有文档加载到内存。

        Args:
            documents: 文档迭代器
            batch_size: 每批次文档数量，默认为 500
            progress_callback: 进度回调函数，参数为 (当前处理数, -1, 当前批次结果)

        Returns:
            合并后的提交结果
        """
        if batch_size < 1:
            raise ValueError(f"batch_size 必须 >= 1，当前值: {batch_size}")

        result = CommitResult()
        batch: list[Document] = []
        processed_count = 0

        def flush() -> None:
            nonlocal processed_count
            batch_result = self.send(batch)
            result.merge(batch_result)
            processed_count += batch_result.total
            if progress_callback:
                progress_callback(processed_count, -1, batch_result)
            batch.clear()

        for document in documents:
            batch.append(document)
            if len(batch) >= batch_size:
                flush()

        # 处理剩余的文档
        if batch:
            flush()

        logger.info(
            f"流式写入完成: 批次 {result.batch_count}, 成功 {result.sent}, "
            f"部分分片失败 {result.partial}, 失败 {result.failed}"
        )
        return result

    def close(self) -> None:
        """关闭 Sink，释放由构建器创建的客户端."""
        if self._on_close is not None:
            self._on_close()
            self._on_close = None

    def __enter__(self) -> ElasticSender:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
