"""逐条回退重试模块.

批量提交失败后，将批次中的每个写入动作单独重新提交，
并对每个单条结果分别分类。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Any

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ApiError

from .classifier import ResponseClassifier
from .exceptions import IllegalStateError
from .models import AckResult, Action, ActionKind, Batch, DocumentOutcome, Outcome

logger = logging.getLogger(__name__)


class FallbackRetryDriver:
    """逐条回退重试驱动.

    所有单条重试先全部派发到线程池，再按完成顺序逐个解析，
    某个文档的慢请求或失败不会阻塞其他文档的分类。回退只有一层，
    单条重试失败的文档直接标记为 FAILED，不会再次递归重试。

    Args:
        es_client: Elasticsearch 客户端实例
        classifier: 确认结果分类器，默认新建一个
        max_workers: 并发重试的最大线程数，默认为 10
    """

    def __init__(
        self,
        es_client: Elasticsearch,
        classifier: ResponseClassifier | None = None,
        max_workers: int = 10,
    ):
        self.es_client = es_client
        self.classifier = classifier or ResponseClassifier()
        self.max_workers = max_workers

    def _individual_call(self, action: Action) -> Callable[[], AckResult]:
        """根据动作类型选择对应的单条写入调用.

        Raises:
            IllegalStateError: 当动作类型未知时抛出
        """
        if action.kind is ActionKind.INDEX:
            return lambda: self._acknowledge(
                action,
                self.es_client.index,
                index=action.index_name,
                id=action.doc_id,
                document=dict(action.body or {}),
            )
        if action.kind is ActionKind.UPDATE:
            return lambda: self._acknowledge(
                action,
                self.es_client.update,
                index=action.index_name,
                id=action.doc_id,
                doc=dict(action.body or {}),
            )
        if action.kind is ActionKind.DELETE:
            return lambda: self._acknowledge(
                action,
                self.es_client.delete,
                index=action.index_name,
                id=action.doc_id,
            )
        raise IllegalStateError(
            f"只应生成 index、update、delete 三种写入动作，但发现了: {action.kind!r}"
        )

    @staticmethod
    def _acknowledge(action: Action, call: Callable[..., Any], **kwargs: Any) -> AckResult:
        """执行单条写入并提取分片级确认结果.

        携带 _shards 信息的 ApiError（例如删除不存在的文档）仍是一次写入确认，
        交由分类器处理；其他异常原样抛出。
        """
        kind = action.kind.response_kind
        try:
            response = call(**kwargs)
        except ApiError as e:
            if isinstance(e.body, dict) and "_shards" in e.body:
                return AckResult.from_body(kind, e.body)
            raise
        return AckResult.from_body(kind, getattr(response, "body", response))

    def retry_individually(
        self, batch: Batch, original_error: BaseException
    ) -> list[DocumentOutcome]:
        """逐条重新提交批次中的所有写入动作.

        Args:
            batch: 批量提交失败的批次
            original_error: 批次级错误，用于诊断日志

        Returns:
            每个文档的最终结果（按完成顺序）

        Raises:
            IllegalStateError: 当批次中存在未知类型的动作时抛出，此时不会派发任何请求
        """
        if not batch:
            return []

        calls = [(action, self._individual_call(action)) for action in batch.actions]
        outcomes: list[DocumentOutcome] = []

        workers = min(self.max_workers, len(calls))
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="elasticsink-fallback"
        ) as executor:
            futures: dict[Future, Action] = {
                executor.submit(call): action for action, call in calls
            }
            logger.info(f"已派发 {len(futures)} 个单条重试请求")

            for future in as_completed(futures):
                outcomes.append(
                    self._handle_retry_result(batch, futures[future], future, original_error)
                )

        return outcomes

    def _handle_retry_result(
        self,
        batch: Batch,
        action: Action,
        future: Future,
        original_error: BaseException,
    ) -> DocumentOutcome:
        document = batch.document_for(action)
        try:
            # 分类也在单文档的错误处理范围内，异常的确认结果不影响其他文档
            return self.classifier.classify(document, future.result())
        except Exception as ex:
            message = f"{document.id} 无法发送到 Elasticsearch，原因: {ex}"
            logger.error(
                f"{message}；批次级错误: {original_error!r}",
                exc_info=ex,
            )
            return DocumentOutcome(doc_id=document.id, outcome=Outcome.FAILED, message=message)
