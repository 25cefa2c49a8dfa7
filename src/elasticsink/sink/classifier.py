"""单条写入确认结果分类模块."""

import logging

from .models import AckResult, Document, DocumentOutcome, Outcome

logger = logging.getLogger(__name__)


class ResponseClassifier:
    """根据分片级确认结果判定文档的最终结果.

    - 状态码 < 400: SENT
    - 状态码 >= 400 且没有分片写入成功: FAILED
    - 状态码 >= 400 且至少一个分片写入成功: PARTIAL_SHARD_FAILURE，
      写入已在部分副本上持久化，是否再次重试由调用方决定

    分类器无状态，对同一确认结果重复分类得到相同结果。
    """

    def classify(self, document: Document, ack: AckResult) -> DocumentOutcome:
        """判定单个文档的最终结果.

        Args:
            document: 来源文档
            ack: 写入确认结果

        Returns:
            文档的最终结果
        """
        doc_id = document.id
        if ack.status < 400:
            logger.info(f"{doc_id} 已成功发送到 Elasticsearch")
            return DocumentOutcome(doc_id=doc_id, outcome=Outcome.SENT)

        if ack.successful == 0:
            message = (
                f"{doc_id} 在所有相关分片上执行 {ack.kind} 失败 (status={ack.status})，"
                f"详情请查看 Elasticsearch 日志"
            )
            logger.error(message)
            return DocumentOutcome(doc_id=doc_id, outcome=Outcome.FAILED, message=message)

        message = (
            f"{doc_id} 在 {ack.failed} 个分片上写入失败 (status={ack.status})，"
            f"详情请查看 Elasticsearch 日志"
        )
        logger.warning(message)
        return DocumentOutcome(
            doc_id=doc_id, outcome=Outcome.PARTIAL_SHARD_FAILURE, message=message
        )
