"""批量写入 Sink 异常定义模块."""

from ..exceptions import ElasticSinkError


class SinkError(ElasticSinkError):
    """Sink 基础异常类."""

    pass


class TranslationError(SinkError):
    """文档无法转换为写入动作时的异常."""

    pass


class UnsupportedOperationError(TranslationError):
    """文档携带了不支持的操作类型.

    属于编程或配置错误，不会重试，直接中止整个批次的组装。
    """

    pass


class DuplicateDocumentError(SinkError):
    """同一批次中出现重复的文档ID."""

    pass


class BulkCommitFailedError(SinkError):
    """批量写入请求被接受，但响应报告存在失败项.

    该异常不会逐项解析响应，而是触发整个批次的逐条回退重试。
    """

    pass


class IllegalStateError(SinkError):
    """提交或回退路径上出现了未知类型的写入动作.

    说明转换器存在缺陷，属于致命错误，不作为重试条件处理。
    """

    pass
