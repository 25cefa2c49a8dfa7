"""文档转换模块，将文档转换为 Elasticsearch 写入动作."""

from types import MappingProxyType

from .exceptions import UnsupportedOperationError
from .models import Action, ActionKind, Document, Operation


class DocumentTranslator:
    """文档到写入动作的转换器.

    纯函数式转换，无副作用：
    - CREATE 转换为携带完整字段的 INDEX 动作
    - UPDATE 转换为以完整字段作为局部文档的 UPDATE 动作
    - DELETE 转换为只携带文档ID的 DELETE 动作

    Args:
        index_name: 目标索引名称
        object_type: 目标文档类型，默认为 "_doc"
    """

    def __init__(self, index_name: str, object_type: str = "_doc"):
        self.index_name = index_name
        self.object_type = object_type

    def translate(self, document: Document) -> Action:
        """将文档转换为写入动作.

        Args:
            document: 待转换的文档

        Returns:
            写入动作

        Raises:
            UnsupportedOperationError: 当文档的操作类型不受支持时抛出
        """
        operation = document.operation
        if operation is Operation.CREATE:
            kind = ActionKind.INDEX
        elif operation is Operation.UPDATE:
            kind = ActionKind.UPDATE
        elif operation is Operation.DELETE:
            return Action(
                kind=ActionKind.DELETE,
                index_name=self.index_name,
                doc_id=document.id,
                object_type=self.object_type,
            )
        else:
            raise UnsupportedOperationError(f"不支持的操作类型: {operation!r}")

        return Action(
            kind=kind,
            index_name=self.index_name,
            doc_id=document.id,
            object_type=self.object_type,
            body=MappingProxyType(dict(document.fields)),
        )
