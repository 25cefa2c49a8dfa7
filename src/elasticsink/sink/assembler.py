"""批次组装模块."""

import logging
from collections.abc import Iterable

from .models import Batch, Document
from .translator import DocumentTranslator

logger = logging.getLogger(__name__)


class BatchAssembler:
    """将一组文档转换并组装为不可变批次.

    任意文档转换失败都会中止整个批次的组装，避免格式错误的文档被静默丢弃。

    Args:
        translator: 文档转换器
    """

    def __init__(self, translator: DocumentTranslator):
        self.translator = translator

    def assemble(self, documents: Iterable[Document]) -> Batch:
        """组装批次.

        Args:
            documents: 文档序列

        Returns:
            组装完成的批次

        Raises:
            UnsupportedOperationError: 当任意文档的操作类型不受支持时抛出
            DuplicateDocumentError: 当出现重复的文档ID时抛出
        """
        pairs = [(document, self.translator.translate(document)) for document in documents]
        batch = Batch(pairs)
        logger.debug(f"批次组装完成: {len(batch)} 个文档")
        return batch
