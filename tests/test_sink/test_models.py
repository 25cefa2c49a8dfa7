"""Sink 数据模型（Batch、AckResult、CommitResult）单元测试."""

import unittest

from elasticsink.sink import (
    AckResult,
    Action,
    ActionKind,
    Batch,
    CommitResult,
    Document,
    DocumentOutcome,
    DuplicateDocumentError,
    IllegalStateError,
    Operation,
    Outcome,
)


class TestActionKind(unittest.TestCase):
    """ActionKind 枚举测试."""

    def test_response_kind(self):
        """测试确认响应名称."""
        self.assertEqual(ActionKind.INDEX.response_kind, "IndexResponse")
        self.assertEqual(ActionKind.UPDATE.response_kind, "UpdateResponse")
        self.assertEqual(ActionKind.DELETE.response_kind, "DeleteResponse")


class TestBatch(unittest.TestCase):
    """Batch 类单元测试."""

    def setUp(self):
        """设置测试环境."""
        self.doc_a = Document("a", {"x": 1}, Operation.CREATE)
        self.doc_b = Document("b", {}, Operation.DELETE)
        self.action_a = Action(ActionKind.INDEX, "docs", "a", body={"x": 1})
        self.action_b = Action(ActionKind.DELETE, "docs", "b")
        self.batch = Batch([(self.doc_a, self.action_a), (self.doc_b, self.action_b)])

    def test_bidirectional_lookup(self):
        """测试文档与动作的双向查找."""
        self.assertIs(self.batch.action_for(self.doc_a), self.action_a)
        self.assertIs(self.batch.document_for(self.action_b), self.doc_b)

    def test_lookup_by_equal_action(self):
        """测试使用相等的动作对象也能反查文档."""
        same = Action(ActionKind.INDEX, "docs", "a", body={"x": 1})
        self.assertIs(self.batch.document_for(same), self.doc_a)

    def test_unknown_action_raises_key_error(self):
        """测试查找不在批次中的动作抛出 KeyError."""
        with self.assertRaises(KeyError):
            self.batch.document_for(Action(ActionKind.DELETE, "docs", "zzz"))

    def test_documents_and_actions(self):
        """测试文档与动作列表保持配对顺序."""
        self.assertEqual(self.batch.documents, (self.doc_a, self.doc_b))
        self.assertEqual(self.batch.actions, (self.action_a, self.action_b))
        self.assertEqual(len(self.batch), 2)
        self.assertEqual([entry.document.id for entry in self.batch], ["a", "b"])

    def test_duplicate_document_rejected(self):
        """测试重复的文档ID被拒绝."""
        with self.assertRaises(DuplicateDocumentError):
            Batch([(self.doc_a, self.action_a), (self.doc_a, self.action_a)])

    def test_action_for_other_document_rejected(self):
        """测试写入动作的文档ID与文档不一致时被拒绝."""
        with self.assertRaises(IllegalStateError):
            Batch([(self.doc_a, self.action_b)])

    def test_shared_action_rejected(self):
        """测试多个文档共用同一个写入动作时被拒绝，批次不会静默丢失文档."""
        with self.assertRaises(IllegalStateError):
            Batch([(self.doc_a, self.action_a), (self.doc_b, self.action_a)])


class TestAckResult(unittest.TestCase):
    """AckResult 类单元测试."""

    def test_from_body_without_failures(self):
        """测试没有分片失败时状态码为 200."""
        ack = AckResult.from_body(
            "IndexResponse",
            {"_shards": {"total": 2, "successful": 2, "failed": 0}, "result": "created"},
        )
        self.assertEqual(ack.status, 200)
        self.assertEqual(ack.successful, 2)
        self.assertEqual(ack.failed, 0)
        self.assertEqual(ack.total, 2)
        self.assertEqual(ack.kind, "IndexResponse")

    def test_from_body_takes_highest_failure_status(self):
        """测试存在分片失败时取最高的失败状态码."""
        ack = AckResult.from_body(
            "UpdateResponse",
            {
                "_shards": {
                    "total": 3,
                    "successful": 1,
                    "failed": 2,
                    "failures": [{"status": 409}, {"status": 503}],
                }
            },
        )
        self.assertEqual(ack.status, 503)
        self.assertEqual(ack.successful, 1)
        self.assertEqual(ack.failed, 2)

    def test_from_body_with_status_names(self):
        """测试分片失败状态为状态名称时转换为数字状态码."""
        ack = AckResult.from_body(
            "IndexResponse",
            {
                "_shards": {
                    "total": 2,
                    "successful": 1,
                    "failed": 1,
                    "failures": [{"shard": 0, "status": "CONFLICT"}],
                }
            },
        )
        self.assertEqual(ack.status, 409)

        ack = AckResult.from_body(
            "UpdateResponse",
            {
                "_shards": {
                    "total": 3,
                    "successful": 0,
                    "failed": 2,
                    "failures": [{"status": "CONFLICT"}, {"status": "SERVICE_UNAVAILABLE"}],
                }
            },
        )
        self.assertEqual(ack.status, 503)

    def test_from_body_with_unknown_status(self):
        """测试无法识别或缺失的分片失败状态按 500 处理."""
        for failure in ({"status": "SOMETHING_ELSE"}, {"reason": "no status"}, {"status": None}):
            with self.subTest(failure=failure):
                ack = AckResult.from_body(
                    "DeleteResponse",
                    {"_shards": {"total": 1, "successful": 0, "failed": 1, "failures": [failure]}},
                )
                self.assertEqual(ack.status, 500)

    def test_from_body_without_shards(self):
        """测试缺少 _shards 信息时各计数为 0."""
        ack = AckResult.from_body("DeleteResponse", {})
        self.assertEqual(ack.status, 200)
        self.assertEqual(ack.successful, 0)


class TestCommitResult(unittest.TestCase):
    """CommitResult 类单元测试."""

    def _result(self, *outcomes):
        return CommitResult(
            outcomes=[DocumentOutcome(doc_id, outcome, msg) for doc_id, outcome, msg in outcomes],
            batch_count=1,
        )

    def test_counts(self):
        """测试按结果统计."""
        result = self._result(
            ("1", Outcome.SENT, None),
            ("2", Outcome.PARTIAL_SHARD_FAILURE, "partial"),
            ("3", Outcome.FAILED, "boom"),
        )
        self.assertEqual(result.total, 3)
        self.assertEqual(result.sent, 1)
        self.assertEqual(result.partial, 1)
        self.assertEqual(result.failed, 1)
        self.assertFalse(result.is_success())

    def test_is_success(self):
        """测试全部送达时判定为成功."""
        result = self._result(("1", Outcome.SENT, None))
        self.assertTrue(result.is_success())

    def test_outcome_for(self):
        """测试按文档ID查找结果."""
        result = self._result(("1", Outcome.SENT, None), ("2", Outcome.FAILED, "boom"))
        self.assertEqual(result.outcome_for("2").outcome, Outcome.FAILED)
        self.assertIsNone(result.outcome_for("9"))

    def test_merge(self):
        """测试合并批次结果."""
        first = self._result(("1", Outcome.SENT, None))
        second = self._result(("2", Outcome.FAILED, "boom"))
        second.fallback = True
        second.batch_error = "timeout"
        first.merge(second)
        self.assertEqual(first.total, 2)
        self.assertEqual(first.batch_count, 2)
        self.assertTrue(first.fallback)
        self.assertEqual(first.batch_error, "timeout")

    def test_merge_keeps_first_batch_error(self):
        """测试合并时保留第一个批次级错误."""
        first = self._result(("1", Outcome.FAILED, "boom"))
        first.batch_error = "connection refused"
        second = self._result(("2", Outcome.FAILED, "boom"))
        second.batch_error = "timeout"
        third = self._result(("3", Outcome.SENT, None))

        first.merge(second)
        first.merge(third)

        self.assertEqual(first.batch_error, "connection refused")
        self.assertEqual(first.batch_count, 3)

    def test_get_error_summary(self):
        """测试获取错误摘要."""
        result = self._result(("1", Outcome.FAILED, "Reason1"))
        summary = result.get_error_summary()
        self.assertIn("Total errors: 1", summary)
        self.assertIn("Reason1", summary)

    def test_get_error_summary_no_errors(self):
        """测试获取错误摘要（无错误）."""
        self.assertEqual(self._result(("1", Outcome.SENT, None)).get_error_summary(), "No errors")


if __name__ == "__main__":
    unittest.main()
