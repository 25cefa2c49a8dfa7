"""批量写入 Sink 使用示例.

本文件展示了如何使用 ElasticSender 将文档批量写入 Elasticsearch，
并查看每个文档的最终结果。
"""

import logging

from elasticsink import Document, ElasticSenderBuilder, Operation, Outcome

logging.basicConfig(level=logging.INFO)

# 构建 Sink：目标索引、节点地址、连接超时和回退并发数
sender = (
    ElasticSenderBuilder()
    .named("articles-sink")
    .for_index("articles")
    .with_server("localhost", 9200)
    .with_connect_timeout(2000)  # 2秒
    .with_max_workers(8)  # 逐条回退时最多8个并发请求
    .build()
)


# ==================== 示例1：按批次写入 ====================
def example_send():
    """将一组新建、更新、删除混合的文档作为一个批次写入."""
    documents = [
        Document("1", {"title": "张三的文章", "views": 10}, Operation.CREATE),
        Document("2", {"views": 42}, Operation.UPDATE),
        Document("3", operation=Operation.DELETE),
    ]

    result = sender.send(documents)

    print("批次写入结果:")
    print(f"  总数: {result.total}")
    print(f"  成功: {result.sent}")
    print(f"  部分分片失败: {result.partial}")
    print(f"  失败: {result.failed}")
    print(f"  是否逐条回退: {result.fallback}")
    print(f"  耗时: {result.took:.2f}秒")

    for item in result.outcomes:
        if item.outcome is not Outcome.SENT:
            print(f"  {item.doc_id}: {item.outcome.value} - {item.message}")

    return result


# ==================== 示例2：流式写入 ====================
def example_send_stream():
    """流式写入大量文档，每 1000 个文档提交一个批次."""
    documents = (
        Document(str(i), {"title": f"文章 {i}", "views": i}, Operation.CREATE)
        for i in range(10000)
    )

    def progress_callback(current, total, batch_result):
        print(f"已处理: {current}, 本批成功: {batch_result.sent}, 本批失败: {batch_result.failed}")

    result = sender.send_stream(documents, batch_size=1000, progress_callback=progress_callback)

    if not result.is_success():
        print(f"错误摘要:\n{result.get_error_summary()}")

    return result


if __name__ == "__main__":
    with sender:
        example_send()
        example_send_stream()
