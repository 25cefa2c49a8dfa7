"""Elastic Sink 异常定义模块."""


class ElasticSinkError(Exception):
    """Elastic Sink 基础异常类."""

    pass
