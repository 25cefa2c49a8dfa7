"""Sink 连接配置异常定义模块."""

from ..exceptions import ElasticSinkError


class ConnectionConfigError(ElasticSinkError):
    """连接配置校验异常.

    当连接配置参数不合法时抛出，例如 servers 为空、端口不是数字、超时时间为负等。
    """

    pass
