"""Sink 连接配置数据模型定义模块.

提供 Sink 相关的配置模型，包括：
- ServerAddress: 单个 Elasticsearch 节点地址
- SinkConfig: Sink 的目标索引、节点与连接参数
"""

from collections.abc import Sized
from dataclasses import dataclass, field

from .exceptions import ConnectionConfigError


@dataclass
class ServerAddress:
    """Elasticsearch 节点地址.

    Attributes:
        host: 主机名或 IP（必需，不可为空）
        port: 端口，可以是整数或数字字符串，校验后统一为整数
        scheme: 协议，默认 "http"

    Raises:
        ConnectionConfigError: 当 host 为空或端口不是合法数字时抛出

    Examples:
        >>> ServerAddress("localhost", "9200").url
        'http://localhost:9200'
    """

    host: str
    port: int | str
    scheme: str = "http"

    def __post_init__(self) -> None:
        """校验节点地址合法性."""
        if not self.host:
            raise ConnectionConfigError("host 不能为空")
        if isinstance(self.port, bool):
            raise ConnectionConfigError(f"主机 {self.host} 的端口不是数字: {self.port!r}")
        if isinstance(self.port, str):
            if not self.port.strip().isdecimal():
                raise ConnectionConfigError(
                    f"主机 {self.host} 的端口不是数字: {self.port!r}"
                )
            self.port = int(self.port)
        if not isinstance(self.port, int):
            raise ConnectionConfigError(f"主机 {self.host} 的端口不是数字: {self.port!r}")
        if not 0 < self.port < 65536:
            raise ConnectionConfigError(
                f"主机 {self.host} 的端口超出范围 1-65535: {self.port}"
            )

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


@dataclass
class SinkConfig:
    """Sink 配置模型.

    Attributes:
        index_name: 目标索引名称（必需）
        servers: Elasticsearch 节点地址列表（必需，不可为空）
        object_type: 目标文档类型，默认 "_doc"
        name: Sink 名称
        connect_timeout_ms: 连接超时时间（毫秒），None 表示使用客户端默认值
        max_workers: 逐条回退时的最大并发数，默认 10，必须 >= 1
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True

    Raises:
        ConnectionConfigError: 当参数不合法时抛出
    """

    index_name: str
    servers: list[ServerAddress] = field(default_factory=list)
    object_type: str = "_doc"
    name: str | None = None
    connect_timeout_ms: int | None = None
    max_workers: int = 10
    username: str | None = None
    password: str | None = None
    api_key: str | tuple[str, str] | None = None
    ca_certs: str | None = None
    verify_certs: bool = True

    def __post_init__(self) -> None:
        """校验 Sink 配置参数合法性."""
        problems = sink_config_problems(
            index_name=self.index_name,
            object_type=self.object_type,
            servers=self.servers,
            connect_timeout_ms=self.connect_timeout_ms,
            max_workers=self.max_workers,
            name=self.name,
        )
        if problems:
            raise ConnectionConfigError("; ".join(problems))

    @property
    def hosts(self) -> list[str]:
        return [server.url for server in self.servers]


def sink_config_problems(
    index_name: str | None,
    object_type: str | None,
    servers: Sized,
    connect_timeout_ms: int | None,
    max_workers: int,
    name: str | None = None,
) -> list[str]:
    """收集 Sink 配置中的所有问题，不在第一个问题处停止.

    Returns:
        问题描述列表，配置合法时为空
    """
    problems: list[str] = []
    if not index_name:
        problems.append(f"Sink {name} 未指定 index_name")
    if not object_type:
        problems.append(f"Sink {name} 未指定 object_type")
    if not len(servers):
        problems.append(f"Sink {name} 的 servers 不能为空，请提供至少一个 ES 节点地址")
    if connect_timeout_ms is not None and connect_timeout_ms < 0:
        problems.append(f"connect_timeout_ms 必须 >= 0，当前值: {connect_timeout_ms}")
    if max_workers < 1:
        problems.append(f"max_workers 必须 >= 1，当前值: {max_workers}")
    return problems
