"""连接配置数据模型定义模块."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .exceptions import ConnectionConfigError

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class ConnectionSettings:
    """Elasticsearch 连接配置.

    Attributes:
        hosts: ES 节点地址列表（必需，不可为空）
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证（字符串或元组）
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True
        request_timeout: 请求超时时间（秒），默认 30
        max_retries: 传输层最大重试次数，默认 3
        retry_on_timeout: 超时是否重试，默认 True

    Raises:
        ConnectionConfigError: 当参数不合法时抛出

    Examples:
        >>> settings = ConnectionSettings(
        ...     hosts=["http://127.0.0.1:9201"],
        ...     username="elastic",
        ...     password="123456",
        ... )
    """

    hosts: list[str] = field(default_factory=list)
    username: str | None = None
    password: str | None = None
    api_key: str | tuple[str, str] | None = None
    ca_certs: str | None = None
    verify_certs: bool = True
    request_timeout: int = 30
    max_retries: int = 3
    retry_on_timeout: bool = True

    def __post_init__(self) -> None:
        """校验连接配置参数合法性."""
        if not self.hosts:
            raise ConnectionConfigError("hosts 不能为空，请提供至少一个 ES 节点地址")
        if self.request_timeout < 0:
            raise ConnectionConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )
        if self.max_retries < 0:
            raise ConnectionConfigError(
                f"max_retries 必须 >= 0，当前值: {self.max_retries}"
            )

    @property
    def has_basic_auth(self) -> bool:
        return bool(self.username and self.password)

    @classmethod
    def from_env(
        cls, prefix: str = "ESCHAIN_", environ: dict[str, str] | None = None
    ) -> ConnectionSettings:
        """从环境变量读取连接配置.

        读取的变量（以默认前缀为例）:
            ESCHAIN_HOSTS: 逗号分隔的节点地址
            ESCHAIN_USERNAME / ESCHAIN_PASSWORD: Basic Auth
            ESCHAIN_API_KEY: API Key
            ESCHAIN_CA_CERTS: CA 证书路径
            ESCHAIN_VERIFY_CERTS: 是否验证证书
            ESCHAIN_REQUEST_TIMEOUT: 请求超时（秒）

        Args:
            prefix: 环境变量前缀
            environ: 环境变量字典，默认 os.environ

        Returns:
            ConnectionSettings 对象

        Raises:
            ConnectionConfigError: 缺少 HOSTS 或数值格式错误时
        """
        env = os.environ if environ is None else environ

        hosts = [h.strip() for h in env.get(f"{prefix}HOSTS", "").split(",") if h.strip()]
        timeout_raw = env.get(f"{prefix}REQUEST_TIMEOUT")
        try:
            request_timeout = int(timeout_raw) if timeout_raw else 30
        except ValueError as e:
            raise ConnectionConfigError(
                f"{prefix}REQUEST_TIMEOUT 必须是整数，当前值: {timeout_raw}"
            ) from e

        verify_raw = env.get(f"{prefix}VERIFY_CERTS")
        verify_certs = True if verify_raw is None else verify_raw.lower() in _TRUE_VALUES

        return cls(
            hosts=hosts,
            username=env.get(f"{prefix}USERNAME") or None,
            password=env.get(f"{prefix}PASSWORD") or None,
            api_key=env.get(f"{prefix}API_KEY") or None,
            ca_certs=env.get(f"{prefix}CA_CERTS") or None,
            verify_certs=verify_certs,
            request_timeout=request_timeout,
        )
