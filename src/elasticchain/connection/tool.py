"""Elasticsearch 客户端创建模块."""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import Elasticsearch

from .models import ConnectionSettings

logger = logging.getLogger(__name__)


def create_client(settings: ConnectionSettings) -> Elasticsearch:
    """根据连接配置创建 Elasticsearch 客户端实例.

    根据认证方式（Basic Auth / API Key / 无认证）和 SSL 配置构建客户端。
    只有同时提供用户名和密码时才启用 Basic Auth。

    Args:
        settings: 连接配置

    Returns:
        Elasticsearch 客户端实例
    """
    kwargs: dict[str, Any] = {
        "hosts": settings.hosts,
        "max_retries": settings.max_retries,
        "retry_on_timeout": settings.retry_on_timeout,
        "request_timeout": settings.request_timeout,
    }

    # Basic Auth 认证
    if settings.has_basic_auth:
        kwargs["basic_auth"] = (settings.username, settings.password)

    # API Key 认证
    if settings.api_key:
        kwargs["api_key"] = settings.api_key

    # SSL/TLS 配置
    if settings.ca_certs:
        kwargs["ca_certs"] = settings.ca_certs
    kwargs["verify_certs"] = settings.verify_certs

    logger.info(
        f"创建 Elasticsearch 客户端: hosts={settings.hosts}, "
        f"basic_auth={settings.has_basic_auth}, timeout={settings.request_timeout}"
    )
    return Elasticsearch(**kwargs)
