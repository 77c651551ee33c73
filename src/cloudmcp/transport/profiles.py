"""HTTP transport profiles: tuned ``httpx`` clients for the provider API.

A profile is an :class:`HTTPClientConfig`.  :func:`recommend_config` returns
one of the named presets, :func:`validate_config` lists advisory warnings,
and :func:`build_async_client` turns a profile into an ``httpx.AsyncClient``
with HTTP/2, a bounded connection pool, and per-phase timeouts.

Mapping onto ``httpx``:

- ``max_conns_per_host`` → ``Limits.max_connections`` (one upstream host)
- ``min(max_idle_conns, max_idle_conns_per_host)`` → ``Limits.max_keepalive_connections``
- ``idle_conn_timeout`` → ``Limits.keepalive_expiry``
- ``dial_timeout + tls_handshake_timeout`` → ``Timeout.connect``
- ``response_header_timeout`` → ``Timeout.read``
- ``overall_timeout`` → ``Timeout`` default (write and pool phases)
- ``keep_alive_interval`` → TCP keep-alive socket options
"""

from __future__ import annotations

import socket
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, Field

from cloudmcp import __version__

if TYPE_CHECKING:
    from cloudmcp.transport.auth import BearerAuth

USER_AGENT = f"CloudMCP/{__version__}"

PROFILE_NAMES = (
    "default",
    "high-throughput",
    "low-latency",
    "resource-constrained",
    "batch-processing",
)

# Validator thresholds
_MIN_OVERALL_TIMEOUT = 5.0
_MIN_DIAL_TIMEOUT = 1.0
_MAX_IDLE_CONNS = 1000
_MAX_IDLE_CONNS_PER_HOST = 100
_MIN_IDLE_CONN_TIMEOUT = 30.0


class HTTPClientConfig(BaseModel):
    """Connection-pool and timeout settings for one upstream host.

    Durations are in seconds.
    """

    max_idle_conns: int = Field(default=100, ge=0)
    max_idle_conns_per_host: int = Field(default=10, ge=0)
    max_conns_per_host: int = Field(default=30, ge=1)
    idle_conn_timeout: float = Field(default=90.0, ge=0)

    overall_timeout: float = Field(default=30.0, gt=0)
    dial_timeout: float = Field(default=10.0, gt=0)
    tls_handshake_timeout: float = Field(default=10.0, gt=0)
    response_header_timeout: float = Field(default=10.0, gt=0)

    keep_alive_interval: float = Field(default=30.0, ge=0)
    disable_keep_alives: bool = False

    disable_compression: bool = False
    skip_tls_verify: bool = False

    expect_continue_timeout: float = Field(default=1.0, ge=0)


_PRESETS: dict[str, dict[str, Any]] = {
    "default": {},
    "high-throughput": {
        "max_idle_conns": 200,
        "max_idle_conns_per_host": 20,
        "max_conns_per_host": 50,
        "idle_conn_timeout": 120.0,
        "overall_timeout": 60.0,
    },
    "low-latency": {
        "dial_timeout": 3.0,
        "tls_handshake_timeout": 3.0,
        "response_header_timeout": 5.0,
        "overall_timeout": 15.0,
        "max_conns_per_host": 4,
    },
    "resource-constrained": {
        "max_idle_conns": 20,
        "max_idle_conns_per_host": 2,
        "max_conns_per_host": 5,
        "idle_conn_timeout": 30.0,
    },
    "batch-processing": {
        "max_idle_conns": 300,
        "max_idle_conns_per_host": 30,
        "max_conns_per_host": 100,
        "overall_timeout": 120.0,
        "idle_conn_timeout": 300.0,
    },
}


def recommend_config(name: str) -> HTTPClientConfig:
    """Return the preset for *name*; unknown names fall back to ``default``."""
    return HTTPClientConfig(**_PRESETS.get(name, {}))


def validate_config(config: HTTPClientConfig) -> list[str]:
    """Return human-readable warnings for risky settings.  Never raises."""
    warnings: list[str] = []

    if config.overall_timeout < _MIN_OVERALL_TIMEOUT:
        warnings.append("overall_timeout is very low and may cause premature request failures")
    if config.dial_timeout < _MIN_DIAL_TIMEOUT:
        warnings.append("dial_timeout is very low and may cause connection failures")
    if config.max_idle_conns > _MAX_IDLE_CONNS:
        warnings.append("max_idle_conns is very high and may consume excessive memory")
    if config.max_idle_conns_per_host > _MAX_IDLE_CONNS_PER_HOST:
        warnings.append("max_idle_conns_per_host is very high for API usage")
    if config.disable_keep_alives:
        warnings.append("disable_keep_alives reduces performance for API usage")
    if config.disable_compression:
        warnings.append("disable_compression may increase bandwidth usage")
    if config.skip_tls_verify:
        warnings.append("skip_tls_verify is a security risk and should not be used in production")
    if config.idle_conn_timeout < _MIN_IDLE_CONN_TIMEOUT:
        warnings.append("idle_conn_timeout is short and may reduce connection reuse benefits")

    return warnings


def build_limits(config: HTTPClientConfig) -> httpx.Limits:
    keepalive = 0 if config.disable_keep_alives else min(
        config.max_idle_conns, config.max_idle_conns_per_host
    )
    return httpx.Limits(
        max_connections=config.max_conns_per_host,
        max_keepalive_connections=keepalive,
        keepalive_expiry=config.idle_conn_timeout,
    )


def build_timeout(config: HTTPClientConfig) -> httpx.Timeout:
    return httpx.Timeout(
        config.overall_timeout,
        connect=config.dial_timeout + config.tls_handshake_timeout,
        read=config.response_header_timeout,
    )


def _socket_options(config: HTTPClientConfig) -> list[tuple[int, int, int]]:
    if config.disable_keep_alives or config.keep_alive_interval <= 0:
        return []
    interval = max(1, int(config.keep_alive_interval))
    options = [(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)]
    # Not every platform exposes the tuning knobs.
    if hasattr(socket, "TCP_KEEPIDLE"):
        options.append((socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, interval))
    if hasattr(socket, "TCP_KEEPINTVL"):
        options.append((socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, interval))
    return options


def build_async_client(
    config: HTTPClientConfig,
    *,
    base_url: str,
    auth: BearerAuth | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build an ``httpx.AsyncClient`` for *base_url* using *config*.

    *transport* replaces the pooled HTTP/2 transport (tests inject a mock).
    """
    headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    if config.disable_compression:
        headers["Accept-Encoding"] = "identity"

    if transport is None:
        transport = httpx.AsyncHTTPTransport(
            http2=True,
            verify=not config.skip_tls_verify,
            limits=build_limits(config),
            socket_options=_socket_options(config),
        )

    return httpx.AsyncClient(
        base_url=base_url.rstrip("/"),
        auth=auth,
        headers=headers,
        timeout=build_timeout(config),
        transport=transport,
        follow_redirects=False,
    )
