"""HTTP server."""

from xiaoniu.infrastructure.http.gateway_server import GatewayServer

__all__ = ["GatewayServer"]
