"""OneBot reverse WebSocket gateway and health check HTTP server."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from aiohttp import WSMsgType, web

from xiaoniu.config import OneBotConfig

if TYPE_CHECKING:
    from xiaoniu.infrastructure.events.dispatcher import EventDispatcher
    from xiaoniu.infrastructure.onebot.event_adapter import OneBotEventAdapter
    from xiaoniu.infrastructure.onebot.messaging import OneBotReplySender

logger = logging.getLogger(__name__)

HealthCheck = Callable[[], Awaitable[bool]]


async def _always_healthy() -> bool:
    return True


class GatewayServer:
    """HTTP server accepting the OneBot reverse WebSocket.

    The OneBot implementation connects to the WebSocket path and pushes
    events; replies go back over the same connection. Also provides /live
    and /ready endpoints for Kubernetes probes.
    """

    def __init__(
        self,
        adapter: OneBotEventAdapter,
        dispatcher: EventDispatcher,
        reply_sender: OneBotReplySender,
        config: OneBotConfig,
        persistence_check: HealthCheck | None = None,
    ) -> None:
        """Initialize the gateway server.

        Args:
            adapter: Converts payloads to chat events.
            dispatcher: Receives every chat event.
            reply_sender: Gets the connection attached for outgoing replies.
            config: Listen address and WebSocket path. Use port 0 for any
                available port.
            persistence_check: Reports whether the storage backend is usable.
        """
        self._adapter = adapter
        self._dispatcher = dispatcher
        self._reply_sender = reply_sender
        self._config = config
        self._persistence_check = persistence_check or _always_healthy
        self._actual_port = config.port
        self._server: web.AppRunner | None = None
        self._site: web.TCPSite | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Check if the server is running."""
        return self._running

    @property
    def port(self) -> int:
        """Get the port the server is listening on."""
        return self._actual_port

    async def check_liveness(self) -> dict[str, Any]:
        """Check if the application is alive.

        Returns:
            Liveness status with timestamp.
        """
        return {
            "status": "alive" if self._running else "dead",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    async def check_readiness(self) -> dict[str, Any]:
        """Check if the application is ready to serve traffic.

        Returns:
            Readiness status with component health details.
        """
        gateway_ok = self._reply_sender.is_connected
        try:
            persistence_ok = await self._persistence_check()
        except Exception:
            logger.exception("Persistence health check failed")
            persistence_ok = False

        return {
            "ready": self._running and gateway_ok and persistence_ok,
            "gateway_connected": gateway_ok,
            "persistence": persistence_ok,
        }

    async def handle_payload(self, raw: str) -> None:
        """Process one text frame from the gateway.

        Frames that are not JSON objects or not message events are ignored.
        """
        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring non-JSON frame: %.200s", raw)
            return

        if not isinstance(payload, dict) or payload.get("post_type") != "message":
            return

        try:
            event = await self._adapter.to_event(payload)
            outcome = await self._dispatcher.dispatch(event)
            logger.debug("Dispatched: outcome=%s", outcome.value)
        except Exception:
            logger.exception("Error handling gateway event")

    async def _handle_ws(self, request: web.Request) -> web.WebSocketResponse:
        """Handle the reverse WebSocket connection."""
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._reply_sender.attach(ws)
        logger.info("OneBot gateway connected from %s", request.remote)

        try:
            async for msg in ws:
                if msg.type == WSMsgType.TEXT:
                    await self.handle_payload(msg.data)
                elif msg.type == WSMsgType.ERROR:
                    logger.warning("Gateway connection error: %s", ws.exception())
        finally:
            self._reply_sender.detach(ws)
            logger.info("OneBot gateway disconnected")

        return ws

    async def _handle_live(self, request: web.Request) -> web.Response:
        """Handle /live endpoint."""
        result = await self.check_liveness()
        return web.json_response(result)

    async def _handle_ready(self, request: web.Request) -> web.Response:
        """Handle /ready endpoint."""
        result = await self.check_readiness()
        status = 200 if result["ready"] else 503
        return web.json_response(result, status=status)

    def create_app(self) -> web.Application:
        """Build the aiohttp application with all routes."""
        app = web.Application()
        app.router.add_get(self._config.path, self._handle_ws)
        app.router.add_get("/live", self._handle_live)
        app.router.add_get("/ready", self._handle_ready)
        return app

    async def start(self) -> None:
        """Start the HTTP server."""
        self._server = web.AppRunner(self.create_app())
        await self._server.setup()

        self._site = web.TCPSite(self._server, self._config.host, self._config.port)
        await self._site.start()

        # Get actual port (useful when port=0 for dynamic allocation)
        if self._site._server is not None:
            sockets = self._site._server.sockets  # type: ignore[union-attr]
            if sockets:
                self._actual_port = sockets[0].getsockname()[1]

        self._running = True
        logger.info(
            "Gateway listening on %s:%d%s",
            self._config.host,
            self.port,
            self._config.path,
        )

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self._server is not None:
            await self._server.cleanup()
            self._server = None
            self._site = None

        self._running = False
        logger.info("Gateway server stopped")
